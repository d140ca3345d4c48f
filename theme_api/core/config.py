"""Configuration and settings"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Completion API (OpenAI-compatible endpoint)
    completion_api_key: str = ""
    completion_base_url: str = "https://api.x.ai/v1"
    completion_model: str = "grok-2-1212"
    completion_temperature: float = 0.7
    completion_timeout: float = 60.0

    # Photo search (Pexels)
    pexels_api_key: str = ""
    pexels_api_url: str = "https://api.pexels.com/v1/search"
    photo_results: int = Field(default=5, ge=2)
    square_tolerance_px: int = 100

    # Retry policy
    retry_max_attempts: int = Field(default=3, ge=1)
    retry_delay_ms: int = Field(default=1000, ge=0)

    # Pipeline policy
    strict_steps: bool = False
    evolve_theme: bool = True

    # Server
    api_key: str = ""
    frontend_url: str = "http://localhost:3000"
    log_level: str = "INFO"
    session_ttl_minutes: int = 60

    # API Configuration
    api_title: str = "Theme Generator API"
    api_version: str = "0.1.0"


# Global settings instance
settings = Settings()
