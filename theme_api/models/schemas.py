"""API request/response schemas"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


class GenerateRequest(BaseModel):
    """POST /api/generate request"""
    prompt: str = Field(..., description="Free-text description of the site")
    evolve_theme: Optional[bool] = Field(default=None, description="Use the session's current theme as a starting point")
    session_id: Optional[str] = Field(default=None, description="Reuse an existing session")

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("prompt must be a non-empty string")
        if len(v) > 2000:
            raise ValueError(f"prompt too long: {len(v)} chars. Expected at most 2000.")
        return v


class GenerateResponse(BaseModel):
    """POST /api/generate response

    Returns session_id for tracking progress via SSE.
    """
    session_id: str
    run_id: int


class RetryRequest(BaseModel):
    """POST /api/retry request"""
    session_id: str
    step: str


class ThemeRegenerateRequest(BaseModel):
    """POST /api/theme/regenerate request"""
    session_id: str
    prompt: str

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("prompt must be a non-empty string")
        return v


class ThemeUpdateRequest(BaseModel):
    """PATCH /api/theme request"""
    session_id: str
    overrides: Dict[str, Any]


class ProgressEvent(BaseModel):
    """SSE progress event"""
    ts: str
    session_id: str
    run_id: int
    kind: str
    step: Optional[str] = None
    status: str = Field(..., description="idle|running|error")
    detail: str


class ErrorResponse(BaseModel):
    """Error response"""
    error_id: str
    code: str
    message: str
    hint: Optional[str] = None
    retryable: bool = False
    step: Optional[str] = None
