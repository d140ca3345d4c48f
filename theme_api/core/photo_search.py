"""Pexels photo search client - HTTP-based implementation"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel

from theme_api.core.config import settings
from theme_api.models.errors import ConfigurationError

logger = logging.getLogger(__name__)


class PhotoCandidate(BaseModel):
    """One search hit: pixel dimensions and a directly usable URL"""
    width: int
    height: int
    url: str

    @property
    def is_landscape(self) -> bool:
        return self.width > self.height

    def is_near_square(self, tolerance_px: int) -> bool:
        return abs(self.width - self.height) < tolerance_px


class PexelsClient:
    """
    Searches Pexels for photos.

    Returns candidates in result order; HTTP and decoding errors propagate to
    the caller (the image helper turns them into default images).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key or settings.pexels_api_key
        self.api_url = api_url or settings.pexels_api_url
        if not self.api_key:
            logger.warning("[Pexels] PEXELS_API_KEY not set in .env file")
        self._client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=20.0)
        return self._client

    async def close(self):
        """Close HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def search(self, query: str, per_page: int = 5) -> List[PhotoCandidate]:
        """Search photos matching ``query``"""
        if not self.api_key:
            raise ConfigurationError("Pexels API key not configured. Please set PEXELS_API_KEY in .env file.")

        client = await self._get_client()
        logger.info(f"[Pexels] Searching | query: {query!r} | per_page: {per_page}")
        response = await client.get(
            self.api_url,
            params={"query": query, "per_page": per_page},
            headers={"Authorization": self.api_key},
        )
        response.raise_for_status()
        photos = response.json().get("photos") or []

        candidates = [c for c in (self._to_candidate(p) for p in photos) if c is not None]
        logger.info(f"[Pexels] ✓ {len(candidates)} candidates for {query!r}")
        return candidates

    @staticmethod
    def _to_candidate(photo: Dict[str, Any]) -> Optional[PhotoCandidate]:
        src = photo.get("src") or {}
        url = src.get("original")
        if not url or photo.get("width") is None or photo.get("height") is None:
            logger.debug(f"[Pexels] Skipping malformed photo entry: {photo.get('id')}")
            return None
        return PhotoCandidate(width=photo["width"], height=photo["height"], url=url)
