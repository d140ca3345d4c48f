"""Optional shared-key protection for the JSON API.

Applied as a router-level dependency to ``/api/*`` only. The SSE progress
stream is left open: browsers' ``EventSource`` cannot send custom headers,
and the stream only exposes a session whose random id the client already
holds.
"""

import hmac
import logging
from typing import Optional

from fastapi import Security
from fastapi.security import APIKeyHeader

from theme_api.core.config import settings
from theme_api.models.errors import ApplicationError, ErrorCode

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"

api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


async def require_api_key(api_key: Optional[str] = Security(api_key_header)) -> None:
    """
    Raises:
        ApplicationError: UNAUTHORIZED when a key is configured and the
            request's key is missing or different
    """
    expected = settings.api_key
    if not expected:
        return

    if api_key and hmac.compare_digest(api_key.encode(), expected.encode()):
        return

    logger.warning(f"[Auth] Rejected request | header_present: {bool(api_key)}")
    raise ApplicationError(
        "Missing or invalid API key",
        code=ErrorCode.UNAUTHORIZED,
        hint=f"Send the configured key in the {API_KEY_HEADER} header.",
    )
