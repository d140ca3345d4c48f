"""Bounded retry for async operations"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from theme_api.core.config import settings
from theme_api.models.errors import MaxRetriesExceededError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: Optional[int] = None,
    delay_ms: Optional[int] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Call ``operation`` up to ``max_attempts`` times.

    A fixed ``delay_ms`` pause separates consecutive attempts (never before the
    first one, never after the last). When every attempt fails the last
    exception is re-raised unchanged.
    """
    if max_attempts is None:
        max_attempts = settings.retry_max_attempts
    if delay_ms is None:
        delay_ms = settings.retry_delay_ms

    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except Exception as e:
            if attempt == max_attempts:
                logger.warning(f"[Retry] ✗ Giving up after {attempt} attempts | error: {e}")
                raise
            logger.info(f"[Retry] Attempt {attempt}/{max_attempts} failed, retrying in {delay_ms}ms | error: {e}")
            await sleep(delay_ms / 1000)

    raise MaxRetriesExceededError(f"Max retries reached ({max_attempts} attempts configured)")
