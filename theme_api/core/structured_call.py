"""Prompt → JSON → validated model, with retry and fallback substitution"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from theme_api.core.completion_client import CompletionClient
from theme_api.core.retry import with_retry
from theme_api.models.errors import ParseError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class StructuredResult(Generic[T]):
    """Outcome of a structured call: the value plus whether it is the fallback"""
    value: T
    used_fallback: bool = False
    error: Optional[Exception] = None


def parse_response(raw: str, response_model: Optional[Type[BaseModel]] = None) -> Any:
    """
    Parse raw model output as a JSON object and validate its shape.

    Raises:
        ParseError: not JSON, not an object, or structurally invalid
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        raise ParseError(f"Response is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise ParseError(f"Expected a JSON object, got {type(data).__name__}")

    if response_model is None:
        return data

    try:
        return response_model.model_validate(data)
    except ValidationError as e:
        raise ParseError(f"Response failed schema validation: {e.error_count()} error(s): {e.errors()[0]['msg']}")


class StructuredCaller:
    """
    Runs a prompt through the completion client (wrapped in ``with_retry``),
    parses the answer and, on any failure, hands back the caller's fallback.

    Never raises for model, network or parse failures. Callers that need to
    know whether real content came back use ``call`` and inspect
    ``used_fallback``.
    """

    def __init__(
        self,
        client: CompletionClient,
        max_attempts: Optional[int] = None,
        delay_ms: Optional[int] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.max_attempts = max_attempts
        self.delay_ms = delay_ms
        self.sleep = sleep

    async def call(
        self,
        prompt: str,
        max_output_tokens: int,
        fallback: T,
        response_model: Optional[Type[BaseModel]] = None,
        label: str = "call",
    ) -> StructuredResult[T]:
        try:
            raw = await with_retry(
                lambda: self.client.complete(prompt, max_output_tokens),
                max_attempts=self.max_attempts,
                delay_ms=self.delay_ms,
                sleep=self.sleep,
            )
            value = parse_response(raw, response_model)
        except Exception as e:
            logger.error(
                f"[StructuredCall] ✗ {label} failed, using fallback | "
                f"error_type: {type(e).__name__} | error: {e}"
            )
            return StructuredResult(value=fallback, used_fallback=True, error=e)

        logger.debug(f"[StructuredCall] ✓ {label} parsed")
        return StructuredResult(value=value)

    async def call_and_parse(
        self,
        prompt: str,
        max_output_tokens: int,
        fallback: T,
        response_model: Optional[Type[BaseModel]] = None,
    ) -> T:
        result = await self.call(prompt, max_output_tokens, fallback, response_model)
        return result.value
