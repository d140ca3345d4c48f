"""OpenAI SDK wrapper for the text-generation capability"""

import logging
from typing import Optional

from openai import AsyncOpenAI

from theme_api.core.config import settings
from theme_api.models.errors import ConfigurationError, NoResponseError

logger = logging.getLogger(__name__)


class CompletionClient:
    """
    Wrapper around an OpenAI-compatible chat completion endpoint.

    One call, one prompt, one JSON-object-shaped text body back. No retries
    (the SDK's own retries are disabled too) and no parsing: that is the job of
    ``with_retry`` and ``call_and_parse``.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model or settings.completion_model
        self.temperature = settings.completion_temperature if temperature is None else temperature

        if client is not None:
            self.client = client
            return

        api_key = api_key or settings.completion_api_key
        if not api_key:
            logger.warning("[Completion] COMPLETION_API_KEY not set - every call will fail and fall back")
            self.client = None
            return

        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url or settings.completion_base_url,
            timeout=timeout or settings.completion_timeout,
            max_retries=0,
        )

    async def complete(self, prompt: str, max_output_tokens: int) -> str:
        """
        Send ``prompt`` and return the raw text of the first choice.

        Raises:
            ConfigurationError: no API key configured
            NoResponseError: the endpoint returned no usable content
        """
        if self.client is None:
            raise ConfigurationError(
                "Completion API key not configured. Please set COMPLETION_API_KEY in .env file."
            )

        logger.debug(f"[Completion] Calling {self.model} | max_tokens: {max_output_tokens}")
        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_output_tokens,
            temperature=self.temperature,
            response_format={"type": "json_object"},
        )

        choices = getattr(completion, "choices", None) or []
        raw = choices[0].message.content if choices else None
        if not raw or not raw.strip():
            raise NoResponseError("No valid response from completion API")

        logger.debug(f"[Completion] Response received ({len(raw)} chars)")
        return raw
