"""Tests for the OpenAI-compatible completion wrapper"""
from types import SimpleNamespace

import pytest
from unittest.mock import AsyncMock, Mock

from theme_api.core.completion_client import CompletionClient
from theme_api.core.config import settings
from theme_api.models.errors import ConfigurationError, NoResponseError


def sdk_returning(content):
    sdk = Mock()
    choices = [SimpleNamespace(message=SimpleNamespace(content=content))] if content is not ... else []
    sdk.chat.completions.create = AsyncMock(return_value=SimpleNamespace(choices=choices))
    return sdk


class TestCompletionClient:

    @pytest.mark.asyncio
    async def test_returns_raw_text_and_requests_json_object(self):
        sdk = sdk_returning('{"rounding": "small"}')
        client = CompletionClient(model="grok-2-1212", temperature=0.7, client=sdk)

        raw = await client.complete("describe a theme", 500)

        assert raw == '{"rounding": "small"}'
        kwargs = sdk.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "grok-2-1212"
        assert kwargs["max_tokens"] == 500
        assert kwargs["temperature"] == 0.7
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"] == [{"role": "user", "content": "describe a theme"}]

    @pytest.mark.asyncio
    async def test_empty_content_raises_no_response(self):
        client = CompletionClient(client=sdk_returning("   "))

        with pytest.raises(NoResponseError):
            await client.complete("prompt", 300)

    @pytest.mark.asyncio
    async def test_no_choices_raises_no_response(self):
        client = CompletionClient(client=sdk_returning(...))

        with pytest.raises(NoResponseError):
            await client.complete("prompt", 300)

    @pytest.mark.asyncio
    async def test_missing_api_key_raises_configuration_error(self, monkeypatch):
        monkeypatch.setattr(settings, "completion_api_key", "")
        client = CompletionClient()

        assert client.client is None
        with pytest.raises(ConfigurationError):
            await client.complete("prompt", 300)

    def test_defaults_come_from_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "completion_model", "some-model")
        monkeypatch.setattr(settings, "completion_temperature", 0.2)
        client = CompletionClient(client=Mock())

        assert client.model == "some-model"
        assert client.temperature == 0.2
