"""Tests for prompt → JSON → model calls with fallback substitution"""
import json

import pytest
from unittest.mock import AsyncMock, Mock

from theme_api.core.structured_call import StructuredCaller, parse_response
from theme_api.models.errors import NoResponseError, ParseError
from theme_api.models.theme import ContentResponse, Theme
from theme_api.steps.fallbacks import DEFAULT_THEME

from conftest import THEME_PAYLOAD, no_sleep


def make_caller(side_effect=None, return_value=None):
    client = Mock()
    client.complete = AsyncMock(side_effect=side_effect, return_value=return_value)
    return client, StructuredCaller(client, max_attempts=3, delay_ms=1000, sleep=no_sleep)


class TestParseResponse:

    def test_valid_object_without_model(self):
        assert parse_response('{"a": 1}') == {"a": 1}

    def test_invalid_json(self):
        with pytest.raises(ParseError):
            parse_response("not json at all")

    def test_array_is_rejected(self):
        with pytest.raises(ParseError) as exc_info:
            parse_response("[1, 2, 3]")
        assert "list" in exc_info.value.message

    def test_schema_mismatch(self):
        with pytest.raises(ParseError):
            parse_response('{"exampleText": {}}', ContentResponse)

    def test_validates_into_model(self):
        theme = parse_response(json.dumps(THEME_PAYLOAD), Theme)
        assert isinstance(theme, Theme)
        assert theme.primary_color == "#FF8C00"


class TestStructuredCaller:

    @pytest.mark.asyncio
    async def test_always_failing_client_returns_fallback(self):
        """Every attempt fails: exact fallback back, client called max_attempts times"""
        client, caller = make_caller(side_effect=NoResponseError("empty"))

        result = await caller.call("prompt", 500, DEFAULT_THEME, Theme, label="theme")

        assert result.value is DEFAULT_THEME
        assert result.used_fallback is True
        assert isinstance(result.error, NoResponseError)
        assert client.complete.call_count == 3

    @pytest.mark.asyncio
    async def test_unparseable_response_is_not_retried(self):
        client, caller = make_caller(return_value="{{{ definitely not json")

        result = await caller.call("prompt", 300, "fallback")

        assert result.value == "fallback"
        assert result.used_fallback is True
        assert isinstance(result.error, ParseError)
        assert client.complete.call_count == 1

    @pytest.mark.asyncio
    async def test_schema_mismatch_returns_fallback(self):
        _, caller = make_caller(return_value=json.dumps({"primaryColor": "#000"}))

        result = await caller.call("prompt", 500, DEFAULT_THEME, Theme)

        assert result.value is DEFAULT_THEME
        assert result.used_fallback is True

    @pytest.mark.asyncio
    async def test_valid_response_is_parsed(self):
        client, caller = make_caller(return_value=json.dumps(THEME_PAYLOAD))

        result = await caller.call("prompt", 500, DEFAULT_THEME, Theme)

        assert result.used_fallback is False
        assert result.error is None
        assert result.value.rounding == "medium"
        client.complete.assert_awaited_once_with("prompt", 500)

    @pytest.mark.asyncio
    async def test_transient_failure_then_success(self):
        client, caller = make_caller(side_effect=[RuntimeError("timeout"), json.dumps({"ok": True})])

        assert await caller.call_and_parse("prompt", 100, {"ok": False}) == {"ok": True}
        assert client.complete.call_count == 2
