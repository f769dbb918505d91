"""Tests for the error taxonomy."""

from __future__ import annotations

import pytest

from contentgen.errors import (
    ConfigurationError,
    ContentGenerationError,
    ConversionError,
    HttpError,
    NetworkError,
    RequestTimeoutError,
    ToolDiscoveryError,
    UnsupportedOperationError,
    UnsupportedProviderError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc",
        [
            NetworkError("OpenAI"),
            RequestTimeoutError("OpenAI"),
            HttpError("OpenAI", 500),
            ConversionError("bad"),
            UnsupportedProviderError("x"),
            UnsupportedOperationError("embed_content", "Anthropic"),
            ConfigurationError("missing"),
            ToolDiscoveryError("cmd", "boom"),
        ],
    )
    def test_all_derive_from_base(self, exc: Exception) -> None:
        assert isinstance(exc, ContentGenerationError)


class TestMessages:
    def test_network_error(self) -> None:
        exc = NetworkError("Anthropic", "Please check your network connection.")
        assert str(exc) == (
            "Network error: Unable to connect to Anthropic API. Please check your network connection."
        )
        assert exc.provider == "Anthropic"

    def test_network_error_without_detail(self) -> None:
        assert str(NetworkError("OpenAI")) == "Network error: Unable to connect to OpenAI API."

    def test_timeout_with_seconds(self) -> None:
        exc = RequestTimeoutError("LM Studio", 30.0)
        assert "within 30s" in str(exc)
        assert exc.aborted is False

    def test_timeout_aborted(self) -> None:
        exc = RequestTimeoutError("OpenAI", aborted=True)
        assert exc.aborted is True
        assert "aborted" in str(exc)

    def test_http_error_prefers_guidance(self) -> None:
        exc = HttpError("OpenAI", 401, body='{"error": "nope"}', guidance="Invalid API key.")
        assert str(exc) == "OpenAI API error 401: Invalid API key."
        assert exc.status == 401
        assert exc.body == '{"error": "nope"}'

    def test_http_error_falls_back_to_body(self) -> None:
        assert str(HttpError("OpenAI", 418, body="teapot")) == "OpenAI API error 418: teapot"

    def test_unsupported_provider(self) -> None:
        exc = UnsupportedProviderError("x")
        assert str(exc) == "No content generator available for provider: x"
        assert exc.provider_id == "x"

    def test_tool_discovery(self) -> None:
        exc = ToolDiscoveryError("list-tools", "exit code 2")
        assert exc.command == "list-tools"
        assert "exit code 2" in str(exc)
