"""Tests for backend capability flags."""

from __future__ import annotations

from contentgen.config import GeneratorConfig
from contentgen.core.interface.capabilities import BackendCapabilities, resolve_capabilities


class TestBackendCapabilities:
    def test_defaults(self) -> None:
        caps = BackendCapabilities()
        assert caps.tool_results_as_text is False
        assert caps.simplify_tool_schemas is False
        assert caps.supports_embeddings is True
        assert caps.stream_usage is False

    def test_from_capabilities_dict(self) -> None:
        caps = BackendCapabilities.from_capabilities_dict(
            {"embeddings": False, "tool_results_as_text": True, "unknown": True},
        )
        assert caps.supports_embeddings is False
        assert caps.tool_results_as_text is True

    def test_from_capabilities_dict_keeps_defaults(self) -> None:
        caps = BackendCapabilities.from_capabilities_dict({}, stream_usage=True)
        assert caps.stream_usage is True


class TestResolveCapabilities:
    def test_anthropic_defaults(self) -> None:
        caps = resolve_capabilities("anthropic", GeneratorConfig(model="m"))
        assert caps.tool_results_as_text is True
        assert caps.supports_embeddings is False

    def test_lm_studio_streams_usage(self) -> None:
        caps = resolve_capabilities("lm-studio", GeneratorConfig(model="m"))
        assert caps.stream_usage is True

    def test_unknown_provider_gets_defaults(self) -> None:
        assert resolve_capabilities("native", GeneratorConfig(model="m")) == BackendCapabilities()

    def test_deepseek_base_url_simplifies_schemas(self) -> None:
        config = GeneratorConfig(model="deepseek-chat", base_url="https://api.DeepSeek.com/v1")
        assert resolve_capabilities("openai-compatible", config).simplify_tool_schemas is True

    def test_config_overrides_win(self) -> None:
        config = GeneratorConfig(model="m", capabilities={"tool_results_as_text": False})
        caps = resolve_capabilities("anthropic", config)
        assert caps.tool_results_as_text is False
        assert caps.supports_embeddings is False
