"""Tests for the Azure OpenAI generator."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from contentgen.config import GeneratorConfig
from contentgen.core.interface.models import Content, EmbedContentRequest, GenerateContentRequest
from contentgen.errors import ConfigurationError
from contentgen.generators.azure import AzureGenerator

COMPLETION: dict[str, Any] = {"choices": [{"message": {"content": "ok"}, "finish_reason": "stop"}]}


def _config(**overrides: Any) -> GeneratorConfig:
    values: dict[str, Any] = {
        "model": "gpt4o-deploy",
        "api_key": "azure-key",
        "base_url": "https://example.openai.azure.com/",
        "api_version": "2024-06-01",
    }
    values.update(overrides)
    return GeneratorConfig(**values)


class TestAzureGenerator:
    def test_requires_base_url(self) -> None:
        with pytest.raises(ConfigurationError, match="base_url"):
            AzureGenerator(_config(base_url=None))

    def test_requires_api_version(self) -> None:
        with pytest.raises(ConfigurationError, match="api_version"):
            AzureGenerator(_config(api_version=None))

    async def test_deployment_url_and_key_header(self, recorder: Any) -> None:
        rec = recorder(lambda request: httpx.Response(200, json=COMPLETION))
        async with AzureGenerator(_config(), transport=rec.transport) as generator:
            response = await generator.generate_content(
                GenerateContentRequest(contents=[Content.user("hi")])
            )
        assert response.text == "ok"
        assert str(rec.last.url) == (
            "https://example.openai.azure.com/openai/deployments/gpt4o-deploy/chat/completions"
            "?api-version=2024-06-01"
        )
        assert rec.last.headers["api-key"] == "azure-key"
        assert "Authorization" not in rec.last.headers

    async def test_embeddings_use_deployment(self, recorder: Any) -> None:
        rec = recorder(lambda request: httpx.Response(200, json={"data": [{"embedding": [0.5]}]}))
        async with AzureGenerator(_config(), transport=rec.transport) as generator:
            await generator.embed_content(
                EmbedContentRequest(model="embed-deploy", contents="hi")  # type: ignore[arg-type]
            )
        assert str(rec.last.url) == (
            "https://example.openai.azure.com/openai/deployments/embed-deploy/embeddings?api-version=2024-06-01"
        )
