"""Generator for Azure OpenAI deployments."""

from __future__ import annotations

from typing import TYPE_CHECKING

from contentgen.errors import ConfigurationError
from contentgen.generators.openai_compatible import OpenAICompatibleGenerator

if TYPE_CHECKING:
    import httpx

    from contentgen.config import GeneratorConfig


class AzureGenerator(OpenAICompatibleGenerator):
    """Talks to an Azure OpenAI deployment named by ``config.model``.

    Requires ``base_url`` (the resource endpoint) and ``api_version``; the
    key travels in the ``api-key`` header.
    """

    provider = "azure"
    label = "Azure OpenAI"
    default_embedding_model = None

    def __init__(
        self,
        config: GeneratorConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not config.base_url:
            msg = "Azure requires base_url (the resource endpoint URL)"
            raise ConfigurationError(msg)
        if not config.api_version:
            msg = "Azure requires api_version"
            raise ConfigurationError(msg)
        super().__init__(config, transport=transport)

    def _deployment_url(self, deployment: str, operation: str) -> str:
        return (
            f"{self.base_url}/openai/deployments/{deployment}/{operation}"
            f"?api-version={self.config.api_version}"
        )

    def _generate_url(self) -> str:
        return self._deployment_url(self.config.model, "chat/completions")

    def _embeddings_url(self, model: str) -> str:
        return self._deployment_url(model, "embeddings")

    def _auth_headers(self) -> dict[str, str]:
        if not self.config.api_key:
            return {}
        return {"api-key": self.config.api_key}
