"""Generator for OpenAI and any server speaking the chat-completions API."""

from __future__ import annotations

from typing import ClassVar

from contentgen.core.interface.transpilers.openai import OpenAITranspiler
from contentgen.core.streaming.reconciler import OpenAIStreamReconciler
from contentgen.generators.base import HttpContentGenerator


class OpenAICompatibleGenerator(HttpContentGenerator):
    """Talks to ``{base_url}/chat/completions`` with bearer auth.

    DeepSeek base URLs automatically get simplified tool schemas.
    """

    provider = "openai-compatible"
    label = "OpenAI"
    default_base_url = "https://api.openai.com/v1"
    default_embedding_model = "text-embedding-ada-002"
    reconciler_cls = OpenAIStreamReconciler

    #: Path prefix between ``base_url`` and the API routes.
    api_prefix: ClassVar[str] = ""
    #: Key value meaning "no real key configured"; no auth header is sent for it.
    placeholder_api_key: ClassVar[str | None] = None

    def _make_transpiler(self) -> OpenAITranspiler:
        return OpenAITranspiler(self.capabilities)

    def _generate_url(self) -> str:
        return f"{self.base_url}{self.api_prefix}/chat/completions"

    def _embeddings_url(self, model: str) -> str:
        return f"{self.base_url}{self.api_prefix}/embeddings"

    def _auth_headers(self) -> dict[str, str]:
        key = self.config.api_key
        if not key or key == self.placeholder_api_key:
            return {}
        return {"Authorization": f"Bearer {key}"}
