"""Generator for the Anthropic messages API."""

from __future__ import annotations

from contentgen.core.interface.transpilers.anthropic import AnthropicTranspiler
from contentgen.core.streaming.reconciler import AnthropicStreamReconciler
from contentgen.generators.base import HttpContentGenerator

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicGenerator(HttpContentGenerator):
    """Talks to ``{base_url}/v1/messages``. Embeddings are not offered."""

    provider = "anthropic"
    label = "Anthropic"
    default_base_url = "https://api.anthropic.com"
    reconciler_cls = AnthropicStreamReconciler

    def _make_transpiler(self) -> AnthropicTranspiler:
        return AnthropicTranspiler(self.capabilities)

    def _generate_url(self) -> str:
        return f"{self.base_url}/v1/messages"

    def _auth_headers(self) -> dict[str, str]:
        headers = {"anthropic-version": ANTHROPIC_VERSION}
        if self.config.api_key:
            headers["x-api-key"] = self.config.api_key
        return headers
