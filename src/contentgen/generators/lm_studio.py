"""Generator for a local LM Studio server."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from contentgen.core.interface.wire.openai import ModelList
from contentgen.errors import ContentGenerationError, NetworkError, RequestTimeoutError
from contentgen.generators.local_llm import LocalLlmGenerator

if TYPE_CHECKING:
    from contentgen.core.interface.models import GenerateContentRequest

logger = logging.getLogger(__name__)

_LM_STUDIO_TOP_P = 0.9


class LMStudioGenerator(LocalLlmGenerator):
    """Talks to LM Studio's OpenAI-compatible server (default port 1234).

    Adds connection validation and model listing on top of the local-LLM
    adapter, and asks for usage in the final stream chunk.
    """

    provider = "lm-studio"
    label = "LM Studio"
    default_base_url = "http://127.0.0.1:1234"
    default_timeout = 30.0
    default_embedding_model = "text-embedding-nomic-embed-text-v1.5"
    placeholder_api_key = "lm-studio"

    def _tune_payload(self, payload: dict[str, Any], request: GenerateContentRequest, *, stream: bool) -> None:
        if request.config.top_p is None:
            payload["top_p"] = _LM_STUDIO_TOP_P
        payload.setdefault("frequency_penalty", 0)
        payload.setdefault("presence_penalty", 0)
        if stream and self.capabilities.stream_usage:
            payload["stream_options"] = {"include_usage": True}

    def _guidance(self, status: int) -> str | None:
        if status == 404:
            return (
                f"Model '{self.config.model}' not found or not loaded in LM Studio. "
                "Please load the model first."
            )
        if status == 503:
            return "LM Studio service unavailable. Please ensure LM Studio is running and a model is loaded."
        if status == 400:
            return "Bad request. Please check if the model supports function calling (tools)."
        return super()._guidance(status)

    async def validate_connection(self) -> dict[str, Any]:
        """Check that the server is up and has at least one model loaded.

        Returns:
            ``{"status": "connected", "models_available": n, "loaded_models": [...]}``

        Raises:
            NetworkError: If the server is unreachable or reports no models.
            RequestTimeoutError: If the server does not answer within 5s.
        """
        try:
            data = await self._get_json(f"{self.base_url}/v1/models", timeout=5.0)
        except RequestTimeoutError as exc:
            raise NetworkError(
                self.label,
                "Connection timed out. Please ensure LM Studio is running on port 1234.",
            ) from exc
        models = _model_ids(data)
        if not models:
            raise NetworkError(self.label, "No models loaded. Please load a model in LM Studio first.")
        logger.info("%s connected: %d model(s) loaded", self.label, len(models))
        return {"status": "connected", "models_available": len(models), "loaded_models": models}

    async def list_models(self) -> list[str]:
        """Ids of the models the server reports; empty on any failure."""
        try:
            data = await self._get_json(f"{self.base_url}/v1/models", timeout=10.0)
        except ContentGenerationError as exc:
            logger.warning("Failed to fetch LM Studio models: %s", exc)
            return []
        return _model_ids(data)


def _model_ids(data: dict[str, Any]) -> list[str]:
    try:
        return [entry.id for entry in ModelList.model_validate(data).data]
    except ValidationError:
        logger.warning("Unexpected model list payload from LM Studio")
        return []
