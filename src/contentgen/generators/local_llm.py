"""Generator for local OpenAI-compatible servers such as Ollama."""

from __future__ import annotations

from contentgen.generators.openai_compatible import OpenAICompatibleGenerator


class LocalLlmGenerator(OpenAICompatibleGenerator):
    """Talks to ``{base_url}/v1/chat/completions``; auth is optional."""

    provider = "local-llm"
    label = "Local LLM"
    default_base_url = "http://localhost:11434"
    default_embedding_model = "nomic-embed-text"
    api_prefix = "/v1"
    placeholder_api_key = "dummy-key"
