"""Per-backend behaviour flags.

Some backends need lossy or simplifying workarounds during request
conversion. Each workaround is a named flag on :class:`BackendCapabilities`
so converters never branch on provider names directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

if TYPE_CHECKING:
    from contentgen.config import GeneratorConfig


class BackendCapabilities(BaseModel):
    """Behaviour flags consulted by converters and generators.

    ``tool_results_as_text``
        Render tool results (and the calls that produced them) as Markdown
        text instead of structured tool messages. Lossy.
    ``simplify_tool_schemas``
        Strip JSON-Schema constructs that strict validators reject.
    ``supports_embeddings``
        The backend exposes an embeddings endpoint.
    ``stream_usage``
        Ask the backend to append a usage chunk to streamed responses.
    """

    tool_results_as_text: bool = False
    simplify_tool_schemas: bool = False
    supports_embeddings: bool = True
    stream_usage: bool = False

    @classmethod
    def from_capabilities_dict(cls, caps: dict[str, bool], **defaults: Any) -> BackendCapabilities:
        """Build flags from a flat override dict.

        Keys recognised: ``tool_results_as_text``, ``simplify_tool_schemas``,
        ``embeddings``, ``stream_usage``. Unknown keys are ignored.
        """
        mapping: dict[str, str] = {
            "tool_results_as_text": "tool_results_as_text",
            "simplify_tool_schemas": "simplify_tool_schemas",
            "embeddings": "supports_embeddings",
            "stream_usage": "stream_usage",
        }
        kwargs: dict[str, Any] = dict(defaults)
        for src_key, dst_key in mapping.items():
            if src_key in caps:
                kwargs[dst_key] = caps[src_key]
        return cls(**kwargs)


PROVIDER_DEFAULTS: dict[str, BackendCapabilities] = {
    "openai-compatible": BackendCapabilities(),
    "local-llm": BackendCapabilities(),
    "lm-studio": BackendCapabilities(stream_usage=True),
    "azure": BackendCapabilities(),
    "anthropic": BackendCapabilities(tool_results_as_text=True, supports_embeddings=False),
}


def resolve_capabilities(provider: str, config: GeneratorConfig) -> BackendCapabilities:
    """Resolve the flags for *provider* under *config*.

    Lookup order:
    1. Provider defaults (unknown providers get all defaults)
    2. ``simplify_tool_schemas`` switched on for DeepSeek base URLs
    3. Explicit ``config.capabilities`` overrides
    """
    profile = PROVIDER_DEFAULTS.get(provider, BackendCapabilities())

    if config.base_url and "deepseek" in config.base_url.lower():
        profile = profile.model_copy(update={"simplify_tool_schemas": True})

    if config.capabilities:
        profile = BackendCapabilities.from_capabilities_dict(
            config.capabilities,
            **profile.model_dump(),
        )

    return profile
