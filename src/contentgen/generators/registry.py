"""Provider id to generator factory resolution.

Built-in providers form a closed enum and always take precedence. Hosts
add further backends (for example a native vendor SDK) at startup with
:func:`register_generator`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from contentgen.config import GeneratorConfig
from contentgen.errors import UnsupportedProviderError
from contentgen.generators.anthropic import AnthropicGenerator
from contentgen.generators.azure import AzureGenerator
from contentgen.generators.base import ContentGenerator
from contentgen.generators.lm_studio import LMStudioGenerator
from contentgen.generators.local_llm import LocalLlmGenerator
from contentgen.generators.openai_compatible import OpenAICompatibleGenerator

logger = logging.getLogger(__name__)

GeneratorFactory = Callable[..., ContentGenerator]


class ProviderId(str, Enum):
    """Backends shipped with the package."""

    OPENAI_COMPATIBLE = "openai-compatible"
    LOCAL_LLM = "local-llm"
    LM_STUDIO = "lm-studio"
    AZURE = "azure"
    ANTHROPIC = "anthropic"


_BUILTINS: dict[ProviderId, GeneratorFactory] = {
    ProviderId.OPENAI_COMPATIBLE: OpenAICompatibleGenerator,
    ProviderId.LOCAL_LLM: LocalLlmGenerator,
    ProviderId.LM_STUDIO: LMStudioGenerator,
    ProviderId.AZURE: AzureGenerator,
    ProviderId.ANTHROPIC: AnthropicGenerator,
}

_registry: dict[str, GeneratorFactory] = {}


def _builtin(provider_id: str) -> ProviderId | None:
    try:
        return ProviderId(provider_id)
    except ValueError:
        return None


def create_generator(provider_id: str, config: GeneratorConfig, **kwargs: Any) -> ContentGenerator:
    """Build the generator for *provider_id*.

    Extra keyword arguments (e.g. ``transport``) are passed to the factory.

    Raises:
        UnsupportedProviderError: If the id is neither built in nor registered.
    """
    builtin = _builtin(provider_id)
    if builtin is not None:
        return _BUILTINS[builtin](config, **kwargs)
    factory = _registry.get(provider_id)
    if factory is None:
        raise UnsupportedProviderError(provider_id)
    return factory(config, **kwargs)


def register_generator(provider_id: str, factory: GeneratorFactory) -> None:
    """Make *factory* available under *provider_id*; the last registration wins."""
    if _builtin(provider_id) is not None:
        msg = f"Cannot register {provider_id!r}: it is a built-in provider"
        raise ValueError(msg)
    if provider_id in _registry:
        logger.warning("Overwriting content generator registration for provider %s", provider_id)
    _registry[provider_id] = factory


def unregister_generator(provider_id: str) -> None:
    _registry.pop(provider_id, None)


def reset_registry() -> None:
    """Drop every dynamic registration."""
    _registry.clear()


def registered_providers() -> list[str]:
    """Built-in ids followed by dynamically registered ones."""
    return [p.value for p in ProviderId] + sorted(_registry)
