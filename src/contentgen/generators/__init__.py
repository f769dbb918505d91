"""Backend adapters and the provider registry."""

from contentgen.generators.anthropic import AnthropicGenerator
from contentgen.generators.azure import AzureGenerator
from contentgen.generators.base import ContentGenerator, HttpContentGenerator
from contentgen.generators.lm_studio import LMStudioGenerator
from contentgen.generators.local_llm import LocalLlmGenerator
from contentgen.generators.openai_compatible import OpenAICompatibleGenerator
from contentgen.generators.registry import (
    ProviderId,
    create_generator,
    register_generator,
    registered_providers,
    reset_registry,
    unregister_generator,
)

__all__ = [
    "AnthropicGenerator",
    "AzureGenerator",
    "ContentGenerator",
    "HttpContentGenerator",
    "LMStudioGenerator",
    "LocalLlmGenerator",
    "OpenAICompatibleGenerator",
    "ProviderId",
    "create_generator",
    "register_generator",
    "registered_providers",
    "reset_registry",
    "unregister_generator",
]
