"""Backend-specific transpiler implementations."""

from contentgen.core.interface.transpilers.anthropic import AnthropicTranspiler
from contentgen.core.interface.transpilers.openai import OpenAITranspiler

__all__ = ["AnthropicTranspiler", "OpenAITranspiler"]
