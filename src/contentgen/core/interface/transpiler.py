"""Transpiler protocol: converts between the normalized model and a backend wire format.

Each backend family (OpenAI-compatible, Anthropic) has a concrete
transpiler implementing both directions: normalized request -> wire
request, and wire response -> :class:`GenerateContentResponse`.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel

from contentgen.core.interface.models import GenerateContentRequest, GenerateContentResponse


@runtime_checkable
class Transpiler(Protocol):
    """Protocol for backend-specific request/response converters."""

    def to_provider(self, request: GenerateContentRequest, default_model: str | None = None) -> BaseModel:
        """Convert a normalized request into the backend's typed wire request.

        *default_model* is used when the request names no model.

        Raises:
            ConversionError: If no model can be determined.
        """
        ...

    def from_provider(self, payload: dict[str, Any]) -> GenerateContentResponse:
        """Convert a complete (non-streaming) backend response.

        Raises:
            ConversionError: If the payload holds no usable choice or content.
        """
        ...
