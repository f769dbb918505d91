"""Normalized content model shared by every backend.

Conversations are sequences of :class:`Content` turns whose ``parts`` are a
discriminated union of text, tool calls, tool results and inline binary
data. Converters translate these to and from each backend's wire schema so
nothing above the generator layer ever sees a vendor payload.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_validator

# ---------------------------------------------------------------------------
# Parts
# ---------------------------------------------------------------------------


class TextPart(BaseModel):
    """Plain text."""

    type: Literal["text"] = "text"
    text: str


class FunctionCall(BaseModel):
    """A tool invocation requested by the model."""

    type: Literal["function_call"] = "function_call"
    id: str | None = None
    name: str
    args: dict[str, Any] = {}


class FunctionResponse(BaseModel):
    """The result of executing a tool, sent back on a user turn."""

    type: Literal["function_response"] = "function_response"
    id: str | None = None
    name: str
    response: dict[str, Any] | str = {}


class InlineData(BaseModel):
    """Base64-encoded binary payload (images, documents)."""

    type: Literal["inline_data"] = "inline_data"
    mime_type: str
    data: str


Part = Annotated[
    TextPart | FunctionCall | FunctionResponse | InlineData,
    Field(discriminator="type"),
]

_PART_TYPES = (TextPart, FunctionCall, FunctionResponse, InlineData)


# ---------------------------------------------------------------------------
# Conversation turns
# ---------------------------------------------------------------------------


class Content(BaseModel):
    """A single conversation turn.

    Only ``user`` and ``model`` roles exist here; backend roles such as
    ``assistant``, ``system`` and ``tool`` are mapped at the converter boundary.
    """

    role: Literal["user", "model"] = "user"
    parts: list[Part] = []

    @property
    def text(self) -> str:
        """Concatenated text of all text parts."""
        return "".join(p.text for p in self.parts if isinstance(p, TextPart))

    @property
    def function_calls(self) -> list[FunctionCall]:
        return [p for p in self.parts if isinstance(p, FunctionCall)]

    @property
    def function_responses(self) -> list[FunctionResponse]:
        return [p for p in self.parts if isinstance(p, FunctionResponse)]

    @classmethod
    def user(cls, text: str) -> Content:
        """Create a user turn holding a single text part."""
        parts: list[Part] = [TextPart(text=text)]
        return cls(role="user", parts=parts)

    @classmethod
    def model(cls, text: str = "", function_calls: list[FunctionCall] | None = None) -> Content:
        """Create a model turn from text and optional tool calls."""
        parts: list[Part] = [TextPart(text=text)] if text else []
        parts.extend(function_calls or [])
        return cls(role="model", parts=parts)


def _coerce_content(item: Any) -> Any:
    """Wrap bare strings and parts into a user turn; leave turns untouched."""
    if isinstance(item, str):
        return {"role": "user", "parts": [{"type": "text", "text": item}]}
    if isinstance(item, _PART_TYPES):
        return {"role": "user", "parts": [item]}
    if isinstance(item, dict) and "parts" not in item and "type" in item:
        return {"role": "user", "parts": [item]}
    return item


def coerce_contents(value: Any) -> Any:
    """Normalize the accepted ``contents`` shapes into a list of turns.

    Accepts a string, a single part, a single turn, or a list mixing those.
    """
    if isinstance(value, (list, tuple)):
        return [_coerce_content(item) for item in value]
    return [_coerce_content(value)]


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class GenerationConfig(BaseModel):
    """Sampling and output-format knobs for a single request."""

    temperature: float | None = None
    top_p: float | None = None
    max_output_tokens: int | None = None
    response_mime_type: str | None = None
    response_schema: dict[str, Any] | None = None
    system_instruction: str | None = None

    @property
    def wants_json(self) -> bool:
        """True when the caller asked for schema-constrained JSON output."""
        return self.response_mime_type == "application/json" and self.response_schema is not None


class ToolDeclaration(BaseModel):
    """A function the model may call.

    ``parameters`` is a JSON-Schema-like mapping and may contain reference
    cycles; every traversal of it carries an identity guard.
    """

    name: str
    description: str = ""
    parameters: dict[str, Any] | None = None


class GenerateContentRequest(BaseModel):
    """A generation request in normalized form."""

    model: str | None = None
    contents: list[Content]
    config: GenerationConfig = Field(default_factory=GenerationConfig)
    tools: list[ToolDeclaration] = []

    @field_validator("contents", mode="before")
    @classmethod
    def _normalize_contents(cls, value: Any) -> Any:
        return coerce_contents(value)


class EmbedContentRequest(BaseModel):
    """Text to embed; only text parts contribute."""

    model: str | None = None
    contents: list[Content]

    @field_validator("contents", mode="before")
    @classmethod
    def _normalize_contents(cls, value: Any) -> Any:
        return coerce_contents(value)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class UsageMetadata(BaseModel):
    """Token accounting reported by the backend."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class Candidate(BaseModel):
    content: Content
    finish_reason: str | None = None
    index: int = 0


class GenerateContentResponse(BaseModel):
    """A complete response or a single streaming frame.

    ``text`` and ``function_calls`` are derived from the first candidate, so
    they always agree with the parts they summarize. Usage-only streaming
    frames carry no candidates.
    """

    candidates: list[Candidate] = []
    usage: UsageMetadata | None = None

    @property
    def text(self) -> str:
        if not self.candidates:
            return ""
        return self.candidates[0].content.text

    @property
    def function_calls(self) -> list[FunctionCall]:
        if not self.candidates:
            return []
        return self.candidates[0].content.function_calls

    @property
    def finish_reason(self) -> str | None:
        if not self.candidates:
            return None
        return self.candidates[0].finish_reason

    @classmethod
    def from_parts(
        cls,
        parts: list[Part],
        finish_reason: str | None = None,
        usage: UsageMetadata | None = None,
    ) -> GenerateContentResponse:
        """Build a single-candidate response; an empty part list becomes one empty text part."""
        if not parts:
            parts = [TextPart(text="")]
        candidate = Candidate(content=Content(role="model", parts=parts), finish_reason=finish_reason)
        return cls(candidates=[candidate], usage=usage)

    @classmethod
    def text_chunk(cls, text: str) -> GenerateContentResponse:
        """Streaming frame carrying a text delta."""
        return cls.from_parts([TextPart(text=text)])

    @classmethod
    def usage_chunk(cls, usage: UsageMetadata) -> GenerateContentResponse:
        """Streaming frame carrying only token accounting."""
        return cls(usage=usage)


class CountTokensResponse(BaseModel):
    total_tokens: int


class ContentEmbedding(BaseModel):
    values: list[float] = []


class EmbedContentResponse(BaseModel):
    embeddings: list[ContentEmbedding] = []
