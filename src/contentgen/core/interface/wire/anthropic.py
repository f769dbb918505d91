"""Wire schema for the Anthropic messages API."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Request content blocks
# ---------------------------------------------------------------------------


class TextBlock(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImageBlock(BaseModel):
    type: Literal["image"] = "image"
    source: dict[str, Any]


class ToolUseBlock(BaseModel):
    type: Literal["tool_use"] = "tool_use"
    id: str
    name: str
    input: dict[str, Any] = {}


class ToolResultBlock(BaseModel):
    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str
    content: str


RequestBlock = Annotated[
    TextBlock | ImageBlock | ToolUseBlock | ToolResultBlock,
    Field(discriminator="type"),
]


class AnthropicMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: list[RequestBlock]


class AnthropicTool(BaseModel):
    name: str
    description: str = ""
    input_schema: dict[str, Any]


class MessagesRequest(BaseModel):
    """Body of ``POST /v1/messages``."""

    model: str
    messages: list[AnthropicMessage]
    max_tokens: int
    temperature: float
    top_p: float
    system: str | None = None
    tools: list[AnthropicTool] | None = None
    stream: bool | None = None


# ---------------------------------------------------------------------------
# Responses and stream events
# ---------------------------------------------------------------------------


class ResponseBlock(BaseModel):
    """A content block in a response; unknown block types still validate."""

    type: str
    text: str | None = None
    id: str | None = None
    name: str | None = None
    # An object, or occasionally a JSON string; parsed leniently downstream.
    input: Any = None


class AnthropicUsage(BaseModel):
    input_tokens: int = 0
    output_tokens: int = 0


class MessagesResponse(BaseModel):
    id: str | None = None
    model: str | None = None
    content: list[ResponseBlock]
    stop_reason: str | None = None
    usage: AnthropicUsage | None = None


class StreamMessage(BaseModel):
    """The ``message`` object of a ``message_start`` event."""

    id: str | None = None
    content: list[ResponseBlock] = []
    usage: AnthropicUsage | None = None


class EventDelta(BaseModel):
    type: str | None = None
    text: str | None = None
    partial_json: Any = None
    stop_reason: str | None = None


class StreamEvent(BaseModel):
    """One ``data:`` payload of a streamed message."""

    type: str
    index: int = 0
    message: StreamMessage | None = None
    content_block: ResponseBlock | None = None
    delta: EventDelta | None = None
    usage: AnthropicUsage | None = None
    error: dict[str, Any] | None = None
