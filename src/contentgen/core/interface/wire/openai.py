"""Wire schema for the OpenAI chat-completions API.

Shared by every OpenAI-compatible backend (hosted OpenAI, Azure, Ollama,
LM Studio, DeepSeek). Response models are lenient: unknown fields are
ignored and optional fields default, so a server omitting ``usage`` or
``id`` still validates.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel

# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


class OpenAIFunctionCall(BaseModel):
    name: str
    arguments: str = "{}"


class OpenAIToolCall(BaseModel):
    id: str
    type: Literal["function"] = "function"
    function: OpenAIFunctionCall


class OpenAIMessage(BaseModel):
    role: Literal["system", "user", "assistant", "tool"]
    content: str | None = None
    tool_calls: list[OpenAIToolCall] | None = None
    tool_call_id: str | None = None


class OpenAIFunctionDefinition(BaseModel):
    name: str
    description: str = ""
    parameters: dict[str, Any] = {}


class OpenAITool(BaseModel):
    type: Literal["function"] = "function"
    function: OpenAIFunctionDefinition


class ChatCompletionRequest(BaseModel):
    """Body of ``POST .../chat/completions``."""

    model: str
    messages: list[OpenAIMessage]
    temperature: float
    max_tokens: int
    top_p: float
    tools: list[OpenAITool] | None = None
    stream: bool | None = None
    stream_options: dict[str, Any] | None = None
    frequency_penalty: float | None = None
    presence_penalty: float | None = None


# ---------------------------------------------------------------------------
# Non-streaming response
# ---------------------------------------------------------------------------


class ChatCompletionUsage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int | None = None


class ResponseFunctionCall(BaseModel):
    name: str = ""
    # Usually a JSON string; left untyped so a malformed value reaches parse_arguments.
    arguments: Any = None


class ResponseToolCall(BaseModel):
    id: str | None = None
    function: ResponseFunctionCall


class ResponseMessage(BaseModel):
    role: str | None = "assistant"
    content: str | None = None
    tool_calls: list[ResponseToolCall] | None = None


class ChatCompletionChoice(BaseModel):
    index: int = 0
    message: ResponseMessage
    finish_reason: str | None = None


class ChatCompletion(BaseModel):
    id: str | None = None
    model: str | None = None
    choices: list[ChatCompletionChoice] = []
    usage: ChatCompletionUsage | None = None


# ---------------------------------------------------------------------------
# Streaming chunks
# ---------------------------------------------------------------------------


class FunctionCallDelta(BaseModel):
    name: str | None = None
    arguments: Any = None


class ToolCallDelta(BaseModel):
    index: int = 0
    id: str | None = None
    function: FunctionCallDelta | None = None


class ChoiceDelta(BaseModel):
    role: str | None = None
    content: str | None = None
    tool_calls: list[ToolCallDelta] | None = None


class ChunkChoice(BaseModel):
    index: int = 0
    delta: ChoiceDelta = ChoiceDelta()
    finish_reason: str | None = None


class ChatCompletionChunk(BaseModel):
    """One ``data:`` payload of a streamed completion."""

    id: str | None = None
    choices: list[ChunkChoice] = []
    usage: ChatCompletionUsage | None = None


# ---------------------------------------------------------------------------
# Embeddings and model listing
# ---------------------------------------------------------------------------


class EmbeddingsRequest(BaseModel):
    input: str
    model: str


class EmbeddingData(BaseModel):
    index: int = 0
    embedding: list[float] = []


class EmbeddingsResponse(BaseModel):
    data: list[EmbeddingData] = []


class ModelEntry(BaseModel):
    id: str
    object: str | None = None
    created: int | None = None
    owned_by: str | None = None


class ModelList(BaseModel):
    data: list[ModelEntry] = []
