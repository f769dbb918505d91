"""OpenAI transpiler: chat-completions format shared by all OpenAI-compatible servers.

Key differences from the normalized model:
- Message content is a single string, so text parts are flattened.
- The model role is ``assistant``; tool calls ride on assistant messages.
- Tool results are separate ``tool`` messages keyed by ``tool_call_id``.
- JSON mode is emulated with a leading system message.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from contentgen.core.interface.capabilities import BackendCapabilities
from contentgen.core.interface.models import (
    Content,
    FunctionCall,
    FunctionResponse,
    GenerateContentRequest,
    GenerateContentResponse,
    InlineData,
    Part,
    TextPart,
    ToolDeclaration,
    UsageMetadata,
)
from contentgen.core.interface.transpilers.common import (
    has_tool_results,
    json_instruction,
    map_finish_reason,
    render_inline_data,
    render_tool_call,
    render_tool_results,
    response_text,
    sampling_params,
)
from contentgen.core.interface.wire.openai import (
    ChatCompletion,
    ChatCompletionRequest,
    ChatCompletionUsage,
    OpenAIFunctionCall,
    OpenAIFunctionDefinition,
    OpenAIMessage,
    OpenAITool,
    OpenAIToolCall,
)
from contentgen.core.tools.normalizer import build_function_call
from contentgen.core.tools.schema import simplify_schema
from contentgen.errors import ConversionError


class OpenAITranspiler:
    """Converts between the normalized model and OpenAI's chat-completions format."""

    def __init__(self, capabilities: BackendCapabilities | None = None) -> None:
        self.capabilities = capabilities or BackendCapabilities()

    def to_provider(
        self,
        request: GenerateContentRequest,
        default_model: str | None = None,
    ) -> ChatCompletionRequest:
        """Convert a normalized request to a chat-completions body.

        Turns with nothing renderable are dropped.
        """
        model = request.model or default_model
        if not model:
            raise ConversionError("No model specified for OpenAI-compatible request")

        messages: list[OpenAIMessage] = []
        config = request.config
        if config.wants_json and config.response_schema is not None:
            messages.append(OpenAIMessage(role="system", content=json_instruction(config.response_schema)))
        if config.system_instruction:
            messages.append(OpenAIMessage(role="system", content=config.system_instruction))

        for content in request.contents:
            messages.extend(self._content_to_openai(content))

        temperature, max_tokens, top_p = sampling_params(config)
        tools = [self._tool_to_openai(t) for t in request.tools]

        return ChatCompletionRequest(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            top_p=top_p,
            tools=tools or None,
        )

    def from_provider(self, payload: dict[str, Any]) -> GenerateContentResponse:
        """Convert a chat-completions response."""
        try:
            completion = ChatCompletion.model_validate(payload)
        except ValidationError as exc:
            raise ConversionError(f"Malformed OpenAI response: {exc}") from exc
        if not completion.choices:
            raise ConversionError("OpenAI response contained no choices")

        choice = completion.choices[0]
        message = choice.message

        parts: list[Part] = []
        if message.content:
            parts.append(TextPart(text=message.content))
        for i, tc in enumerate(message.tool_calls or []):
            parts.append(build_function_call(tc.id or f"call_{i}", tc.function.name, tc.function.arguments))

        return GenerateContentResponse.from_parts(
            parts,
            finish_reason=map_finish_reason(choice.finish_reason),
            usage=convert_usage(completion.usage),
        )

    def _content_to_openai(self, content: Content) -> list[OpenAIMessage]:
        """Convert one turn into zero or more OpenAI messages."""
        if self.capabilities.tool_results_as_text:
            return self._content_as_text(content)

        if content.role == "model":
            return self._model_turn(content)

        # Tool results must directly follow the assistant message that called them.
        messages = [
            OpenAIMessage(role="tool", tool_call_id=_call_id(r), content=response_text(r.response))
            for r in content.function_responses
        ]
        text = _flatten(content.parts)
        if text:
            messages.append(OpenAIMessage(role="user", content=text))
        return messages

    def _model_turn(self, content: Content) -> list[OpenAIMessage]:
        text = _flatten(content.parts)
        tool_calls = [
            OpenAIToolCall(
                id=_call_id(call),
                function=OpenAIFunctionCall(name=call.name, arguments=json.dumps(call.args)),
            )
            for call in content.function_calls
        ]
        if not text and not tool_calls:
            return []
        return [OpenAIMessage(role="assistant", content=text or None, tool_calls=tool_calls or None)]

    def _content_as_text(self, content: Content) -> list[OpenAIMessage]:
        if has_tool_results(content):
            text = render_tool_results(content)
        else:
            segments = [_flatten(content.parts)] + [render_tool_call(c) for c in content.function_calls]
            text = "\n".join(s for s in segments if s)
        if not text:
            return []
        role = "assistant" if content.role == "model" else "user"
        return [OpenAIMessage(role=role, content=text)]

    def _tool_to_openai(self, tool: ToolDeclaration) -> OpenAITool:
        parameters = tool.parameters or {"type": "object", "properties": {}}
        if self.capabilities.simplify_tool_schemas:
            parameters = simplify_schema(parameters)
        return OpenAITool(
            function=OpenAIFunctionDefinition(
                name=tool.name,
                description=tool.description,
                parameters=parameters,
            )
        )


def convert_usage(usage: ChatCompletionUsage | None) -> UsageMetadata | None:
    """Convert OpenAI token accounting; a missing total is derived."""
    if usage is None:
        return None
    total = usage.total_tokens
    if total is None:
        total = usage.prompt_tokens + usage.completion_tokens
    return UsageMetadata(
        prompt_tokens=usage.prompt_tokens,
        completion_tokens=usage.completion_tokens,
        total_tokens=total,
    )


def _flatten(parts: list[Part]) -> str:
    """Join text and inline-data placeholders with newlines."""
    segments: list[str] = []
    for part in parts:
        if isinstance(part, TextPart) and part.text:
            segments.append(part.text)
        elif isinstance(part, InlineData):
            segments.append(render_inline_data(part))
    return "\n".join(segments)


def _call_id(part: FunctionCall | FunctionResponse) -> str:
    """Use the explicit id, else derive one from the tool name."""
    return part.id or f"call_{part.name}"
