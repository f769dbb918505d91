"""Anthropic transpiler: handles system extraction, content blocks and role alternation.

Key differences from the normalized model:
- The system prompt is a top-level parameter, not a message.
- Messages must strictly alternate between user and assistant roles, so
  consecutive same-role messages are merged.
- Tool results are ``tool_result`` blocks on a user message, and that
  message needs some text alongside them.
- JSON mode is emulated with a leading text block in the first user turn.
"""

from __future__ import annotations

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
    UsageMetadata,
)
from contentgen.core.interface.transpilers.common import (
    TOOL_RESULTS_ONLY_TEXT,
    has_tool_results,
    json_instruction,
    map_finish_reason,
    render_tool_call,
    render_tool_results,
    response_text,
    sampling_params,
)
from contentgen.core.interface.wire.anthropic import (
    AnthropicMessage,
    AnthropicTool,
    AnthropicUsage,
    ImageBlock,
    MessagesRequest,
    MessagesResponse,
    RequestBlock,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
)
from contentgen.core.tools.normalizer import build_function_call
from contentgen.core.tools.schema import simplify_schema
from contentgen.errors import ConversionError


class AnthropicTranspiler:
    """Converts between the normalized model and Anthropic's messages API format."""

    def __init__(self, capabilities: BackendCapabilities | None = None) -> None:
        self.capabilities = capabilities or BackendCapabilities(tool_results_as_text=True)

    def to_provider(
        self,
        request: GenerateContentRequest,
        default_model: str | None = None,
    ) -> MessagesRequest:
        """Convert a normalized request to a messages API body.

        Turns with nothing renderable are dropped and consecutive same-role
        messages are merged.
        """
        model = request.model or default_model
        if not model:
            raise ConversionError("No model specified for Anthropic request")

        config = request.config
        contents = list(request.contents)
        system_parts: list[str] = []
        if config.system_instruction:
            system_parts.append(config.system_instruction)

        if config.wants_json and config.response_schema is not None:
            instruction = json_instruction(config.response_schema)
            first_user = next((i for i, c in enumerate(contents) if c.role == "user"), None)
            if first_user is None:
                system_parts.insert(0, instruction)
            else:
                turn = contents[first_user]
                parts: list[Part] = [TextPart(text=instruction), *turn.parts]
                contents[first_user] = Content(role="user", parts=parts)

        raw_messages: list[AnthropicMessage] = []
        for content in contents:
            message = self._content_to_anthropic(content)
            if message is not None:
                raw_messages.append(message)

        temperature, max_tokens, top_p = sampling_params(config)
        tools = [
            AnthropicTool(
                name=t.name,
                description=t.description,
                input_schema=self._input_schema(t.parameters),
            )
            for t in request.tools
        ]

        return MessagesRequest(
            model=model,
            messages=_merge_consecutive_roles(raw_messages),
            max_tokens=max_tokens,
            temperature=temperature,
            top_p=top_p,
            system="\n\n".join(system_parts) or None,
            tools=tools or None,
        )

    def from_provider(self, payload: dict[str, Any]) -> GenerateContentResponse:
        """Convert a messages API response.

        An empty ``content`` list is a valid empty answer; a missing one is not.
        """
        try:
            response = MessagesResponse.model_validate(payload)
        except ValidationError as exc:
            raise ConversionError(f"Malformed Anthropic response: {exc}") from exc

        text = ""
        calls: list[FunctionCall] = []
        for block in response.content:
            if block.type == "text":
                text += block.text or ""
            elif block.type == "tool_use":
                calls.append(build_function_call(block.id, block.name or "", block.input))

        parts: list[Part] = [TextPart(text=text)] if text else []
        parts.extend(calls)
        return GenerateContentResponse.from_parts(
            parts,
            finish_reason=map_finish_reason(response.stop_reason),
            usage=convert_usage(response.usage),
        )

    def _content_to_anthropic(self, content: Content) -> AnthropicMessage | None:
        """Convert one turn, or return ``None`` when it has nothing to send."""
        role = "assistant" if content.role == "model" else "user"
        if self.capabilities.tool_results_as_text:
            blocks = self._blocks_as_text(content)
        else:
            blocks = self._structured_blocks(content)
        if not blocks:
            return None
        return AnthropicMessage(role=role, content=blocks)

    def _blocks_as_text(self, content: Content) -> list[RequestBlock]:
        if has_tool_results(content):
            return [TextBlock(text=render_tool_results(content))]
        blocks: list[RequestBlock] = []
        for part in content.parts:
            if isinstance(part, TextPart):
                if part.text:
                    blocks.append(TextBlock(text=part.text))
            elif isinstance(part, InlineData):
                blocks.append(_image_block(part))
            elif isinstance(part, FunctionCall):
                blocks.append(TextBlock(text=render_tool_call(part)))
        return blocks

    def _structured_blocks(self, content: Content) -> list[RequestBlock]:
        results: list[RequestBlock] = []
        blocks: list[RequestBlock] = []
        for part in content.parts:
            if isinstance(part, TextPart):
                if part.text:
                    blocks.append(TextBlock(text=part.text))
            elif isinstance(part, InlineData):
                blocks.append(_image_block(part))
            elif isinstance(part, FunctionCall):
                blocks.append(ToolUseBlock(id=_tool_id(part), name=part.name, input=part.args))
            elif isinstance(part, FunctionResponse):
                results.append(ToolResultBlock(tool_use_id=_tool_id(part), content=response_text(part.response)))

        if not results:
            return blocks
        # tool_result blocks lead the user message; it also needs some text.
        if not any(isinstance(b, TextBlock) and b.text.strip() for b in blocks):
            blocks.append(TextBlock(text=TOOL_RESULTS_ONLY_TEXT))
        return results + blocks

    def _input_schema(self, parameters: dict[str, Any] | None) -> dict[str, Any]:
        schema = parameters or {"type": "object", "properties": {}}
        if self.capabilities.simplify_tool_schemas:
            schema = simplify_schema(schema)
        return schema


def convert_usage(usage: AnthropicUsage | None) -> UsageMetadata:
    """Convert Anthropic token accounting; the total is the sum of both sides."""
    if usage is None:
        return UsageMetadata()
    return UsageMetadata(
        prompt_tokens=usage.input_tokens,
        completion_tokens=usage.output_tokens,
        total_tokens=usage.input_tokens + usage.output_tokens,
    )


def _image_block(part: InlineData) -> ImageBlock:
    return ImageBlock(source={"type": "base64", "media_type": part.mime_type, "data": part.data})


def _tool_id(part: FunctionCall | FunctionResponse) -> str:
    return part.id or f"toolu_{part.name}"


def _merge_consecutive_roles(messages: list[AnthropicMessage]) -> list[AnthropicMessage]:
    """Merge consecutive messages with the same role.

    Anthropic requires strict user/assistant alternation. When multiple
    consecutive messages share a role, their blocks are concatenated.
    """
    merged: list[AnthropicMessage] = []
    for msg in messages:
        if merged and merged[-1].role == msg.role:
            merged[-1] = AnthropicMessage(role=msg.role, content=[*merged[-1].content, *msg.content])
        else:
            merged.append(msg)
    return merged
