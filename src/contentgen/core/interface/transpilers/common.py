"""Helpers shared by every transpiler and stream reconciler."""

from __future__ import annotations

import json
from typing import Any

from contentgen.core.interface.models import (
    Content,
    FunctionCall,
    FunctionResponse,
    GenerationConfig,
    InlineData,
    TextPart,
)

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2048
DEFAULT_TOP_P = 1.0

TOOL_RESULTS_ONLY_TEXT = "Here are the tool results:"

_FINISH_REASONS: dict[str, str] = {
    "stop": "STOP",
    "end_turn": "STOP",
    "tool_calls": "tool_calls",
    "function_call": "tool_calls",
    "tool_use": "tool_calls",
}


def map_finish_reason(reason: str | None) -> str:
    """Map a backend stop reason to the normalized vocabulary.

    Unknown reasons (``length``, ``max_tokens``, ``content_filter``) pass
    through unchanged; a missing reason means a normal stop.
    """
    if reason is None:
        return "STOP"
    return _FINISH_REASONS.get(reason, reason)


def json_instruction(schema: dict[str, Any]) -> str:
    """Instruction text that emulates schema-constrained JSON output."""
    return (
        "You must respond with valid JSON only. No additional text, explanations, or formatting. "
        f"The response must conform to this schema: {json.dumps(schema)}"
    )


def sampling_params(config: GenerationConfig) -> tuple[float, int, float]:
    """Return ``(temperature, max_tokens, top_p)`` with defaults for unset values.

    Only ``None`` counts as unset; an explicit ``0`` is honoured.
    """
    temperature = DEFAULT_TEMPERATURE if config.temperature is None else config.temperature
    max_tokens = DEFAULT_MAX_TOKENS if config.max_output_tokens is None else config.max_output_tokens
    top_p = DEFAULT_TOP_P if config.top_p is None else config.top_p
    return temperature, max_tokens, top_p


def response_text(response: dict[str, Any] | str) -> str:
    """Render a tool result payload as text."""
    if isinstance(response, str):
        return response
    return json.dumps(response, indent=2)


def render_tool_results(content: Content) -> str:
    """Render a user turn holding tool results as a Markdown summary.

    This is a lossy fallback for backends that cannot sustain structured
    multi-turn tool results: result ids are dropped and the model sees
    prose instead of tool-result blocks. Existing text comes first.
    """
    texts = [p.text for p in content.parts if isinstance(p, TextPart) and p.text]
    summary = ""
    if texts:
        summary = "\n".join(texts) + "\n\n"
    summary += "## Tool Execution Completed\n\n"
    summary += "The following tools have been executed successfully:\n\n"
    for result in content.function_responses:
        summary += f"### {result.name}\n```\n{response_text(result.response)}\n```\n\n"
    summary += "**Task completed successfully.** Please provide a summary of these results and any insights."
    return summary


def render_tool_call(call: FunctionCall) -> str:
    """Render a tool call as text, for backends that receive results as text."""
    return f"Calling tool `{call.name}` with arguments:\n```json\n{json.dumps(call.args, indent=2)}\n```"


def render_inline_data(part: InlineData) -> str:
    """Placeholder text for binary data on text-only wire formats."""
    return f"[inline data: {part.mime_type}]"


def has_tool_results(content: Content) -> bool:
    return content.role == "user" and any(isinstance(p, FunctionResponse) for p in content.parts)


def extract_text(contents: list[Content]) -> str:
    """Join the text of every part across *contents* with spaces."""
    return " ".join(" ".join(p.text for p in c.parts if isinstance(p, TextPart)) for c in contents)
