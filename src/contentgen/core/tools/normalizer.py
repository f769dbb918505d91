"""Tool-call name and argument normalization.

Models trained against different tool conventions call the same tool by
different names (``edit_file`` vs ``replace``) and with different argument
keys (``path`` vs ``file_path``). Every tool call leaving a converter or a
stream reconciler passes through :func:`normalize_tool_call` so the CLI
only ever dispatches canonical names and keys.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from contentgen.core.interface.models import FunctionCall

logger = logging.getLogger(__name__)

NAME_ALIASES: dict[str, str] = {
    "edit": "replace",
    "edit_file": "replace",
    "append": "write_file",
    "append_file": "write_file",
    "append_to_file": "write_file",
}

# Aliases that lose semantics: the target tool overwrites instead of appending.
_LOSSY_NAMES = frozenset({"append", "append_file", "append_to_file"})

# Per tool: (observed key, canonical key), applied in order.
ARGUMENT_ALIASES: dict[str, list[tuple[str, str]]] = {
    "read_file": [
        ("file_path", "absolute_path"),
        ("path", "absolute_path"),
    ],
    "write_file": [
        ("absolute_path", "file_path"),
        ("path", "file_path"),
        ("text", "content"),
        ("contents", "content"),
        ("data", "content"),
    ],
    "replace": [
        ("absolute_path", "file_path"),
        ("path", "file_path"),
        ("original_string", "old_string"),
        ("original_text", "old_string"),
        ("replacement_string", "new_string"),
        ("replacement_text", "new_string"),
        ("replacement", "new_string"),
    ],
}


def normalize_tool_call(name: str, args: dict[str, Any]) -> tuple[str, dict[str, Any]]:
    """Return the canonical ``(name, args)`` for a tool call.

    Pure: *args* is never mutated. Unknown names and keys pass through
    unchanged. A key alias only applies while the canonical key is absent;
    when it applies, the observed key is removed.
    """
    normalized = name.replace("-", "_")
    canonical = NAME_ALIASES.get(normalized, normalized)
    if normalized in _LOSSY_NAMES:
        logger.warning(
            "Tool %r has no append equivalent; mapping to %r, which overwrites the file",
            name,
            canonical,
        )

    result = dict(args)
    for observed, target in ARGUMENT_ALIASES.get(canonical, []):
        if target not in result and observed in result:
            result[target] = result.pop(observed)

    return canonical, result


def parse_arguments(raw: Any) -> dict[str, Any]:
    """Parse tool-call arguments delivered as an object or a JSON string.

    Anything that does not decode to a JSON object yields ``{}`` so one bad
    call never sinks the rest of the response.
    """
    if raw is None:
        return {}
    if isinstance(raw, dict):
        return dict(raw)
    if not isinstance(raw, str):
        logger.debug("Discarding tool arguments of type %s", type(raw).__name__)
        return {}
    if not raw.strip():
        return {}
    try:
        parsed: Any = json.loads(raw)
    except json.JSONDecodeError:
        logger.debug("Discarding unparsable tool arguments: %.200s", raw)
        return {}
    if not isinstance(parsed, dict):
        logger.debug("Discarding non-object tool arguments: %.200s", raw)
        return {}
    return parsed


def build_function_call(
    call_id: str | None,
    name: str,
    raw_args: Any,
) -> FunctionCall:
    """Parse and normalize one tool call into a :class:`FunctionCall`."""
    canonical, args = normalize_tool_call(name, parse_arguments(raw_args))
    return FunctionCall(id=call_id, name=canonical, args=args)
