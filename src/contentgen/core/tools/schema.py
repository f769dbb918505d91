"""JSON-Schema cleanup for tool parameter declarations.

Two passes with different contracts:

* :func:`sanitize_parameters` mutates a schema in place so it satisfies
  validators that reject ``default`` next to ``anyOf`` or unknown string
  formats.
* :func:`simplify_schema` returns a stripped copy for backends with strict
  schema validation (DeepSeek rejects combinators, patterns and enums).

Tool schemas come from external servers and may contain reference cycles,
so both walks track visited nodes by identity.
"""

from __future__ import annotations

from typing import Any

_SANITIZED_STRING_FORMATS = frozenset({"enum", "date-time"})
_SIMPLIFIED_FORMATS = frozenset({"date-time", "email", "uri"})
_UNSUPPORTED_KEYWORDS = ("anyOf", "oneOf", "allOf", "not", "$defs", "definitions", "pattern", "const", "enum")


def sanitize_parameters(schema: dict[str, Any] | None) -> None:
    """Sanitize *schema* in place.

    - ``default`` is dropped wherever ``anyOf`` is present.
    - String ``format`` is kept only for ``enum`` and ``date-time``.
    - ``anyOf`` members, ``items`` and ``properties`` values are visited;
      boolean sub-schemas are skipped.

    Each node is visited at most once, so cyclic schemas terminate.
    """
    _sanitize(schema, set())


def _sanitize(schema: Any, visited: set[int]) -> None:
    if not isinstance(schema, dict) or id(schema) in visited:
        return
    visited.add(id(schema))

    any_of = schema.get("anyOf")
    if any_of:
        schema.pop("default", None)
        for item in any_of:
            _sanitize(item, visited)

    items = schema.get("items")
    if isinstance(items, list):
        for item in items:
            _sanitize(item, visited)
    else:
        _sanitize(items, visited)

    properties = schema.get("properties")
    if isinstance(properties, dict):
        for item in properties.values():
            _sanitize(item, visited)

    schema_type = schema.get("type")
    if isinstance(schema_type, str) and schema_type.lower() == "string":
        fmt = schema.get("format")
        if fmt and fmt not in _SANITIZED_STRING_FORMATS:
            del schema["format"]


def simplify_schema(schema: Any) -> dict[str, Any]:
    """Return a simplified copy of *schema*; the input is not modified.

    Type names are lower-cased, combinators and validation keywords are
    removed, and only ``date-time``, ``email`` and ``uri`` formats survive.
    ``properties``, ``items`` and ``additionalProperties`` are simplified
    recursively. A back-reference to a node still being simplified is
    replaced by ``{}`` so the result is always a finite tree.
    """
    if not isinstance(schema, dict):
        return {"type": "object", "properties": {}}
    return _simplify(schema, set())


def _simplify(schema: dict[str, Any], active: set[int]) -> dict[str, Any]:
    if id(schema) in active:
        return {}
    active.add(id(schema))

    simplified = {k: v for k, v in schema.items() if k not in _UNSUPPORTED_KEYWORDS}

    schema_type = simplified.get("type")
    if isinstance(schema_type, str):
        simplified["type"] = schema_type.lower()
    elif isinstance(schema_type, list):
        simplified["type"] = [t.lower() if isinstance(t, str) else t for t in schema_type]

    if "format" in simplified and simplified["format"] not in _SIMPLIFIED_FORMATS:
        del simplified["format"]

    properties = simplified.get("properties")
    if isinstance(properties, dict):
        simplified["properties"] = {
            key: _simplify(value, active) if isinstance(value, dict) else value
            for key, value in properties.items()
        }

    for key in ("items", "additionalProperties"):
        value = simplified.get(key)
        if isinstance(value, dict):
            simplified[key] = _simplify(value, active)

    active.discard(id(schema))
    return simplified
