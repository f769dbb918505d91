"""Tool-call normalization, schema cleanup, and tool discovery."""

from contentgen.core.tools.discovery import CommandToolSource, ToolSource, discover_tools, parse_declarations
from contentgen.core.tools.normalizer import build_function_call, normalize_tool_call, parse_arguments
from contentgen.core.tools.schema import sanitize_parameters, simplify_schema

__all__ = [
    "CommandToolSource",
    "ToolSource",
    "build_function_call",
    "discover_tools",
    "normalize_tool_call",
    "parse_arguments",
    "parse_declarations",
    "sanitize_parameters",
    "simplify_schema",
]
