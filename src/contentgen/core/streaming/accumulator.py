"""Accumulation of tool-call fragments across streaming events."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from contentgen.core.interface.models import FunctionCall
from contentgen.core.tools.normalizer import build_function_call

logger = logging.getLogger(__name__)


@dataclass
class ToolCallEntry:
    """A tool call under construction: identity plus raw argument fragments."""

    id: str
    name: str = ""
    fragments: list[str] = field(default_factory=list)

    @property
    def arguments(self) -> str:
        return "".join(self.fragments)


class ToolCallAccumulator:
    """Collects tool-call entries in arrival order until the stream is flushed.

    OpenAI-style deltas are matched by explicit id, else by the id most
    recently seen at the same index, else by a synthetic ``call_<index>``
    key. Anthropic-style deltas address entries by the key they were
    started under.
    """

    def __init__(self) -> None:
        self._entries: dict[str, ToolCallEntry] = {}
        self._index_ids: dict[int, str] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def start(self, key: str, call_id: str | None, name: str) -> None:
        """Register a new entry under *key*."""
        self._entries[key] = ToolCallEntry(id=call_id or key, name=name)

    def append(self, key: str, fragment: Any) -> None:
        """Append an argument fragment to the entry started under *key*."""
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Dropping argument fragment for unknown tool call %s", key)
            return
        if _is_fragment(fragment):
            entry.fragments.append(fragment)

    def add_delta(
        self,
        index: int,
        call_id: str | None = None,
        name: str | None = None,
        arguments: Any = None,
    ) -> None:
        """Apply an index-addressed delta, creating the entry on first sight."""
        if call_id:
            self._index_ids[index] = call_id
        key = self._index_ids.get(index) or call_id or f"call_{index}"
        entry = self._entries.get(key)
        if entry is None:
            entry = ToolCallEntry(id=key)
            self._entries[key] = entry
        if name:
            entry.name = name
        if _is_fragment(arguments):
            entry.fragments.append(arguments)

    def drain(self) -> list[FunctionCall]:
        """Parse, normalize and return every entry, then reset.

        An entry whose arguments do not parse is returned with ``{}``.
        """
        calls = [build_function_call(e.id, e.name, e.arguments) for e in self._entries.values()]
        self._entries.clear()
        self._index_ids.clear()
        return calls


def _is_fragment(value: Any) -> bool:
    """Only non-empty strings extend the argument buffer."""
    if isinstance(value, str):
        return bool(value)
    if value is not None:
        logger.debug("Dropping non-string argument fragment of type %s", type(value).__name__)
    return False
