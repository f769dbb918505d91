"""Token counting for requests.

Backends behind this layer expose no tokenizer endpoint, so counts are a
character-based estimate (about four characters per token). Good enough
for context budgeting; not an exact count.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from contentgen.core.interface.transpilers.common import extract_text

if TYPE_CHECKING:
    from contentgen.core.interface.models import Content

_CHARS_PER_TOKEN = 4


@runtime_checkable
class TokenCounter(Protocol):
    """Protocol for counting tokens in conversation turns."""

    def count_text(self, text: str) -> int: ...

    def count_contents(self, contents: list[Content]) -> int: ...


class EstimatingCounter:
    """Character-based estimator: ``ceil(len(text) / 4)``.

    Text parts across all turns are joined with single spaces before
    counting; tool calls, tool results and inline data are not counted.
    """

    def __init__(self, chars_per_token: int = _CHARS_PER_TOKEN) -> None:
        self._chars_per_token = chars_per_token

    def count_text(self, text: str) -> int:
        return math.ceil(len(text) / self._chars_per_token)

    def count_contents(self, contents: list[Content]) -> int:
        return self.count_text(extract_text(contents))
