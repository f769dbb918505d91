"""Line buffering for server-sent event streams.

Network chunks split lines (and UTF-8 sequences) at arbitrary byte
offsets. :class:`LineBuffer` releases only complete lines and carries the
trailing partial line into the next chunk.
"""

from __future__ import annotations

import codecs


class LineBuffer:
    """Accumulates text or bytes and yields complete lines."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""

    def feed(self, chunk: str | bytes) -> list[str]:
        """Add *chunk* and return every line it completed, without terminators."""
        text = self._decoder.decode(chunk) if isinstance(chunk, bytes) else chunk
        if not text:
            return []
        lines = (self._pending + text).split("\n")
        self._pending = lines.pop()
        return [line.rstrip("\r") for line in lines]

    def flush(self) -> str:
        """Return and clear the unterminated trailing line."""
        tail = self._pending + self._decoder.decode(b"", final=True)
        self._pending = ""
        return tail.rstrip("\r")


def sse_data(line: str) -> str | None:
    """Return the payload of a ``data:`` line, or ``None`` for any other line.

    ``event:``, ``id:``, comment and blank lines carry nothing the
    reconcilers need.
    """
    if not line.startswith("data:"):
        return None
    data = line[5:]
    if data.startswith(" "):
        data = data[1:]
    return data
