"""Stream reconciliation: backend SSE events -> ordered normalized frames.

A reconciler is fed raw transport chunks and returns the frames they
complete, strictly in arrival order:

- text deltas are emitted immediately;
- tool-call starts and argument deltas are accumulated silently;
- usage or finish metadata becomes a frame without text;
- the end of the stream (``[DONE]`` or transport close) flushes every
  accumulated tool call into one frame with finish reason ``tool_calls``.

Unparsable lines are skipped. Once closed, a reconciler ignores further
input. :func:`reconcile` drives a reconciler over an async chunk source.
"""

from __future__ import annotations

import asyncio
import contextlib
import enum
import json
import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from contentgen.core.interface.models import GenerateContentResponse, UsageMetadata
from contentgen.core.interface.transpilers.anthropic import convert_usage as anthropic_usage
from contentgen.core.interface.transpilers.common import map_finish_reason
from contentgen.core.interface.transpilers.openai import convert_usage as openai_usage
from contentgen.core.interface.wire.anthropic import StreamEvent
from contentgen.core.interface.wire.openai import ChatCompletionChunk
from contentgen.core.streaming.accumulator import ToolCallAccumulator
from contentgen.core.streaming.sse import LineBuffer, sse_data

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)

_TOOL_CALLS = "tool_calls"


class StreamState(enum.Enum):
    OPEN = "open"
    CLOSED = "closed"


class StreamReconciler:
    """Base reconciler: line buffering, tool-call accumulation, lifecycle.

    Subclasses implement :meth:`_handle_event` for one backend's event schema.
    """

    #: Payload that terminates the stream, if the backend sends one.
    done_sentinel: str | None = None
    #: Wire model each ``data:`` payload is validated against.
    event_model: type[BaseModel]

    def __init__(self) -> None:
        self.state = StreamState.OPEN
        self.aborted = False
        self._lines = LineBuffer()
        self._calls = ToolCallAccumulator()

    def feed(self, chunk: str | bytes) -> list[GenerateContentResponse]:
        """Consume a transport chunk and return the frames it completes."""
        if self.state is StreamState.CLOSED:
            return []
        frames: list[GenerateContentResponse] = []
        for line in self._lines.feed(chunk):
            frames.extend(self._handle_line(line))
            if self.state is StreamState.CLOSED:
                break
        return frames

    def finish(self) -> list[GenerateContentResponse]:
        """Signal transport completion: process any trailing line, then flush."""
        if self.state is StreamState.CLOSED:
            return []
        frames: list[GenerateContentResponse] = []
        tail = self._lines.flush()
        if tail:
            frames.extend(self._handle_line(tail))
        if self.state is StreamState.OPEN:
            frames.extend(self._flush())
        return frames

    def abort(self) -> None:
        """Close without flushing; pending tool calls are discarded."""
        self.aborted = True
        self.state = StreamState.CLOSED

    def _handle_line(self, line: str) -> list[GenerateContentResponse]:
        data = sse_data(line)
        if data is None or not data.strip():
            return []
        if self.done_sentinel is not None and data.strip() == self.done_sentinel:
            return self._flush()
        try:
            payload: Any = json.loads(data)
        except json.JSONDecodeError:
            logger.debug("Skipping unparsable stream line: %.200s", data)
            return []
        try:
            event = self.event_model.model_validate(payload)
        except ValidationError:
            logger.debug("Skipping unrecognised stream event: %.200s", data)
            return []
        return self._handle_event(event)

    def _handle_event(self, event: Any) -> list[GenerateContentResponse]:
        raise NotImplementedError

    def _flush(self) -> list[GenerateContentResponse]:
        self.state = StreamState.CLOSED
        calls = self._calls.drain()
        if not calls:
            return []
        return [GenerateContentResponse.from_parts(list(calls), finish_reason=_TOOL_CALLS)]


def _metadata_frame(finish_reason: str | None, usage: UsageMetadata | None) -> list[GenerateContentResponse]:
    """Frame for finish/usage metadata; tool-call finishes are left to the flush."""
    if finish_reason is not None and finish_reason != _TOOL_CALLS:
        return [GenerateContentResponse.from_parts([], finish_reason=finish_reason, usage=usage)]
    if usage is not None:
        return [GenerateContentResponse.usage_chunk(usage)]
    return []


# ---------------------------------------------------------------------------
# OpenAI-compatible streams
# ---------------------------------------------------------------------------


class OpenAIStreamReconciler(StreamReconciler):
    """Reconciles ``chat.completion.chunk`` events terminated by ``[DONE]``."""

    done_sentinel = "[DONE]"
    event_model = ChatCompletionChunk

    def _handle_event(self, event: ChatCompletionChunk) -> list[GenerateContentResponse]:
        frames: list[GenerateContentResponse] = []
        finish_reason: str | None = None

        if event.choices:
            choice = event.choices[0]
            delta = choice.delta
            if delta.content:
                frames.append(GenerateContentResponse.text_chunk(delta.content))
            for tc in delta.tool_calls or []:
                function = tc.function
                self._calls.add_delta(
                    tc.index,
                    call_id=tc.id,
                    name=function.name if function else None,
                    arguments=function.arguments if function else None,
                )
            if choice.finish_reason is not None:
                finish_reason = map_finish_reason(choice.finish_reason)

        frames.extend(_metadata_frame(finish_reason, openai_usage(event.usage)))
        return frames


# ---------------------------------------------------------------------------
# Anthropic streams
# ---------------------------------------------------------------------------


class AnthropicStreamReconciler(StreamReconciler):
    """Reconciles typed messages-API events; the stream ends on transport close."""

    event_model = StreamEvent

    def _handle_event(self, event: StreamEvent) -> list[GenerateContentResponse]:
        if event.type == "message_start":
            if event.message is not None and event.message.usage is not None:
                return [GenerateContentResponse.usage_chunk(anthropic_usage(event.message.usage))]
            return []

        if event.type == "content_block_start":
            block = event.content_block
            if block is None:
                return []
            if block.type == "tool_use":
                self._calls.start(f"index_{event.index}", block.id, block.name or "")
            elif block.type == "text" and block.text:
                return [GenerateContentResponse.text_chunk(block.text)]
            return []

        if event.type == "content_block_delta":
            delta = event.delta
            if delta is None:
                return []
            if delta.type == "text_delta" and delta.text:
                return [GenerateContentResponse.text_chunk(delta.text)]
            if delta.type == "input_json_delta" and delta.partial_json:
                self._calls.append(f"index_{event.index}", delta.partial_json)
            return []

        if event.type == "message_delta":
            stop_reason = event.delta.stop_reason if event.delta else None
            usage = anthropic_usage(event.usage) if event.usage is not None else None
            finish = map_finish_reason(stop_reason) if stop_reason is not None else None
            return _metadata_frame(finish, usage)

        if event.type == "error":
            logger.warning("Anthropic stream reported an error: %s", event.error)

        # message_stop, content_block_stop and ping carry nothing to emit.
        return []


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------


async def reconcile(
    reconciler: StreamReconciler,
    chunks: AsyncIterator[bytes],
    signal: asyncio.Event | None = None,
) -> AsyncIterator[GenerateContentResponse]:
    """Drive *reconciler* over *chunks*, yielding frames lazily.

    When *signal* is set the stream stops silently without a flush, even
    while a chunk read is in flight.
    """
    iterator = chunks.__aiter__()
    while True:
        try:
            chunk = await _next_chunk(iterator, signal)
        except StopAsyncIteration:
            break
        if chunk is None:
            logger.debug("Stream aborted by caller")
            reconciler.abort()
            return
        for frame in reconciler.feed(chunk):
            yield frame
        if reconciler.state is StreamState.CLOSED:
            return

    for frame in reconciler.finish():
        yield frame


async def _next_chunk(iterator: AsyncIterator[bytes], signal: asyncio.Event | None) -> bytes | None:
    """Next chunk, or ``None`` once *signal* fires."""
    if signal is None:
        return await iterator.__anext__()
    if signal.is_set():
        return None
    read = asyncio.ensure_future(iterator.__anext__())
    aborted = asyncio.ensure_future(signal.wait())
    try:
        await asyncio.wait({read, aborted}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        read.cancel()
        raise
    finally:
        aborted.cancel()
    if read.done():
        return read.result()
    read.cancel()
    with contextlib.suppress(asyncio.CancelledError, StopAsyncIteration):
        await read
    return None

