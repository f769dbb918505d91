"""Streaming reconciliation of backend event streams."""

from contentgen.core.streaming.accumulator import ToolCallAccumulator, ToolCallEntry
from contentgen.core.streaming.reconciler import (
    AnthropicStreamReconciler,
    OpenAIStreamReconciler,
    StreamReconciler,
    StreamState,
    reconcile,
)
from contentgen.core.streaming.sse import LineBuffer

__all__ = [
    "AnthropicStreamReconciler",
    "LineBuffer",
    "OpenAIStreamReconciler",
    "StreamReconciler",
    "StreamState",
    "ToolCallAccumulator",
    "ToolCallEntry",
    "reconcile",
]
