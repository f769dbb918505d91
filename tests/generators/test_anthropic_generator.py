"""Tests for the Anthropic generator."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from contentgen.config import GeneratorConfig
from contentgen.core.interface.models import (
    Content,
    EmbedContentRequest,
    FunctionCall,
    FunctionResponse,
    GenerateContentRequest,
    GenerationConfig,
)
from contentgen.errors import HttpError, UnsupportedOperationError
from contentgen.generators.anthropic import ANTHROPIC_VERSION, AnthropicGenerator

MODEL = "claude-sonnet-4-20250514"
MESSAGE: dict[str, Any] = {
    "id": "msg_1",
    "type": "message",
    "role": "assistant",
    "model": MODEL,
    "content": [{"type": "text", "text": "Bonjour"}],
    "stop_reason": "end_turn",
    "usage": {"input_tokens": 5, "output_tokens": 2},
}


def _generator(rec: Any, **config: Any) -> AnthropicGenerator:
    config.setdefault("model", MODEL)
    config.setdefault("api_key", "sk-ant")
    return AnthropicGenerator(GeneratorConfig(**config), transport=rec.transport)


class TestGenerateContent:
    async def test_request_shape(self, recorder: Any) -> None:
        rec = recorder(lambda request: httpx.Response(200, json=MESSAGE))
        request = GenerateContentRequest(
            contents=[Content.user("Say hello in French")],
            config=GenerationConfig(system_instruction="Be brief.", max_output_tokens=64),
        )
        async with _generator(rec) as generator:
            response = await generator.generate_content(request)

        assert response.text == "Bonjour"
        assert response.finish_reason == "STOP"
        assert response.usage is not None
        assert response.usage.total_tokens == 7

        assert str(rec.last.url) == "https://api.anthropic.com/v1/messages"
        assert rec.last.headers["x-api-key"] == "sk-ant"
        assert rec.last.headers["anthropic-version"] == ANTHROPIC_VERSION
        assert "Authorization" not in rec.last.headers
        body = rec.body()
        assert body["model"] == MODEL
        assert body["system"] == "Be brief."
        assert body["max_tokens"] == 64
        assert body["messages"] == [{"role": "user", "content": [{"type": "text", "text": "Say hello in French"}]}]

    async def test_tool_history_sent_as_text(self, recorder: Any) -> None:
        rec = recorder(lambda request: httpx.Response(200, json=MESSAGE))
        request = GenerateContentRequest(
            contents=[
                Content.user("List files"),
                Content.model(function_calls=[FunctionCall(id="toolu_1", name="ls", args={})]),
                Content(role="user", parts=[FunctionResponse(id="toolu_1", name="ls", response="a.txt")]),
            ]
        )
        async with _generator(rec) as generator:
            await generator.generate_content(request)
        messages = rec.body()["messages"]
        assert [m["role"] for m in messages] == ["user", "assistant", "user"]
        blocks = [b for m in messages for b in m["content"]]
        assert all(b["type"] == "text" for b in blocks)
        assert "## Tool Execution Completed" in messages[2]["content"][0]["text"]

    async def test_structured_tool_history_when_enabled(self, recorder: Any) -> None:
        rec = recorder(lambda request: httpx.Response(200, json=MESSAGE))
        request = GenerateContentRequest(
            contents=[
                Content.model(function_calls=[FunctionCall(id="toolu_1", name="ls", args={})]),
                Content(role="user", parts=[FunctionResponse(id="toolu_1", name="ls", response="a.txt")]),
            ]
        )
        async with _generator(rec, capabilities={"tool_results_as_text": False}) as generator:
            await generator.generate_content(request)
        messages = rec.body()["messages"]
        assert messages[0]["content"][0] == {"type": "tool_use", "id": "toolu_1", "name": "ls", "input": {}}
        assert messages[1]["content"][0] == {"type": "tool_result", "tool_use_id": "toolu_1", "content": "a.txt"}

    async def test_overloaded(self, recorder: Any) -> None:
        rec = recorder(lambda request: httpx.Response(529, text='{"type": "error"}'))
        async with _generator(rec) as generator:
            with pytest.raises(HttpError, match="Anthropic API server error"):
                await generator.generate_content(GenerateContentRequest(contents="hi"))  # type: ignore[arg-type]


class TestStreaming:
    async def test_paris_weather(self, recorder: Any) -> None:
        body = (
            b"event: message_start\n"
            b'data: {"type": "message_start", "message": {"id": "msg_1", "usage": {"input_tokens": 12, "output_tokens": 1}}}\n\n'
            b"event: content_block_start\n"
            b'data: {"type": "content_block_start", "index": 0, "content_block": {"type": "tool_use", "id": "c1", "name": "get_weather", "input": {}}}\n\n'
            b"event: content_block_delta\n"
            b'data: {"type": "content_block_delta", "index": 0, "delta": {"type": "input_json_delta", "partial_json": "{\\"loc"}}\n\n'
            b"event: content_block_delta\n"
            b'data: {"type": "content_block_delta", "index": 0, "delta": {"type": "input_json_delta", "partial_json": "ation\\":\\"Paris\\"}"}}\n\n'
            b"event: message_delta\n"
            b'data: {"type": "message_delta", "delta": {"stop_reason": "tool_use"}, "usage": {"output_tokens": 20}}\n\n'
            b"event: message_stop\n"
            b'data: {"type": "message_stop"}\n\n'
        )
        rec = recorder(lambda request: httpx.Response(200, content=body))
        async with _generator(rec) as generator:
            frames = [
                f async for f in generator.generate_content_stream(
                    GenerateContentRequest(contents="What's the weather in Paris?")  # type: ignore[arg-type]
                )
            ]
        assert rec.body()["stream"] is True
        last = frames[-1]
        (call,) = last.function_calls
        assert (call.id, call.name, call.args) == ("c1", "get_weather", {"location": "Paris"})
        assert last.finish_reason == "tool_calls"


class TestUnsupported:
    async def test_embeddings_unsupported(self, recorder: Any) -> None:
        rec = recorder(lambda request: httpx.Response(200, json={}))
        async with _generator(rec) as generator:
            with pytest.raises(UnsupportedOperationError, match="embed_content"):
                await generator.embed_content(EmbedContentRequest(contents="hi"))  # type: ignore[arg-type]
        assert rec.requests == []

    async def test_count_tokens_offline(self, recorder: Any) -> None:
        rec = recorder(lambda request: httpx.Response(500))
        async with _generator(rec) as generator:
            result = await generator.count_tokens(GenerateContentRequest(contents="abcdefgh"))  # type: ignore[arg-type]
        assert result.total_tokens == 2
