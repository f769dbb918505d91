"""Tests for tool-call fragment accumulation."""

from __future__ import annotations

from contentgen.core.streaming.accumulator import ToolCallAccumulator, ToolCallEntry


class TestToolCallEntry:
    def test_arguments_join_fragments(self) -> None:
        entry = ToolCallEntry(id="c1", name="ls", fragments=['{"a"', ": 1}"])
        assert entry.arguments == '{"a": 1}'


class TestIndexedDeltas:
    def setup_method(self) -> None:
        self.acc = ToolCallAccumulator()

    def test_id_remembered_for_index(self) -> None:
        self.acc.add_delta(0, call_id="c1", name="get_weather", arguments="")
        self.acc.add_delta(0, arguments='{"loc')
        self.acc.add_delta(0, arguments='ation":"Paris"}')
        assert len(self.acc) == 1
        (call,) = self.acc.drain()
        assert call.id == "c1"
        assert call.name == "get_weather"
        assert call.args == {"location": "Paris"}

    def test_synthetic_key_without_id(self) -> None:
        self.acc.add_delta(2, name="ls", arguments="{}")
        (call,) = self.acc.drain()
        assert call.id == "call_2"

    def test_interleaved_calls_keep_arrival_order(self) -> None:
        self.acc.add_delta(0, call_id="a", name="read_file")
        self.acc.add_delta(1, call_id="b", name="ls")
        self.acc.add_delta(1, arguments='{"dir": "/"}')
        self.acc.add_delta(0, arguments='{"path": "/x"}')
        first, second = self.acc.drain()
        assert (first.id, first.args) == ("a", {"absolute_path": "/x"})
        assert (second.id, second.args) == ("b", {"dir": "/"})

    def test_bad_arguments_become_empty(self) -> None:
        self.acc.add_delta(0, call_id="c1", name="ls", arguments='{"dir": ')
        self.acc.add_delta(1, call_id="c2", name="pwd", arguments="{}")
        first, second = self.acc.drain()
        assert first.args == {}
        assert second.name == "pwd"

    def test_non_string_fragments_dropped(self) -> None:
        self.acc.add_delta(0, call_id="c1", name="ls", arguments={"dir": "/"})
        self.acc.add_delta(0, arguments='{"dir": "/tmp"}')
        (call,) = self.acc.drain()
        assert call.args == {"dir": "/tmp"}

    def test_drain_resets(self) -> None:
        self.acc.add_delta(0, call_id="c1", name="ls")
        self.acc.drain()
        assert len(self.acc) == 0
        assert self.acc.drain() == []


class TestKeyedEntries:
    def test_start_and_append(self) -> None:
        acc = ToolCallAccumulator()
        acc.start("index_1", "toolu_1", "edit_file")
        acc.append("index_1", '{"path": "/a", ')
        acc.append("index_1", '"text": "x"}')
        (call,) = acc.drain()
        assert call.id == "toolu_1"
        assert call.name == "replace"
        assert call.args == {"file_path": "/a", "text": "x"}

    def test_append_ignores_non_string(self) -> None:
        acc = ToolCallAccumulator()
        acc.start("index_0", "toolu_1", "ls")
        acc.append("index_0", ["x"])
        acc.append("index_0", "{}")
        (call,) = acc.drain()
        assert call.args == {}

    def test_append_to_unknown_key_dropped(self) -> None:
        acc = ToolCallAccumulator()
        acc.append("index_9", "{}")
        assert len(acc) == 0

    def test_missing_id_falls_back_to_key(self) -> None:
        acc = ToolCallAccumulator()
        acc.start("index_0", None, "ls")
        (call,) = acc.drain()
        assert call.id == "index_0"
