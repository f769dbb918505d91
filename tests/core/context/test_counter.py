"""Tests for token estimation."""

from __future__ import annotations

from contentgen.core.context.counter import EstimatingCounter, TokenCounter
from contentgen.core.interface.models import Content, FunctionCall, TextPart


class TestEstimatingCounter:
    def setup_method(self) -> None:
        self.counter = EstimatingCounter()

    def test_is_a_token_counter(self) -> None:
        assert isinstance(self.counter, TokenCounter)

    def test_rounds_up(self) -> None:
        assert self.counter.count_text("") == 0
        assert self.counter.count_text("abcd") == 1
        assert self.counter.count_text("abcde") == 2

    def test_contents_join_with_spaces(self) -> None:
        contents = [
            Content(role="user", parts=[TextPart(text="abc"), TextPart(text="def")]),
            Content.model("gh"),
        ]
        # "abc def gh" is 10 characters
        assert self.counter.count_contents(contents) == 3

    def test_tool_calls_not_counted(self) -> None:
        contents = [Content.model(function_calls=[FunctionCall(name="very_long_tool_name")])]
        assert self.counter.count_contents(contents) == 0

    def test_custom_ratio(self) -> None:
        assert EstimatingCounter(chars_per_token=2).count_text("abcde") == 3
