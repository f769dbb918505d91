"""Shared fixtures for generator tests: a recording httpx mock transport."""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
import pytest

from contentgen.generators.registry import reset_registry

Responder = Callable[[httpx.Request], "httpx.Response | Awaitable[httpx.Response]"]


class Recorder:
    """Records every request and answers it with *responder*."""

    def __init__(self, responder: Responder) -> None:
        self.responder = responder
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> Any:
        self.requests.append(request)
        return self.responder(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def body(self, index: int = -1) -> dict[str, Any]:
        return json.loads(self.requests[index].content)


@pytest.fixture
def recorder() -> Callable[[Responder], Recorder]:
    return Recorder


@pytest.fixture(autouse=True)
def _clean_registry() -> Any:
    reset_registry()
    yield
    reset_registry()


def sse_body(*payloads: Any) -> bytes:
    lines = []
    for payload in payloads:
        data = payload if isinstance(payload, str) else json.dumps(payload)
        lines.append(f"data: {data}\n\n")
    return "".join(lines).encode()


@pytest.fixture
def sse() -> Callable[..., bytes]:
    return sse_body
