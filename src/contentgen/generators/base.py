"""Content generator protocol and the shared HTTP implementation.

Every backend adapter exposes the same four operations. The HTTP base
class owns the request lifecycle (serialization, headers, timeout,
cancellation, error translation, tracing); subclasses only choose URLs,
auth headers, the transpiler and the stream reconciler.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, TypeVar, runtime_checkable

import httpx
from pydantic import ValidationError

from contentgen import __version__
from contentgen.core.context.counter import EstimatingCounter
from contentgen.core.interface.capabilities import resolve_capabilities
from contentgen.core.interface.models import (
    ContentEmbedding,
    CountTokensResponse,
    EmbedContentRequest,
    EmbedContentResponse,
    GenerateContentRequest,
    GenerateContentResponse,
)
from contentgen.core.interface.transpilers.common import extract_text
from contentgen.core.interface.wire.openai import EmbeddingsRequest, EmbeddingsResponse
from contentgen.core.streaming.reconciler import StreamReconciler, reconcile
from contentgen.errors import (
    ConversionError,
    HttpError,
    NetworkError,
    RequestTimeoutError,
    UnsupportedOperationError,
)
from contentgen.utils.telemetry import (
    ATTR_HTTP_STATUS,
    ATTR_MODEL,
    ATTR_PROVIDER,
    ATTR_STREAMING,
    ATTR_TOOL_COUNT,
    get_tracer,
    record_response,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Iterator

    from opentelemetry.trace import Span

    from contentgen.config import GeneratorConfig
    from contentgen.core.interface.transpiler import Transpiler

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

_tracer = get_tracer(__name__)


@runtime_checkable
class ContentGenerator(Protocol):
    """The content-generation interface every backend adapter implements."""

    async def generate_content(
        self,
        request: GenerateContentRequest,
        *,
        signal: asyncio.Event | None = None,
    ) -> GenerateContentResponse: ...

    def generate_content_stream(
        self,
        request: GenerateContentRequest,
        *,
        signal: asyncio.Event | None = None,
    ) -> AsyncIterator[GenerateContentResponse]: ...

    async def count_tokens(self, request: GenerateContentRequest) -> CountTokensResponse: ...

    async def embed_content(self, request: EmbedContentRequest) -> EmbedContentResponse: ...


class HttpContentGenerator:
    """Base adapter for backends reached over HTTP with JSON bodies and SSE streams.

    Usage::

        config = GeneratorConfig(model="gpt-4o-mini", api_key="sk-...")
        async with OpenAICompatibleGenerator(config) as generator:
            response = await generator.generate_content(request)

    Pass *transport* to route requests through a custom httpx transport
    (tests use :class:`httpx.MockTransport`).
    """

    provider: ClassVar[str]
    label: ClassVar[str]
    default_base_url: ClassVar[str]
    default_timeout: ClassVar[float | None] = None
    default_embedding_model: ClassVar[str | None] = None
    reconciler_cls: ClassVar[type[StreamReconciler]]

    def __init__(
        self,
        config: GeneratorConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.capabilities = resolve_capabilities(self.provider, config)
        self.transpiler = self._make_transpiler()
        self.base_url = config.base_url or self.default_base_url
        self.timeout = config.timeout if config.timeout is not None else self.default_timeout
        self._counter = EstimatingCounter()
        self._client = httpx.AsyncClient(transport=transport, timeout=self.timeout)

    async def __aenter__(self) -> HttpContentGenerator:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    # -- hooks -------------------------------------------------------------

    def _make_transpiler(self) -> Transpiler:
        raise NotImplementedError

    def _generate_url(self) -> str:
        raise NotImplementedError

    def _embeddings_url(self, model: str) -> str:
        raise UnsupportedOperationError("embed_content", self.label)

    def _auth_headers(self) -> dict[str, str]:
        return {}

    def _tune_payload(self, payload: dict[str, Any], request: GenerateContentRequest, *, stream: bool) -> None:
        """Adjust the serialized body in place before sending."""

    def _guidance(self, status: int) -> str | None:
        """Actionable hint for an HTTP error status."""
        if status == 401:
            return f"Invalid API key. Please check your {self.label} API key."
        if status == 403:
            return "Access denied. Your API key may not have the required permissions."
        if status == 429:
            return "Rate limit exceeded. Please try again later."
        if status == 400:
            return "Bad request. Please check your input parameters."
        if status >= 500:
            return f"{self.label} API server error. Please try again later."
        return None

    # -- operations --------------------------------------------------------

    async def generate_content(
        self,
        request: GenerateContentRequest,
        *,
        signal: asyncio.Event | None = None,
    ) -> GenerateContentResponse:
        """Send *request* and return the complete normalized response.

        ``config.timeout`` bounds the whole call. Expiry raises
        :class:`RequestTimeoutError`; setting *signal* cancels the in-flight
        call with the same error marked ``aborted``.
        """
        with _tracer.start_as_current_span("contentgen.generate_content") as span:
            self._annotate(span, request, streaming=False)
            payload = self._build_payload(request, stream=False)
            deadline = _Deadline(signal, self.timeout)
            try:
                data = await _race(self._post_json(self._generate_url(), payload, span), deadline.stop)
            except _Interrupted:
                raise RequestTimeoutError(self.label, self.timeout, aborted=not deadline.expired) from None
            finally:
                deadline.cancel()
            result = self.transpiler.from_provider(data)
            record_response(span, result)
            return result

    async def generate_content_stream(
        self,
        request: GenerateContentRequest,
        *,
        signal: asyncio.Event | None = None,
    ) -> AsyncIterator[GenerateContentResponse]:
        """Stream normalized frames for *request* in arrival order.

        Text deltas arrive as they are produced; accumulated tool calls
        arrive in one frame at the end. Setting *signal* ends the stream
        silently at any point, including before the response headers, and
        pending tool calls are discarded. ``config.timeout`` bounds the
        whole stream; expiry raises :class:`RequestTimeoutError`.
        """
        span = _tracer.start_span("contentgen.generate_content_stream")
        deadline = _Deadline(signal, self.timeout)
        response: httpx.Response | None = None
        try:
            self._annotate(span, request, streaming=True)
            payload = self._build_payload(request, stream=True)
            reconciler = self.reconciler_cls()
            with self._translate_errors():
                http_request = self._client.build_request(
                    "POST",
                    self._generate_url(),
                    json=payload,
                    headers=self._headers(),
                )
                try:
                    response = await _race(self._client.send(http_request, stream=True), deadline.stop)
                    span.set_attribute(ATTR_HTTP_STATUS, response.status_code)
                    if not response.is_success:
                        body = await _race(response.aread(), deadline.stop)
                        raise self._http_error(response.status_code, body.decode("utf-8", errors="replace"))
                except _Interrupted:
                    if deadline.expired:
                        raise RequestTimeoutError(self.label, self.timeout) from None
                    logger.debug("%s stream aborted before the response arrived", self.label)
                    return
                async for frame in reconcile(reconciler, response.aiter_bytes(), deadline.stop):
                    record_response(span, frame)
                    yield frame
            if reconciler.aborted and deadline.expired:
                raise RequestTimeoutError(self.label, self.timeout)
        except Exception as exc:
            span.record_exception(exc)
            raise
        finally:
            deadline.cancel()
            if response is not None:
                await response.aclose()
            span.end()

    async def count_tokens(self, request: GenerateContentRequest) -> CountTokensResponse:
        """Estimate the prompt size; see :class:`EstimatingCounter`."""
        return CountTokensResponse(total_tokens=self._counter.count_contents(request.contents))

    async def embed_content(self, request: EmbedContentRequest) -> EmbedContentResponse:
        """Embed the joined text of *request* with the backend's embeddings endpoint."""
        if not self.capabilities.supports_embeddings:
            raise UnsupportedOperationError("embed_content", self.label)
        model = request.model or self.default_embedding_model or self.config.model
        body = EmbeddingsRequest(input=extract_text(request.contents), model=model)
        with _tracer.start_as_current_span("contentgen.embed_content") as span:
            span.set_attribute(ATTR_PROVIDER, self.provider)
            span.set_attribute(ATTR_MODEL, model)
            data = await self._post_json(self._embeddings_url(model), body.model_dump(), span)
        try:
            parsed = EmbeddingsResponse.model_validate(data)
        except ValidationError as exc:
            raise ConversionError(f"Malformed {self.label} embeddings response: {exc}") from exc
        values = parsed.data[0].embedding if parsed.data else []
        return EmbedContentResponse(embeddings=[ContentEmbedding(values=values)])

    # -- plumbing ----------------------------------------------------------

    def _build_payload(self, request: GenerateContentRequest, *, stream: bool) -> dict[str, Any]:
        wire = self.transpiler.to_provider(request, self.config.model)
        payload: dict[str, Any] = wire.model_dump(exclude_none=True)
        if stream:
            payload["stream"] = True
        self._tune_payload(payload, request, stream=stream)
        logger.debug(
            "%s request: model=%s messages=%d tools=%d stream=%s",
            self.label,
            payload.get("model"),
            len(payload.get("messages", [])),
            len(payload.get("tools", [])),
            stream,
        )
        return payload

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": f"contentgen/{__version__} ({self.provider})",
        }
        headers.update(self._auth_headers())
        headers.update(self.config.custom_headers)
        return headers

    async def _get_json(self, url: str, timeout: float) -> dict[str, Any]:
        with self._translate_errors():
            response = await self._client.get(url, headers=self._headers(), timeout=timeout)
        return self._decode(response)

    async def _post_json(self, url: str, payload: dict[str, Any], span: Span | None = None) -> dict[str, Any]:
        with self._translate_errors():
            response = await self._client.post(url, json=payload, headers=self._headers())
        if span is not None:
            span.set_attribute(ATTR_HTTP_STATUS, response.status_code)
        return self._decode(response)

    def _decode(self, response: httpx.Response) -> dict[str, Any]:
        if not response.is_success:
            raise self._http_error(response.status_code, response.text)
        try:
            data: Any = response.json()
        except ValueError as exc:
            raise ConversionError(f"{self.label} returned a non-JSON response") from exc
        if not isinstance(data, dict):
            raise ConversionError(f"{self.label} returned a JSON {type(data).__name__}, expected an object")
        return data

    def _http_error(self, status: int, body: str) -> HttpError:
        logger.debug("%s HTTP %d: %.500s", self.label, status, body)
        return HttpError(self.label, status, body, guidance=self._guidance(status))

    @contextlib.contextmanager
    def _translate_errors(self) -> Iterator[None]:
        """Map httpx transport failures onto the error taxonomy."""
        try:
            yield
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(self.label, self.timeout) from exc
        except httpx.TransportError as exc:
            logger.debug("%s transport failure: %s", self.label, exc)
            raise NetworkError(self.label, "Please check your network connection.") from exc

    def _annotate(self, span: Span, request: GenerateContentRequest, *, streaming: bool) -> None:
        span.set_attribute(ATTR_PROVIDER, self.provider)
        span.set_attribute(ATTR_MODEL, request.model or self.config.model)
        span.set_attribute(ATTR_STREAMING, streaming)
        span.set_attribute(ATTR_TOOL_COUNT, len(request.tools))


# ---------------------------------------------------------------------------
# Deadlines and cancellation
# ---------------------------------------------------------------------------


class _Interrupted(Exception):
    """Raised by :func:`_race` when the stop event wins."""


class _Deadline:
    """One stop event for a call: set by the caller's signal or when the time limit runs out.

    The limit covers the whole call, from sending the request to the last
    stream chunk, unlike httpx timeouts which bound each read separately.
    """

    def __init__(self, signal: asyncio.Event | None, timeout: float | None) -> None:
        self.stop = asyncio.Event()
        self.expired = False
        self._timer: asyncio.TimerHandle | None = None
        self._watcher: asyncio.Future[None] | None = None
        if signal is not None and signal.is_set():
            self.stop.set()
            return
        if timeout is not None:
            self._timer = asyncio.get_running_loop().call_later(timeout, self._expire)
        if signal is not None:
            self._watcher = asyncio.ensure_future(self._follow(signal))

    def _expire(self) -> None:
        if not self.stop.is_set():
            self.expired = True
            self.stop.set()

    async def _follow(self, signal: asyncio.Event) -> None:
        await signal.wait()
        self.stop.set()

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        if self._watcher is not None:
            self._watcher.cancel()


async def _race(awaitable: Awaitable[_T], stop: asyncio.Event) -> _T:
    """Await *awaitable* unless *stop* is set first, in which case it is cancelled."""
    task = asyncio.ensure_future(awaitable)
    if not stop.is_set():
        waiter = asyncio.ensure_future(stop.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()
        if task.done():
            return task.result()
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task
    raise _Interrupted
