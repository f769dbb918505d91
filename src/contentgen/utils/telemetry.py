"""Tracing for generator calls.

Generators open one span per call (``contentgen.generate_content``,
``contentgen.generate_content_stream``, ``contentgen.embed_content``) and
tag it with provider, model, HTTP status, usage and finish reason. Only
``opentelemetry-api`` is required; spans are no-ops until
:func:`configure_telemetry` installs the SDK (``contentgen[otel]``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from opentelemetry import trace

if TYPE_CHECKING:
    from contentgen.core.interface.models import GenerateContentResponse

# ---------------------------------------------------------------------------
# Semantic attribute keys
# ---------------------------------------------------------------------------

ATTR_PROVIDER = "contentgen.provider"
ATTR_MODEL = "contentgen.model"
ATTR_STREAMING = "contentgen.streaming"
ATTR_TOOL_COUNT = "contentgen.tools.count"
ATTR_TOOL_CALLS = "contentgen.tool_calls"
ATTR_TOKENS_PROMPT = "contentgen.tokens.prompt"
ATTR_TOKENS_COMPLETION = "contentgen.tokens.completion"
ATTR_TOKENS_TOTAL = "contentgen.tokens.total"
ATTR_FINISH_REASON = "contentgen.finish_reason"
ATTR_HTTP_STATUS = "contentgen.http.status"

_INSTRUMENTATION_NAME = "contentgen"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a :class:`~opentelemetry.trace.Tracer` for *name*.

    If the OpenTelemetry SDK has not been configured the returned tracer
    is a no-op.
    """
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def record_response(span: trace.Span, response: GenerateContentResponse) -> None:
    """Record usage, finish reason and tool-call count of *response* on *span*."""
    if response.usage is not None:
        span.set_attribute(ATTR_TOKENS_PROMPT, response.usage.prompt_tokens)
        span.set_attribute(ATTR_TOKENS_COMPLETION, response.usage.completion_tokens)
        span.set_attribute(ATTR_TOKENS_TOTAL, response.usage.total_tokens)
    if response.finish_reason is not None:
        span.set_attribute(ATTR_FINISH_REASON, response.finish_reason)
    if response.function_calls:
        span.set_attribute(ATTR_TOOL_CALLS, len(response.function_calls))


def configure_telemetry(
    *,
    service_name: str = "contentgen",
    export_to_console: bool = True,
    otlp_endpoint: str | None = None,
) -> None:
    """Install an SDK tracer provider so generator spans are exported.

    Console export prints each finished span as JSON; *otlp_endpoint*
    additionally batches spans to an OTLP/gRPC collector.

    Raises:
        ImportError: If ``opentelemetry-sdk`` (or, for OTLP, the exporter
            package) is missing; both ship in ``contentgen[otel]``.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = "opentelemetry-sdk is required for configure_telemetry(); install contentgen[otel]"
        raise ImportError(msg) from exc

    processors = _span_processors(export_to_console, otlp_endpoint)
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    for processor in processors:
        provider.add_span_processor(processor)
    trace.set_tracer_provider(provider)


def _span_processors(console: bool, otlp_endpoint: str | None) -> list[Any]:
    from opentelemetry.sdk.trace.export import (  # pyright: ignore[reportMissingImports]
        BatchSpanProcessor,
        ConsoleSpanExporter,
        SimpleSpanProcessor,
    )

    processors: list[Any] = []
    if console:
        processors.append(SimpleSpanProcessor(ConsoleSpanExporter()))
    if otlp_endpoint:
        try:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (  # pyright: ignore[reportMissingImports]
                OTLPSpanExporter,
            )
        except ImportError as exc:
            msg = "opentelemetry-exporter-otlp is required for OTLP export; install contentgen[otel]"
            raise ImportError(msg) from exc
        processors.append(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))
    return processors
