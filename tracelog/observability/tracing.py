"""OpenTelemetry distributed tracing setup and trace context access.

Provides tracer provider setup with OTLP/HTTP export, span helpers, and
the read-only trace context accessors the log transport correlates
records with.
"""

from collections.abc import Generator, Mapping
from contextlib import contextmanager
from typing import Any, Protocol

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Span, SpanKind, Status, StatusCode, Tracer

from tracelog.export.models import TraceContext

DEFAULT_TRACER_NAME = "tracelog"

_tracer: Tracer | None = None
_provider: TracerProvider | None = None


def setup_tracing(
    service_name: str,
    service_version: str = "1.0.0",
    traces_url: str | None = None,
    headers: Mapping[str, str] | None = None,
    console_export: bool = False,
    extra_resource_attributes: Mapping[str, str] | None = None,
) -> Tracer:
    """Initialize OpenTelemetry tracing.

    Args:
        service_name: Name to identify this service in traces
        service_version: Version reported as service.version
        traces_url: OTLP/HTTP traces endpoint; spans are not exported
            over the network when omitted
        headers: Extra export headers (collector access token)
        console_export: Also export spans to console (for debugging)
        extra_resource_attributes: Additional resource attributes

    Returns:
        Configured Tracer instance
    """
    global _tracer, _provider

    resource = Resource.create({
        SERVICE_NAME: service_name,
        SERVICE_VERSION: service_version,
        **(extra_resource_attributes or {}),
    })
    provider = TracerProvider(resource=resource)

    if traces_url:
        exporter = OTLPSpanExporter(endpoint=traces_url, headers=dict(headers or {}))
        provider.add_span_processor(BatchSpanProcessor(exporter))

    if console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)

    _provider = provider
    _tracer = provider.get_tracer(service_name)

    return _tracer


def shutdown_tracing() -> None:
    """Flush and shut down the provider created by setup_tracing."""
    global _tracer, _provider
    if _provider is not None:
        _provider.shutdown()
    _provider = None
    _tracer = None


def get_tracer() -> Tracer:
    """Get the configured tracer, or the global one if not initialized."""
    if _tracer is None:
        return trace.get_tracer(DEFAULT_TRACER_NAME)
    return _tracer


@contextmanager
def create_span(
    name: str,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: dict[str, Any] | None = None,
    context: Context | None = None,
) -> Generator[Span, None, None]:
    """Create a new span as a context manager.

    Args:
        name: Span name
        kind: Span kind (INTERNAL, SERVER, CLIENT, etc.)
        attributes: Initial span attributes
        context: Parent context (current if not specified)

    Yields:
        The created span
    """
    tracer = get_tracer()
    with tracer.start_as_current_span(
        name,
        kind=kind,
        attributes=attributes or {},
        context=context,
    ) as span:
        yield span


def record_exception(span: Span, exception: Exception, escaped: bool = True) -> None:
    """Record an exception on a span and mark it as errored."""
    span.record_exception(exception, escaped=escaped)
    span.set_status(Status(StatusCode.ERROR, str(exception)))


def current_trace_context() -> TraceContext | None:
    """Identifiers of the currently active span, or None outside any trace."""
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None
    return TraceContext(
        trace_id=format(span_context.trace_id, "032x"),
        span_id=format(span_context.span_id, "016x"),
        trace_flags=int(span_context.trace_flags),
    )


class TraceContextReader(Protocol):
    """Read access to the trace context active at the call site."""

    def read(self) -> TraceContext | None: ...


class OpenTelemetryTraceContextReader:
    """Reads the span made current by the OpenTelemetry runtime."""

    def read(self) -> TraceContext | None:
        return current_trace_context()


class StaticTraceContextReader:
    """Returns a fixed trace context, or None for "no active trace"."""

    def __init__(self, context: TraceContext | None = None) -> None:
        self._context = context

    def read(self) -> TraceContext | None:
        return self._context
