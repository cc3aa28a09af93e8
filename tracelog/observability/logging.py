"""Structured logging configuration using structlog.

Provides JSON logging for production and console logging for development.
Every event is enriched with the active trace identifiers and, when an
exporter processor is given, forwarded to the OTLP collector before being
rendered locally.
"""

import sys
from typing import Any, cast

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from tracelog.observability.tracing import (
    OpenTelemetryTraceContextReader,
    TraceContextReader,
)

LEVEL_NUMBERS: dict[str, int] = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


class TraceContextInjector:
    """Processor that adds trace_id, span_id and trace_flags to log events.

    Only affects local rendering; the export processor reads the trace
    context itself and strips these keys from record attributes.
    """

    def __init__(self, reader: TraceContextReader | None = None) -> None:
        self._reader = reader or OpenTelemetryTraceContextReader()

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        ctx = self._reader.read()
        if ctx is not None:
            event_dict["trace_id"] = ctx.trace_id
            event_dict["span_id"] = ctx.span_id
            event_dict["trace_flags"] = ctx.trace_flags
        return event_dict


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    exporter: Processor | None = None,
    trace_reader: TraceContextReader | None = None,
) -> None:
    """Configure structured logging.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format - "json" for production, "console" for development
        exporter: Processor forwarding events to the collector, if any
        trace_reader: Source of the active trace context
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        TraceContextInjector(trace_reader),
    ]

    # Console renderer formats exceptions itself
    if format == "json":
        processors.append(structlog.processors.format_exc_info)

    if exporter is not None:
        processors.append(exporter)

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    level_num = LEVEL_NUMBERS.get(level.upper(), 20)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance bound to the given name."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


def get_diagnostics_logger() -> structlog.stdlib.BoundLogger:
    """Logger for the transport's own failures.

    Wraps stderr with its own processor chain so diagnostics never pass
    through the export processor.
    """
    return cast(
        structlog.stdlib.BoundLogger,
        structlog.wrap_logger(
            structlog.PrintLogger(sys.stderr),
            processors=[
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(LEVEL_NUMBERS["DEBUG"]),
            logger_name="tracelog.diagnostics",
        ),
    )
