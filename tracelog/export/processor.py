"""structlog processor exporting every log event to an OTLP collector."""

import json
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, Protocol

import structlog
from structlog.types import EventDict, WrappedLogger

from tracelog.export.envelope import wrap
from tracelog.export.models import LogEvent, LogsEnvelope, MetadataValue
from tracelog.export.records import build_log_record, is_reserved
from tracelog.export.severity import severity_number
from tracelog.observability.logging import get_diagnostics_logger
from tracelog.observability.tracing import TraceContextReader


class EnvelopeSink(Protocol):
    def deliver(self, envelope: LogsEnvelope) -> None: ...


def metadata_value(value: Any) -> MetadataValue:
    """Coerce an arbitrary event value into a metadata scalar.

    Scalars pass through; mappings and sequences become JSON; anything
    else uses ``str``, falling back to the default object repr.
    """
    if isinstance(value, str | bool | int | float):
        return value
    if isinstance(value, Mapping | list | tuple):
        try:
            return json.dumps(value, default=str)
        except (TypeError, ValueError):
            pass
    try:
        return str(value)
    except Exception:
        return object.__repr__(value)


def parse_timestamp(value: Any) -> datetime:
    """Timestamp of an event dict entry, or now when missing/unparseable."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, int | float) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=UTC)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            pass
    return datetime.now(UTC)


def event_from_dict(event_dict: Mapping[str, Any]) -> LogEvent:
    """Convert a structlog event dict into a LogEvent."""
    message = event_dict.get("event", event_dict.get("message", ""))
    service = event_dict.get("service")
    return LogEvent(
        level=str(event_dict.get("level", "info")),
        message="" if message is None else str(message),
        timestamp=parse_timestamp(event_dict.get("timestamp")),
        metadata={
            key: metadata_value(value)
            for key, value in event_dict.items()
            if not is_reserved(key)
        },
        service=str(service) if service is not None else None,
    )


class OTLPExportProcessor:
    """Forward each log event to a sink as a single-record OTLP envelope.

    The trace context is read through an explicit reader so the processor
    can run without a live tracer. The event dict is returned untouched;
    rendering processors later in the chain still see the whole event.

    Args:
        sink: Receives one envelope per exported event
        service_name: Default service.name for records and the resource
        trace_reader: Source of the active trace context
        resource_attributes: Extra resource attributes (service.version...)
        min_level: Events less severe than this level are not exported
        diagnostics: Logger for failures inside the processor
    """

    def __init__(
        self,
        sink: EnvelopeSink,
        service_name: str,
        trace_reader: TraceContextReader,
        resource_attributes: Mapping[str, str] | None = None,
        min_level: str = "info",
        diagnostics: Any = None,
    ) -> None:
        self._sink = sink
        self._service_name = service_name
        self._trace_reader = trace_reader
        self._resource_attributes = dict(resource_attributes or {})
        self._min_severity = severity_number(min_level)
        self._diagnostics = diagnostics or get_diagnostics_logger()

    def export(self, event: LogEvent) -> None:
        """Build and hand off the envelope for one event."""
        if severity_number(event.level) < self._min_severity:
            return
        record = build_log_record(event, self._trace_reader.read(), self._service_name)
        self._sink.deliver(
            wrap(record, self._service_name, self._resource_attributes)
        )

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        try:
            # Tracebacks are exported as text whatever the local renderer
            exported = structlog.processors.format_exc_info(
                _logger, _method_name, dict(event_dict)
            )
            self.export(event_from_dict(exported))
        except Exception as e:
            self._diagnostics.error(
                "otlp_export_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
        return event_dict
