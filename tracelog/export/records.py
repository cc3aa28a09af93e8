"""Build OTLP log records from application log events."""

from datetime import UTC, datetime

from tracelog.export.models import (
    AnyValue,
    KeyValue,
    LogEvent,
    LogRecord,
    MetadataValue,
    TraceContext,
)
from tracelog.export.severity import severity_number

SERVICE_NAME_KEY = "service.name"
LOG_LEVEL_KEY = "log.level"

# Trace identifiers are duplicated as attributes for backends that ignore the
# top-level fields. Underscore naming only; camelCase is never emitted.
TRACE_ID_KEY = "trace_id"
SPAN_ID_KEY = "span_id"
TRACE_FLAGS_KEY = "trace_flags"

# Keys promoted to structured positions; never flattened from metadata.
RESERVED_KEYS: frozenset[str] = frozenset({
    "level",
    "message",
    "event",
    "timestamp",
    "service",
    "traceId",
    "spanId",
    "traceFlags",
    TRACE_ID_KEY,
    SPAN_ID_KEY,
    TRACE_FLAGS_KEY,
    SERVICE_NAME_KEY,
    LOG_LEVEL_KEY,
})

# Trace keys match in any spelling: traceId, traceID, TraceFlags, trace_id.
_TRACE_KEY_FORMS = frozenset({"traceid", "spanid", "traceflags"})


def is_reserved(key: str) -> bool:
    """Whether a metadata key collides with a promoted or trace field."""
    return key in RESERVED_KEYS or key.replace("_", "").lower() in _TRACE_KEY_FORMS


_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def to_unix_nano(event: LogEvent) -> str:
    """Event timestamp as string-encoded nanoseconds since the epoch."""
    ts = event.timestamp
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    delta = ts - _EPOCH
    seconds = delta.days * 86_400 + delta.seconds
    return str(seconds * 1_000_000_000 + delta.microseconds * 1_000)


def attribute_text(value: MetadataValue) -> str:
    """Text form of a metadata value on the wire."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_log_record(
    event: LogEvent,
    ctx: TraceContext | None,
    service_name: str,
) -> LogRecord:
    """Assemble one wire log record.

    Args:
        event: The application log event
        ctx: Trace context active at emission, or None
        service_name: Configured service identity, used unless the event
            carries its own ``service`` override

    Returns:
        LogRecord ready to be wrapped in an envelope
    """
    now = to_unix_nano(event)

    attributes = [
        KeyValue.of(SERVICE_NAME_KEY, event.service or service_name),
        KeyValue.of(LOG_LEVEL_KEY, event.level),
    ]
    attributes.extend(
        KeyValue.of(key, attribute_text(value))
        for key, value in event.metadata.items()
        if not is_reserved(key)
    )

    trace_fields: dict[str, str | int] = {}
    if ctx is not None:
        trace_fields = {
            "trace_id": ctx.trace_id,
            "span_id": ctx.span_id,
            "trace_flags": ctx.trace_flags,
        }
        attributes.extend([
            KeyValue.of(TRACE_ID_KEY, ctx.trace_id),
            KeyValue.of(SPAN_ID_KEY, ctx.span_id),
            KeyValue.of(TRACE_FLAGS_KEY, str(ctx.trace_flags)),
        ])

    return LogRecord(
        time_unix_nano=now,
        observed_time_unix_nano=now,
        severity_number=severity_number(event.level),
        severity_text=event.level.upper(),
        body=AnyValue(string_value=event.message),
        attributes=attributes,
        **trace_fields,
    )
