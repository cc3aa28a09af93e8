"""Wrap log records in the OTLP resource/scope/record nesting."""

from collections.abc import Mapping

from tracelog.export.models import (
    InstrumentationScope,
    KeyValue,
    LogRecord,
    LogsEnvelope,
    Resource,
    ResourceLogs,
    ScopeLogs,
)
from tracelog.export.records import SERVICE_NAME_KEY

# Identifies this transport, not the logging library feeding it
SCOPE_NAME = "tracelog-otlp-transport"
SCOPE_VERSION = "1.0.0"


def resource_attributes(
    service_name: str,
    extra: Mapping[str, str] | None = None,
) -> list[KeyValue]:
    """Service identity attributes, ``service.name`` first."""
    attributes = [KeyValue.of(SERVICE_NAME_KEY, service_name)]
    for key, value in (extra or {}).items():
        if key != SERVICE_NAME_KEY:
            attributes.append(KeyValue.of(key, value))
    return attributes


def wrap(
    record: LogRecord,
    service_name: str,
    extra_resource_attributes: Mapping[str, str] | None = None,
) -> LogsEnvelope:
    """Build a single-record export envelope."""
    return LogsEnvelope(
        resource_logs=[
            ResourceLogs(
                resource=Resource(
                    attributes=resource_attributes(service_name, extra_resource_attributes)
                ),
                scope_logs=[
                    ScopeLogs(
                        scope=InstrumentationScope(name=SCOPE_NAME, version=SCOPE_VERSION),
                        log_records=[record],
                    )
                ],
            )
        ]
    )
