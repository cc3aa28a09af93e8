"""Log event, trace context and OTLP/JSON wire models.

The wire models mirror the OTLP logs JSON encoding. Python attribute names
are snake_case; camelCase aliases are used on the wire.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Closed set of metadata value types; coerced to text only on the wire
MetadataValue = str | int | float | bool


class TraceContext(BaseModel):
    """Identifiers of the span active when a log event was emitted."""

    model_config = ConfigDict(frozen=True)

    trace_id: str
    span_id: str
    trace_flags: int


class LogEvent(BaseModel):
    """One application log event as handed to the transport."""

    model_config = ConfigDict(frozen=True)

    level: str
    message: str = ""
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    metadata: dict[str, MetadataValue] = Field(default_factory=dict)
    service: str | None = None


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class AnyValue(_WireModel):
    string_value: str


class KeyValue(_WireModel):
    key: str
    value: AnyValue

    @classmethod
    def of(cls, key: str, value: str) -> "KeyValue":
        return cls(key=key, value=AnyValue(string_value=value))


class LogRecord(_WireModel):
    """A single OTLP log record."""

    time_unix_nano: str
    observed_time_unix_nano: str
    severity_number: int
    severity_text: str
    body: AnyValue
    trace_id: str | None = None
    span_id: str | None = None
    trace_flags: int | None = None
    attributes: list[KeyValue] = Field(default_factory=list)

    def attribute(self, key: str) -> str | None:
        """Return the string value of the first attribute named ``key``."""
        for kv in self.attributes:
            if kv.key == key:
                return kv.value.string_value
        return None


class InstrumentationScope(_WireModel):
    name: str
    version: str


class Resource(_WireModel):
    attributes: list[KeyValue]


class ScopeLogs(_WireModel):
    scope: InstrumentationScope
    log_records: list[LogRecord] = Field(min_length=1)


class ResourceLogs(_WireModel):
    resource: Resource
    scope_logs: list[ScopeLogs] = Field(min_length=1)


class LogsEnvelope(_WireModel):
    """Top-level OTLP logs export request."""

    resource_logs: list[ResourceLogs] = Field(min_length=1)

    def to_json(self) -> str:
        """Serialize to OTLP/JSON, omitting absent trace fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True)
