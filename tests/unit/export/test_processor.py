"""Tests for the structlog export processor."""

import json
from datetime import UTC, datetime
from unittest.mock import MagicMock

import httpx
import pytest

from tracelog.export.models import LogsEnvelope, TraceContext
from tracelog.export.processor import (
    OTLPExportProcessor,
    event_from_dict,
    metadata_value,
    parse_timestamp,
)
from tracelog.observability.tracing import StaticTraceContextReader


class RecordingSink:
    def __init__(self) -> None:
        self.envelopes: list[LogsEnvelope] = []

    def deliver(self, envelope: LogsEnvelope) -> None:
        self.envelopes.append(envelope)

    @property
    def records(self):
        return [e.resource_logs[0].scope_logs[0].log_records[0] for e in self.envelopes]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


def make_processor(sink, ctx: TraceContext | None = None, **kwargs) -> OTLPExportProcessor:
    return OTLPExportProcessor(
        sink=sink,
        service_name="demo-service",
        trace_reader=StaticTraceContextReader(ctx),
        **kwargs,
    )


class Unprintable:
    def __str__(self) -> str:
        raise RuntimeError("no text for you")


class TestMetadataValue:
    """Tests for metadata_value."""

    def test_scalars_pass_through(self) -> None:
        assert metadata_value("x") == "x"
        assert metadata_value(3) == 3
        assert metadata_value(1.5) == 1.5
        assert metadata_value(True) is True

    def test_structured_values_become_json(self) -> None:
        assert json.loads(metadata_value({"id": 1, "tags": ["a"]})) == {"id": 1, "tags": ["a"]}
        assert metadata_value([1, 2]) == "[1, 2]"

    def test_objects_use_str(self) -> None:
        assert metadata_value(ValueError("boom")) == "boom"

    def test_unprintable_falls_back_to_repr(self) -> None:
        assert metadata_value(Unprintable()).startswith("<")


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_iso_string(self) -> None:
        assert parse_timestamp("2024-05-01T12:00:00+00:00") == datetime(
            2024, 5, 1, 12, tzinfo=UTC
        )

    def test_epoch_seconds(self) -> None:
        assert parse_timestamp(0) == datetime(1970, 1, 1, tzinfo=UTC)

    def test_garbage_uses_now(self) -> None:
        before = datetime.now(UTC)
        assert parse_timestamp("yesterday-ish") >= before


class TestEventFromDict:
    """Tests for event_from_dict."""

    def test_structlog_event_dict(self) -> None:
        event = event_from_dict({
            "event": "Fetching user data",
            "level": "info",
            "timestamp": "2024-05-01T12:00:00Z",
            "email": "john@example.com",
            "service": "users",
        })

        assert event.message == "Fetching user data"
        assert event.level == "info"
        assert event.service == "users"
        assert event.metadata == {"email": "john@example.com"}

    def test_reserved_keys_not_in_metadata(self) -> None:
        event = event_from_dict({
            "event": "x",
            "level": "info",
            "trace_id": "a" * 32,
            "span_id": "b" * 16,
            "trace_flags": 1,
        })
        assert event.metadata == {}

    def test_trace_key_spellings_not_in_metadata(self) -> None:
        event = event_from_dict({
            "event": "x",
            "traceID": "a" * 32,
            "SpanId": "b" * 16,
            "TRACE_FLAGS": 1,
            "route": "/orders",
        })
        assert event.metadata == {"route": "/orders"}

    def test_missing_level_is_info(self) -> None:
        assert event_from_dict({"event": "x"}).level == "info"


class TestOTLPExportProcessor:
    """Tests for OTLPExportProcessor."""

    def test_error_event_without_trace(self, sink: RecordingSink) -> None:
        processor = make_processor(sink)

        processor(None, "error", {"event": "db down", "level": "error", "database": "orders_db"})

        (record,) = sink.records
        assert record.severity_number == 17
        assert record.severity_text == "ERROR"
        assert record.body.string_value == "db down"
        assert record.attribute("service.name") == "demo-service"
        assert record.attribute("log.level") == "error"
        assert record.attribute("database") == "orders_db"
        assert record.trace_id is None
        assert record.attribute("trace_id") is None

    def test_info_event_with_trace(self, sink: RecordingSink, trace_context: TraceContext) -> None:
        processor = make_processor(sink, trace_context)

        processor(None, "info", {"event": "ok", "level": "info"})

        (record,) = sink.records
        assert record.trace_id == "a" * 32
        assert record.span_id == "b" * 16
        assert record.trace_flags == 1
        assert record.severity_number == 9

    def test_reader_wins_over_enriched_event_dict(
        self, sink: RecordingSink, trace_context: TraceContext
    ) -> None:
        """Identifiers injected upstream never duplicate the reader's attributes."""
        processor = make_processor(sink, trace_context)

        processor(None, "info", {
            "event": "ok",
            "level": "info",
            "trace_id": "c" * 32,
            "span_id": "d" * 16,
            "trace_flags": 0,
        })

        keys = [kv.key for kv in sink.records[0].attributes]
        assert keys.count("trace_id") == 1
        assert sink.records[0].attribute("trace_id") == "a" * 32

    def test_returns_event_dict_unchanged(self, sink: RecordingSink) -> None:
        processor = make_processor(sink)
        event_dict = {"event": "x", "level": "info", "user": "john"}

        result = processor(None, "info", event_dict)

        assert result is event_dict
        assert result == {"event": "x", "level": "info", "user": "john"}

    def test_exc_info_rendered_for_export_only(self, sink: RecordingSink) -> None:
        processor = make_processor(sink)
        try:
            raise ValueError("bad payload")
        except ValueError as e:
            event_dict = {"event": "failed", "level": "error", "exc_info": e}
            result = processor(None, "error", event_dict)

        assert result["exc_info"] is event_dict["exc_info"]
        assert "exception" not in result
        assert "ValueError: bad payload" in sink.records[0].attribute("exception")
        assert sink.records[0].attribute("exc_info") is None

    def test_below_min_level_not_exported(self, sink: RecordingSink) -> None:
        processor = make_processor(sink, min_level="info")

        processor(None, "debug", {"event": "noise", "level": "debug"})
        processor(None, "warning", {"event": "careful", "level": "warning"})

        assert [r.body.string_value for r in sink.records] == ["careful"]

    def test_resource_attributes(self, sink: RecordingSink) -> None:
        processor = make_processor(sink, resource_attributes={"service.version": "2.0.0"})

        processor(None, "info", {"event": "x", "level": "info"})

        attributes = sink.envelopes[0].resource_logs[0].resource.attributes
        assert [kv.key for kv in attributes] == ["service.name", "service.version"]

    def test_one_envelope_per_event(self, sink: RecordingSink) -> None:
        processor = make_processor(sink)
        for i in range(3):
            processor(None, "info", {"event": f"e{i}", "level": "info"})
        assert len(sink.envelopes) == 3

    def test_sink_failure_reported_not_raised(self, diagnostics: MagicMock) -> None:
        broken = MagicMock()
        broken.deliver.side_effect = RuntimeError("boom")
        processor = make_processor(broken, diagnostics=diagnostics)

        result = processor(None, "info", {"event": "x", "level": "info"})

        assert result["event"] == "x"
        diagnostics.error.assert_called_once_with(
            "otlp_export_failed", error="boom", error_type="RuntimeError"
        )

    def test_rejected_delivery_invisible_to_caller(
        self, make_sink, diagnostics: MagicMock
    ) -> None:
        """A non-200 response never changes what the log call site sees."""
        sink = make_sink(lambda request: httpx.Response(500, text="down"))
        processor = make_processor(sink)
        event_dict = {"event": "db down", "level": "error"}

        result = processor(None, "error", event_dict)
        sink.close(grace_seconds=5.0)

        assert result is event_dict
        assert diagnostics.error.call_args.kwargs["status_code"] == 500
