"""Process-level wiring of tracing, logging and the OTLP log transport.

Example usage:

    from tracelog.bootstrap import bootstrap

    telemetry = bootstrap()
    logger = get_logger(__name__)
    logger.info("ready")
    ...
    telemetry.shutdown()
"""

from dataclasses import dataclass

from tracelog.config import get_settings
from tracelog.config.settings import Settings
from tracelog.export.processor import OTLPExportProcessor
from tracelog.export.sink import OTLPLogSink
from tracelog.observability.logging import get_logger, setup_logging
from tracelog.observability.tracing import (
    OpenTelemetryTraceContextReader,
    TraceContextReader,
    setup_tracing,
    shutdown_tracing,
)

logger = get_logger(__name__)


@dataclass
class Telemetry:
    """Handles created by bootstrap, released by shutdown."""

    settings: Settings
    trace_reader: TraceContextReader
    sink: OTLPLogSink | None = None
    processor: OTLPExportProcessor | None = None
    tracing_enabled: bool = False

    def shutdown(self) -> None:
        """Give in-flight log deliveries their grace period, then stop tracing.

        Deliveries still running after the grace period are abandoned.
        """
        logger.info("telemetry_shutdown")
        if self.sink is not None:
            self.sink.close(self.settings.exporter.shutdown_grace_seconds)
        if self.tracing_enabled:
            shutdown_tracing()


def resource_attributes(settings: Settings) -> dict[str, str]:
    """Service identity attributes beyond service.name."""
    return {
        "service.version": settings.service.version,
        "deployment.environment": settings.service.environment,
    }


def bootstrap(
    settings: Settings | None = None,
    sink: OTLPLogSink | None = None,
    trace_reader: TraceContextReader | None = None,
) -> Telemetry:
    """Initialize tracing and structured logging with OTLP log export.

    Args:
        settings: Settings to use; loaded from config/ when omitted
        sink: Pre-built sink (tests pass one with a mock transport)
        trace_reader: Trace context source; OpenTelemetry when omitted

    Returns:
        Telemetry handle whose shutdown() must be called on exit
    """
    settings = settings or get_settings()
    exporter_config = settings.exporter
    trace_reader = trace_reader or OpenTelemetryTraceContextReader()
    telemetry = Telemetry(settings=settings, trace_reader=trace_reader)

    if settings.observability.tracing.enabled:
        setup_tracing(
            service_name=settings.service.name,
            service_version=settings.service.version,
            traces_url=exporter_config.traces_url if exporter_config.enabled else None,
            headers=exporter_config.auth_headers(),
            console_export=settings.observability.tracing.console_export,
            extra_resource_attributes={
                "deployment.environment": settings.service.environment,
            },
        )
        telemetry.tracing_enabled = True

    if exporter_config.enabled:
        telemetry.sink = sink or OTLPLogSink(
            url=exporter_config.logs_url,
            headers=exporter_config.auth_headers(),
            timeout_seconds=exporter_config.timeout_seconds,
        )
        telemetry.processor = OTLPExportProcessor(
            sink=telemetry.sink,
            service_name=settings.service.name,
            trace_reader=trace_reader,
            resource_attributes=resource_attributes(settings),
            min_level=exporter_config.min_level,
        )

    setup_logging(
        level=settings.observability.logging.level,
        format=settings.observability.logging.format,
        exporter=telemetry.processor,
        trace_reader=trace_reader,
    )

    logger.info(
        "telemetry_initialized",
        service_name=settings.service.name,
        tracing=telemetry.tracing_enabled,
        log_export=exporter_config.enabled,
        logs_url=exporter_config.logs_url if exporter_config.enabled else None,
    )

    return telemetry
