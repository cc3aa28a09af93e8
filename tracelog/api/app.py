"""FastAPI application factory.

Telemetry (tracing, logging, OTLP log export) is started in the lifespan
and shut down when the server stops.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from tracelog.api.middleware import RequestLoggingMiddleware
from tracelog.api.routes import register_routes
from tracelog.bootstrap import bootstrap
from tracelog.config import get_settings
from tracelog.config.settings import Settings
from tracelog.export.sink import OTLPLogSink
from tracelog.observability.logging import get_logger
from tracelog.observability.tracing import TraceContextReader, record_exception

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    sink: OTLPLogSink | None = None,
    trace_reader: TraceContextReader | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use; loaded from config/ when omitted
        sink: Pre-built log sink, forwarded to bootstrap
        trace_reader: Trace context source, forwarded to bootstrap

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.telemetry = bootstrap(settings, sink=sink, trace_reader=trace_reader)
        logger.info("app_started", port=settings.api.port)
        try:
            yield
        finally:
            logger.info("app_stopping")
            app.state.telemetry.shutdown()

    app = FastAPI(
        title=settings.service.name,
        version=settings.service.version,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)
    _register_exception_handlers(app)
    register_routes(app)

    if settings.observability.tracing.enabled:
        FastAPIInstrumentor.instrument_app(app)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        record_exception(trace.get_current_span(), exc)
        logger.error(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )
