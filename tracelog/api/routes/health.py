"""Health check endpoint."""

from datetime import UTC, datetime
from typing import Literal

from fastapi import APIRouter, Request
from pydantic import BaseModel

from tracelog.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    status: Literal["healthy", "degraded"]
    service: str
    version: str
    log_export: bool
    pending_deliveries: int
    timestamp: datetime


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Report service identity and log transport state.

    Degraded when log export is configured but the sink is already closed.
    """
    telemetry = request.app.state.telemetry
    settings = telemetry.settings
    sink = telemetry.sink

    status: Literal["healthy", "degraded"] = "healthy"
    if settings.exporter.enabled and (sink is None or sink.closed):
        status = "degraded"

    logger.info("health_check", status=status)

    return HealthResponse(
        status=status,
        service=settings.service.name,
        version=settings.service.version,
        log_export=sink is not None,
        pending_deliveries=sink.pending_count if sink is not None else 0,
        timestamp=datetime.now(UTC),
    )
