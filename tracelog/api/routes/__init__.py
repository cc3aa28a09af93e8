"""API route registration."""

from fastapi import FastAPI

from tracelog.observability.logging import get_logger

logger = get_logger(__name__)


def register_routes(app: FastAPI) -> None:
    """Register all routes with the FastAPI application."""
    from tracelog.api.routes.health import router as health_router

    app.include_router(health_router, tags=["Health"])

    logger.debug("routes_registered", routes=["health"])
