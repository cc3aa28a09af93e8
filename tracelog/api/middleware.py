"""Request logging middleware.

Logs every incoming request. Runs inside the server span opened by the
OpenTelemetry FastAPI instrumentation, so these events carry the request's
trace identifiers.
"""

from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from tracelog.observability.logging import get_logger

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, user agent and client address of each request."""

    async def dispatch(  # type: ignore[override]
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        logger.info(
            "incoming_request",
            method=request.method,
            url=str(request.url.path),
            user_agent=request.headers.get("User-Agent"),
            ip=request.client.host if request.client else None,
        )

        response = await call_next(request)

        logger.info(
            "request_completed",
            method=request.method,
            url=str(request.url.path),
            status_code=response.status_code,
        )
        return response
