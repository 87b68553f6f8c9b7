"""
Request logging middleware.

Assigns every request an ID, binds it into the structlog context so all
log lines emitted while handling the request carry it, and logs one
summary line per request.
"""

import time
import uuid
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status, latency and client details per request."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "HTTP request failed",
                method=request.method,
                path=request.url.path,
                latency_ms=round((time.perf_counter() - start_time) * 1000, 3),
            )
            raise
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        logger.info(
            "HTTP request",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            latency_ms=round((time.perf_counter() - start_time) * 1000, 3),
            client_ip=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
