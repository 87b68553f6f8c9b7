"""
Exception handlers mapping domain errors to JSON responses.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from subtracker.subscriptions.exceptions import SubscriptionError

logger = structlog.get_logger(__name__)


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "invalid request"


async def subscription_error_handler(request: Request, exc: SubscriptionError) -> JSONResponse:
    """Render a ``SubscriptionError`` with its own status code."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Request failed",
        method=request.method,
        path=request.url.path,
        error_code=exc.error_code,
        error_message=exc.message,
        error_context=exc.context,
        status_code=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report request validation failures as 400 instead of FastAPI's 422."""
    message = _format_validation_errors(exc)
    logger.warning(
        "Request validation failed",
        method=request.method,
        path=request.url.path,
        error_message=message,
    )
    return JSONResponse(
        status_code=400,
        content={"error": message, "error_code": "VALIDATION_ERROR", "context": {}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers on ``app``."""
    app.add_exception_handler(SubscriptionError, subscription_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
