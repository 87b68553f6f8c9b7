"""
Main FastAPI application entry point for the subscription tracker.

Run with uvicorn's factory mode so settings are read once at startup::

    uvicorn subtracker.main:create_app --factory
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request

from subtracker.db import Database
from subtracker.exception_handlers import register_exception_handlers
from subtracker.logging import get_logger, setup_logging
from subtracker.middleware import RequestLoggingMiddleware
from subtracker.settings import Settings, get_settings
from subtracker.subscriptions import subscriptions_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle events."""
    logger = get_logger(__name__)
    settings: Settings = app.state.settings
    database: Database = app.state.database

    logger.info(
        "service.startup.begin",
        service=settings.app_name,
        version=settings.app_version,
        environment=settings.environment.value,
    )

    try:
        await database.create_all()
        logger.info("database.init.success")
    except Exception as e:
        logger.error("database.init.failed", error=str(e))
        raise

    logger.info("service.startup.complete", port=settings.port)

    yield

    logger.info("service.shutdown.begin")
    await database.dispose()
    logger.info("service.shutdown.complete")


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Configuration; read from the environment when omitted.
        database: Engine/session holder; built from ``settings`` when omitted.
    """
    settings = settings or get_settings()
    setup_logging(settings)
    logger = get_logger(__name__)

    app = FastAPI(
        title="Subscription Tracker",
        description="CRUD and cost aggregation for user subscriptions",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
    )
    app.state.settings = settings
    app.state.database = database or Database.from_settings(settings)

    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)
    app.include_router(subscriptions_router, prefix="/subscriptions")

    @app.get("/health")
    async def health_check(request: Request) -> dict[str, Any]:
        """Health check endpoint for monitoring."""
        app_settings: Settings = request.app.state.settings
        return {
            "status": "healthy",
            "version": app_settings.app_version,
            "environment": app_settings.environment.value,
        }

    @app.get("/health/ready")
    async def readiness_check(request: Request) -> dict[str, Any]:
        """Readiness check endpoint; verifies the database answers."""
        healthy = await request.app.state.database.check_health()
        return {
            "status": "ready" if healthy else "not ready",
            "healthy": healthy,
            "timestamp": datetime.now(UTC).isoformat(),
        }

    logger.info("application.created", routes=len(app.routes))
    return app
