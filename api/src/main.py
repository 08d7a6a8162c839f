"""
FastAPI application entry point for the Student Records API.

This module provides the application factory with:
- Health and readiness endpoints
- Student and user CRUD routers
- Request recovery, structured logging and Prometheus instrumentation
- Database connection pool management
- Graceful startup and shutdown
"""

import structlog
import uvicorn
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.src.config import get_settings, Settings
from api.src.errors import APIError, InvalidRequestError
from api.src.middleware import (
    MetricsMiddleware,
    RecoveryMiddleware,
    RequestLoggingMiddleware,
    RouteTemplates,
)
from api.src.repositories.database import Database, PostgresGateway, create_pool
from api.src.routers import health, monitoring, students, users
from shared.logging import configure_logging
from shared.metrics import HTTPMetrics

# Initialize logger
logger = structlog.get_logger(__name__)

# ============================================================================
# Lifespan Management
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager for startup and shutdown events.

    Opens a PostgreSQL pool unless a gateway was injected into
    ``create_app``, and closes whatever it opened on shutdown.
    """
    settings: Settings = app.state.settings
    pool = None

    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment
    )

    try:
        if app.state.database is None:
            pool = await create_pool(settings)
            app.state.database = PostgresGateway(pool, timeout=settings.database_query_timeout)
    except Exception as e:
        logger.error("application_startup_failed", error=str(e), exc_info=True)
        raise

    logger.info("application_started", app_name=settings.app_name)

    try:
        yield
    finally:
        logger.info("application_shutting_down")

        if pool is not None:
            logger.info("closing_database_pool")
            await pool.close()
            app.state.database = None
            logger.info("database_pool_closed")

        logger.info("application_shutdown_complete")

# ============================================================================
# Exception Handlers
# ============================================================================

async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle typed API errors."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "api_error",
        path=request.url.path,
        status_code=exc.status_code,
        error=exc.message
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message}
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle malformed request bodies."""
    logger.warning(
        "validation_error",
        path=request.url.path,
        errors=exc.errors()
    )
    error = InvalidRequestError()
    return JSONResponse(
        status_code=error.status_code,
        content={"error": error.message}
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions raised by routing (unknown path, wrong method)."""
    logger.warning(
        "http_exception",
        path=request.url.path,
        status_code=exc.status_code,
        detail=exc.detail
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None)
    )

# ============================================================================
# FastAPI Application
# ============================================================================

def include_router(app: FastAPI, router: APIRouter, prefix: str = "") -> None:
    """
    Include a router and register its templates for the metrics ``route`` label.

    Args:
        app: Application built by ``create_app``
        router: Router to include
        prefix: Path prefix applied to every route of the router
    """
    app.include_router(router, prefix=prefix)
    app.state.route_templates.add_router(router, prefix=prefix)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    metrics: Optional[HTTPMetrics] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to use (defaults to ``get_settings()``)
        database: Persistence gateway; when omitted the lifespan opens a
            PostgreSQL pool
        metrics: Metrics registry; a fresh, isolated one by default

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.json_logs,
        service_name=settings.app_name,
        service_version=settings.app_version,
        environment=settings.environment,
        colors=settings.is_development,
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="CRUD API for student and user records.",
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.metrics = metrics or HTTPMetrics()
    app.state.route_templates = RouteTemplates()

    # Routes are fixed at construction time.
    include_router(app, health.router, prefix=settings.api_prefix)
    include_router(app, students.router, prefix=settings.api_prefix)
    include_router(app, users.router, prefix=settings.api_prefix)
    include_router(app, monitoring.router)

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Each add_middleware call wraps the previous stack, so the resulting
    # order is Recovery -> RequestLogging -> Metrics -> handler.
    app.add_middleware(
        MetricsMiddleware,
        metrics=app.state.metrics,
        templates=app.state.route_templates
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RecoveryMiddleware)

    return app


app = create_app()

# ============================================================================
# Application Entry Point
# ============================================================================

if __name__ == "__main__":
    settings = get_settings()

    logger.info(
        "starting_uvicorn_server",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )

    uvicorn.run(
        "api.src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=False,
    )
