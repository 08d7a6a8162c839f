"""
Health and readiness endpoints.
"""

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.src.config import Settings
from api.src.dependencies import get_database, get_settings_dependency
from api.src.errors import StoreError
from api.src.models import HealthResponse
from api.src.repositories.database import Database

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check"
)
async def health_check() -> HealthResponse:
    """
    Liveness probe.

    Does not touch the database; use ``/ready`` for dependency checks.
    """
    return HealthResponse(message="API is healthy")


@router.get("/ready", summary="Readiness check")
async def readiness_check(
    db: Database = Depends(get_database),
    settings: Settings = Depends(get_settings_dependency)
) -> JSONResponse:
    """
    Readiness probe.

    Returns 200 when the database answers, 503 otherwise.
    """
    checks = {"database": "healthy"}

    try:
        await db.ping()
    except StoreError as e:
        logger.error("database_health_check_failed", error=str(e.__cause__ or e))
        checks["database"] = "unhealthy"

    all_healthy = all(state == "healthy" for state in checks.values())

    return JSONResponse(
        status_code=status.HTTP_200_OK if all_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if all_healthy else "not_ready",
            "service": settings.app_name,
            "version": settings.app_version,
            "checks": checks
        }
    )
