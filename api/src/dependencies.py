"""
FastAPI dependency injection for the persistence gateway, repositories and
metrics, plus request id and body parsing.

Shared resources live on ``app.state`` (set by ``create_app``), never in
module globals, so every application instance (and every test) can be wired
with its own gateway and metrics registry.
"""

import re
import structlog
from typing import Optional, Type, TypeVar
from fastapi import Depends, Request
from pydantic import BaseModel, ValidationError

from api.src.config import Settings
from api.src.errors import InvalidRequestError
from api.src.repositories.database import Database
from api.src.repositories.student_repo import StudentRepository
from api.src.repositories.user_repo import UserRepository
from shared.metrics import HTTPMetrics

logger = structlog.get_logger(__name__)

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")

# Ids are PostgreSQL serial (int4) values.
MAX_ID = 2**31 - 1

ModelT = TypeVar("ModelT", bound=BaseModel)


# ============================================================================
# APPLICATION STATE
# ============================================================================


def get_database(request: Request) -> Database:
    """
    Get the persistence gateway bound to the running application.

    Args:
        request: HTTP request

    Returns:
        Persistence gateway

    Raises:
        RuntimeError: If the gateway has not been initialized
    """
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database gateway is not initialized")
    return database


def get_metrics(request: Request) -> HTTPMetrics:
    """Get the metrics registry bound to the running application."""
    return request.app.state.metrics


def get_settings_dependency(request: Request) -> Settings:
    """Get the settings the application was built with."""
    return request.app.state.settings


# ============================================================================
# REPOSITORIES
# ============================================================================


def get_student_repository(
    db: Database = Depends(get_database)
) -> StudentRepository:
    """
    Get student repository instance.

    Example:
        @router.get("/students/{id}")
        async def get_student(
            id: str,
            repo: StudentRepository = Depends(get_student_repository)
        ):
            ...
    """
    return StudentRepository(db)


def get_user_repository(
    db: Database = Depends(get_database)
) -> UserRepository:
    """Get user repository instance."""
    return UserRepository(db)


# ============================================================================
# REQUEST PARAMETERS
# ============================================================================


def parse_id(raw: Optional[str]) -> int:
    """
    Parse a resource id taken from the path or query string.

    Args:
        raw: Raw parameter value

    Returns:
        Positive integer id

    Raises:
        InvalidRequestError: If the value is missing, not an integer, or
            outside 1..MAX_ID
    """
    value = None
    if raw is not None and _ID_PATTERN.fullmatch(raw):
        try:
            value = int(raw)
        except ValueError:
            # Beyond the interpreter's integer string conversion limit.
            value = None

    if value is None or not 1 <= value <= MAX_ID:
        logger.debug("invalid_id", raw_id=raw)
        raise InvalidRequestError("Invalid ID")

    return value


async def parse_body(request: Request, model: Type[ModelT]) -> ModelT:
    """
    Validate the JSON request body against ``model``.

    Handlers that must reject a bad path id before looking at the body call
    this after ``parse_id`` instead of declaring the body as a parameter.

    Raises:
        InvalidRequestError: If the body is not valid JSON or does not fit
            the model
    """
    try:
        return model.model_validate_json(await request.body())
    except ValidationError as e:
        logger.warning(
            "validation_error",
            path=request.url.path,
            errors=e.errors(include_url=False, include_context=False)
        )
        raise InvalidRequestError() from e
