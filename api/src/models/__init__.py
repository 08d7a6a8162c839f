"""Data models for the FastAPI service.

This package contains the Pydantic entities returned by the API and the
request schemas used to validate incoming bodies.
"""

from .common import ErrorResponse, HealthResponse
from .student import Student, StudentCreateRequest, StudentUpdateRequest
from .user import User, UserCreateRequest

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "Student",
    "StudentCreateRequest",
    "StudentUpdateRequest",
    "User",
    "UserCreateRequest",
]
