"""
Contract tests for the records API.

Tests verify the published API contract:
- Request/response schemas
- Route and method table
- Error body shape
"""

import pytest
from pydantic import ValidationError

from api.src.models import (
    ErrorResponse,
    HealthResponse,
    Student,
    StudentCreateRequest,
    StudentUpdateRequest,
    User,
    UserCreateRequest,
)


# ============================================================================
# SCHEMA CONTRACTS
# ============================================================================


class TestStudentSchemas:
    """Student request/response schema contracts."""

    def test_create_request_accepts_valid_payload(self):
        request = StudentCreateRequest(**{"name": "Ann", "age": 22, "email": "a@x.com"})

        assert request.model_dump() == {"name": "Ann", "age": 22, "email": "a@x.com"}

    @pytest.mark.parametrize("missing", ["name", "age", "email"])
    def test_create_request_requires_every_field(self, missing):
        payload = {"name": "Ann", "age": 22, "email": "a@x.com"}
        payload.pop(missing)

        with pytest.raises(ValidationError):
            StudentCreateRequest(**payload)

    @pytest.mark.parametrize("age", ["22", 22.5, True, None])
    def test_create_request_rejects_non_integer_age(self, age):
        with pytest.raises(ValidationError):
            StudentCreateRequest(name="Ann", age=age, email="a@x.com")

    def test_update_request_is_a_full_replace(self):
        with pytest.raises(ValidationError):
            StudentUpdateRequest(name="Ann")

    def test_student_id_must_be_positive(self):
        with pytest.raises(ValidationError):
            Student(id=0, name="Ann", age=22, email="a@x.com")

    def test_student_serialises_all_fields(self):
        student = Student(id=1, name="Ann", age=22, email="a@x.com")

        assert student.model_dump() == {"id": 1, "name": "Ann", "age": 22, "email": "a@x.com"}


class TestUserSchemas:
    """User request/response schema contracts."""

    def test_create_request(self):
        assert UserCreateRequest(name="Alice", email="alice@example.com").model_dump() == {
            "name": "Alice",
            "email": "alice@example.com",
        }

    def test_create_request_rejects_non_string_name(self):
        with pytest.raises(ValidationError):
            UserCreateRequest(name=123, email="alice@example.com")

    def test_user_has_no_age(self):
        assert set(User.model_fields) == {"id", "name", "email"}


class TestCommonSchemas:
    """Error and health body contracts."""

    def test_error_response_shape(self):
        assert ErrorResponse(error="Invalid ID").model_dump() == {"error": "Invalid ID"}

    def test_health_response_shape(self):
        assert HealthResponse(message="API is healthy").model_dump() == {"message": "API is healthy"}


# ============================================================================
# ROUTE TABLE CONTRACT
# ============================================================================


EXPECTED_OPERATIONS = {
    ("/api/v1/health", "get"),
    ("/api/v1/ready", "get"),
    ("/api/v1/students", "get"),
    ("/api/v1/students", "post"),
    ("/api/v1/students/{id}", "get"),
    ("/api/v1/students/{id}", "put"),
    ("/api/v1/students/{id}", "delete"),
    ("/api/v1/users", "get"),
    ("/api/v1/users", "post"),
    ("/api/v1/users/by-id", "get"),
    ("/api/v1/users/{id}", "delete"),
    ("/metrics", "get"),
}


class TestRouteTable:
    """The OpenAPI document lists exactly the supported operations."""

    def test_operations(self, app):
        paths = app.openapi()["paths"]
        operations = {
            (path, method)
            for path, methods in paths.items()
            for method in methods
        }

        assert operations == EXPECTED_OPERATIONS

    def test_user_lookup_uses_query_parameter(self, app):
        parameters = app.openapi()["paths"]["/api/v1/users/by-id"]["get"]["parameters"]

        assert [(p["name"], p["in"]) for p in parameters] == [("id", "query")]

    def test_student_lookup_uses_path_parameter(self, app):
        parameters = app.openapi()["paths"]["/api/v1/students/{id}"]["get"]["parameters"]

        assert [(p["name"], p["in"]) for p in parameters] == [("id", "path")]
