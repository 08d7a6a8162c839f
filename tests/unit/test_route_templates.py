"""
Unit tests for route template resolution used by the metrics middleware.
"""

from unittest.mock import Mock

import pytest
from fastapi import APIRouter

from api.src.middleware import RouteTemplates, resolve_route


@pytest.fixture
def templates() -> RouteTemplates:
    students = APIRouter(prefix="/students")

    @students.get("")
    async def list_students():
        return []

    @students.get("/{id}")
    async def get_student(id: str):
        return {}

    @students.delete("/{id}")
    async def delete_student(id: str):
        return None

    users = APIRouter(prefix="/users")

    @users.get("/by-id")
    async def get_user_by_id():
        return {}

    @users.delete("/{id}")
    async def delete_user(id: str):
        return None

    templates = RouteTemplates()
    templates.add_router(students, prefix="/api/v1")
    templates.add_router(users, prefix="/api/v1")
    return templates


class TestRouteTemplates:
    """Test RouteTemplates."""

    @pytest.mark.parametrize(
        "path, method, expected",
        [
            ("/api/v1/students", "GET", "/api/v1/students"),
            ("/api/v1/students/17", "GET", "/api/v1/students/{id}"),
            ("/api/v1/students/abc", "DELETE", "/api/v1/students/{id}"),
            ("/api/v1/users/by-id", "GET", "/api/v1/users/by-id"),
            ("/api/v1/users/by-id", "DELETE", "/api/v1/users/{id}"),
        ],
    )
    def test_include_prefix_is_applied(self, templates, path, method, expected):
        assert templates.resolve(path, method) == expected

    def test_method_mismatch_returns_path_template(self, templates):
        assert templates.resolve("/api/v1/students/3", "PATCH") == "/api/v1/students/{id}"

    @pytest.mark.parametrize(
        "path",
        ["/students", "/api/v1/students/1/grades", "/api/v1/students/", "/api/v2/students"],
    )
    def test_unknown_paths(self, templates, path):
        assert templates.resolve(path, "GET") is None

    def test_resolve_route_falls_back_to_unmatched(self, templates):
        request = Mock(scope={"path": "/nowhere"}, method="GET")

        assert resolve_route(request, templates) == "unmatched"

    def test_resolve_route_uses_request_path(self, templates):
        request = Mock(scope={"path": "/api/v1/students/9"}, method="GET")

        assert resolve_route(request, templates) == "/api/v1/students/{id}"
