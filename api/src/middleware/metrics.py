"""
Request instrumentation middleware.

Records, for every request that enters the application:
- ``http_requests_total{route, method}``
- ``http_request_duration_seconds{route, method}``
- ``http_response_status_codes_total{status_code}``

exactly once, whether the handler returned normally, returned an error
response, or raised.
"""

import time
from typing import Iterable, Optional, Pattern

from fastapi import APIRouter, Request, Response, status
from fastapi.routing import APIRoute
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.routing import compile_path
from starlette.types import ASGIApp

from shared.metrics import UNMATCHED_ROUTE, HTTPMetrics


class RouteTemplates:
    """
    Full route templates served by the application.

    Templates are recorded when routers are included, with the include
    prefix applied, so labels never depend on how the framework nests
    included routers at runtime.
    """

    def __init__(self) -> None:
        self._routes: list[tuple[Pattern[str], str, frozenset[str]]] = []

    def add(self, template: str, methods: Iterable[str]) -> None:
        """Register a single template and the methods it serves."""
        regex, _, _ = compile_path(template)
        self._routes.append((regex, template, frozenset(m.upper() for m in methods)))

    def add_router(self, router: APIRouter, prefix: str = "") -> None:
        """Register every API route of ``router`` under ``prefix``."""
        for route in router.routes:
            if isinstance(route, APIRoute):
                self.add(prefix + route.path, route.methods)

    def resolve(self, path: str, method: str) -> Optional[str]:
        """
        Find the template for a concrete path.

        A template serving the method wins. Otherwise the first template
        matching the path is returned, which labels 405 responses with the
        route they were aimed at.

        Returns:
            Route template, or None if no template matches the path
        """
        partial = None
        for regex, template, methods in self._routes:
            if not regex.match(path):
                continue
            if method.upper() in methods:
                return template
            if partial is None:
                partial = template
        return partial


def resolve_route(request: Request, templates: RouteTemplates) -> str:
    """
    Return the route template that served the request.

    Labels use the registered pattern (``/api/v1/students/{id}``), never the
    concrete path, to keep label cardinality bounded.

    Args:
        request: HTTP request
        templates: Templates registered with the application

    Returns:
        Route template, or ``unmatched`` if no route matched
    """
    return templates.resolve(request.scope["path"], request.method) or UNMATCHED_ROUTE


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware recording request count, latency and status code."""

    def __init__(self, app: ASGIApp, metrics: HTTPMetrics, templates: RouteTemplates):
        """
        Initialize metrics middleware.

        Args:
            app: Downstream ASGI application
            metrics: Registry the samples are recorded into
            templates: Route templates used for the ``route`` label
        """
        super().__init__(app)
        self.metrics = metrics
        self.templates = templates

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start_time = time.perf_counter()
        # An exception escaping downstream is answered with a 500 by the
        # recovery middleware further out.
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            self.metrics.observe_request(
                route=resolve_route(request, self.templates),
                method=request.method,
                status_code=status_code,
                duration_seconds=time.perf_counter() - start_time,
            )
