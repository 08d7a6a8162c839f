"""FastAPI middleware components.

This package contains the middleware wrapped around every request:
panic recovery, structured request logging and metrics instrumentation.
"""

from api.src.middleware.metrics import MetricsMiddleware, RouteTemplates, resolve_route
from api.src.middleware.recovery import RecoveryMiddleware
from api.src.middleware.request_logging import CORRELATION_ID_HEADER, RequestLoggingMiddleware

__all__ = [
    "CORRELATION_ID_HEADER",
    "MetricsMiddleware",
    "RecoveryMiddleware",
    "RequestLoggingMiddleware",
    "RouteTemplates",
    "resolve_route",
]
