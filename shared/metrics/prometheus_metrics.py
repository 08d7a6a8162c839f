"""Prometheus metrics definitions and helpers.

Provides the HTTP request metrics recorded by the instrumentation middleware.
Metrics are bound to an explicitly supplied registry so each application
instance (and each test) can own an isolated set of collectors.
"""

from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

UNMATCHED_ROUTE = "unmatched"


class HTTPMetrics:
    """HTTP request metrics.

    All collectors are monotonically increasing for the lifetime of the
    registry. prometheus_client guards each child metric with its own lock,
    so concurrent requests may record samples without extra coordination.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        """Initialize HTTP metrics.

        Args:
            registry: Prometheus registry to use; a fresh one is created
                when omitted
        """
        self.registry = registry if registry is not None else CollectorRegistry()

        self.requests_total = Counter(
            "http_requests_total",
            "Total number of HTTP requests handled, labeled by route and method",
            ["route", "method"],
            registry=self.registry,
        )

        self.request_duration = Histogram(
            "http_request_duration_seconds",
            "Duration of HTTP requests in seconds",
            ["route", "method"],
            buckets=Histogram.DEFAULT_BUCKETS,
            registry=self.registry,
        )

        self.status_codes_total = Counter(
            "http_response_status_codes_total",
            "Total number of HTTP response status codes",
            ["status_code"],
            registry=self.registry,
        )

        self.student_creations = Counter(
            "student_creations_total",
            "Total number of student records created",
            registry=self.registry,
        )

    def observe_request(
        self,
        route: str,
        method: str,
        status_code: int,
        duration_seconds: float,
    ) -> None:
        """Record one completed request.

        Args:
            route: Matched route template, or ``unmatched``
            method: HTTP method
            status_code: Final response status
            duration_seconds: Wall-clock time spent downstream
        """
        self.requests_total.labels(route=route, method=method).inc()
        self.request_duration.labels(route=route, method=method).observe(duration_seconds)
        self.status_codes_total.labels(status_code=str(status_code)).inc()

    def render(self) -> bytes:
        """Render the registry in Prometheus text exposition format."""
        return generate_latest(self.registry)


__all__ = [
    "CONTENT_TYPE_LATEST",
    "HTTPMetrics",
    "UNMATCHED_ROUTE",
]
