"""Metrics module using Prometheus."""

from .prometheus_metrics import (
    CONTENT_TYPE_LATEST,
    UNMATCHED_ROUTE,
    HTTPMetrics,
)

__all__ = [
    "CONTENT_TYPE_LATEST",
    "HTTPMetrics",
    "UNMATCHED_ROUTE",
]
