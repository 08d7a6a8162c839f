"""
Unit tests for the HTTP metrics registry.
"""

import threading

import pytest
from prometheus_client import CollectorRegistry, Histogram

from shared.metrics import HTTPMetrics


class TestHTTPMetrics:
    """Test HTTPMetrics collectors."""

    @pytest.fixture
    def metrics(self) -> HTTPMetrics:
        return HTTPMetrics(CollectorRegistry())

    def test_observe_request_updates_all_collectors(self, metrics):
        metrics.observe_request("/api/v1/students", "GET", 200, 0.02)

        registry = metrics.registry
        labels = {"route": "/api/v1/students", "method": "GET"}
        assert registry.get_sample_value("http_requests_total", labels) == 1.0
        assert registry.get_sample_value("http_request_duration_seconds_count", labels) == 1.0
        assert registry.get_sample_value("http_request_duration_seconds_sum", labels) == pytest.approx(0.02)
        assert registry.get_sample_value(
            "http_response_status_codes_total", {"status_code": "200"}
        ) == 1.0

    def test_status_code_is_a_string_label(self, metrics):
        metrics.observe_request("unmatched", "GET", 404, 0.001)

        assert metrics.registry.get_sample_value(
            "http_response_status_codes_total", {"status_code": "404"}
        ) == 1.0

    def test_duration_uses_default_buckets(self, metrics):
        metrics.observe_request("/api/v1/health", "GET", 200, 0.3)

        labels = {"route": "/api/v1/health", "method": "GET"}
        for bound in Histogram.DEFAULT_BUCKETS:
            if bound == float("inf"):
                continue
            value = metrics.registry.get_sample_value(
                "http_request_duration_seconds_bucket", {**labels, "le": str(bound)}
            )
            assert value == (1.0 if bound >= 0.3 else 0.0)

    def test_default_registry_is_private(self):
        """Omitting the registry must not touch the global one."""
        first = HTTPMetrics()
        second = HTTPMetrics()

        first.observe_request("/x", "GET", 200, 0.1)

        assert first.registry is not second.registry
        assert second.registry.get_sample_value(
            "http_requests_total", {"route": "/x", "method": "GET"}
        ) is None

    def test_student_creations_starts_at_zero(self, metrics):
        assert metrics.registry.get_sample_value("student_creations_total") == 0.0

        metrics.student_creations.inc()

        assert metrics.registry.get_sample_value("student_creations_total") == 1.0

    def test_concurrent_observations_are_not_lost(self, metrics):
        def worker():
            for _ in range(500):
                metrics.observe_request("/api/v1/users", "POST", 201, 0.001)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert metrics.registry.get_sample_value(
            "http_requests_total", {"route": "/api/v1/users", "method": "POST"}
        ) == 4000.0
        assert metrics.registry.get_sample_value(
            "http_response_status_codes_total", {"status_code": "201"}
        ) == 4000.0

    def test_render_produces_exposition_text(self, metrics):
        metrics.observe_request("/api/v1/students", "DELETE", 204, 0.01)

        text = metrics.render().decode("utf-8")

        assert "# TYPE http_requests_total counter" in text
        assert "# TYPE http_request_duration_seconds histogram" in text
        assert 'http_response_status_codes_total{status_code="204"} 1.0' in text
