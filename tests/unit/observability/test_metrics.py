"""Tests for Prometheus metrics."""

from unittest.mock import patch

from prometheus_client import REGISTRY

from warden.observability.metrics import (
    ESCALATIONS,
    TURNS,
    setup_metrics,
)


class TestMetrics:
    def test_counters_are_registered(self) -> None:
        TURNS.labels(tenant_id="metrics-test", reason_code="escalated").inc()
        ESCALATIONS.labels(tenant_id="metrics-test").inc()

        value = REGISTRY.get_sample_value(
            "warden_turns_total",
            {"tenant_id": "metrics-test", "reason_code": "escalated"},
        )
        assert value is not None and value >= 1

    def test_setup_metrics_starts_server(self) -> None:
        with patch("warden.observability.metrics.start_http_server") as start:
            setup_metrics(enabled=True, port=9999)
        start.assert_called_once_with(9999)

    def test_setup_metrics_disabled(self) -> None:
        with patch("warden.observability.metrics.start_http_server") as start:
            setup_metrics(enabled=False)
        start.assert_not_called()
