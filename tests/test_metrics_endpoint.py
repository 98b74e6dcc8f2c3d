"""Tests for the metrics exposition endpoint."""

from __future__ import annotations

from fastapi.testclient import TestClient

from sample_app.config import Settings
from sample_app.main import create_app
from sample_app.observability import Counter, MetricRegistry
from sample_app.routers.metrics import (
    GENERATED_TIMESTAMP_METRIC,
    build_metrics_handler,
)


class _RecordingCollector:
    def __init__(self, counter: Counter) -> None:
        self.counter = counter

    def update(self) -> None:
        self.counter.increment(None)


def test_handler_stamps_generation_time_before_rendering(registry: MetricRegistry):
    handler = build_metrics_handler(registry, clock=lambda: 1700000000.5)

    response = handler()

    assert response.media_type == registry.content_type
    body = response.body.decode()
    assert f"# TYPE {GENERATED_TIMESTAMP_METRIC} gauge" in body
    assert f"{GENERATED_TIMESTAMP_METRIC} 1700000000.5" in body


def test_handler_updates_collectors_before_rendering(registry: MetricRegistry):
    scrapes = registry.register(Counter("scrapes_total", "Scrapes"))
    handler = build_metrics_handler(
        registry, collectors=[_RecordingCollector(scrapes)], clock=lambda: 1.0
    )

    first = handler().body.decode()
    second = handler().body.decode()

    assert "scrapes_total 1" in first.splitlines()
    assert "scrapes_total 2" in second.splitlines()


def test_metrics_endpoint_serves_exposition_format(client: TestClient, registry: MetricRegistry):
    response = client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"] == "text/plain; version=0.0.4; charset=utf-8"
    body = response.text
    assert "# HELP http_requests_total Total number of HTTP requests" in body
    assert "# TYPE http_requests_total counter" in body
    assert "# TYPE http_request_duration_seconds histogram" in body
    assert "# TYPE process_start_time_seconds gauge" in body
    assert registry.get(GENERATED_TIMESTAMP_METRIC).get() > 0


def test_metrics_endpoint_counts_itself_on_the_next_scrape(client: TestClient):
    client.get("/metrics")
    body = client.get("/metrics").text

    assert 'http_requests_total{method="GET",route="/metrics",status="200"} 1' in body


def test_metrics_path_and_process_collector_are_configurable():
    registry = MetricRegistry()
    app = create_app(Settings(metrics_path="/stats", process_metrics=False), registry)

    with TestClient(app) as client:
        assert client.get("/metrics").status_code == 404
        response = client.get("/stats")

    assert response.status_code == 200
    assert "process_start_time_seconds" not in response.text
    assert "process_start_time_seconds" not in registry
