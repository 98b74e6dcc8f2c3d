"""Tests for settings loading and application start-up."""

from __future__ import annotations

import pytest

from sample_app.config import (
    DEFAULT_DURATION_BUCKETS,
    DEFAULT_PORT,
    get_settings,
    reset_settings_cache,
)
from sample_app.main import create_app
from sample_app.observability import Counter, MetricRegistry
from sample_app.utils.errors import DuplicateNameError


def test_defaults_without_environment():
    settings = get_settings()

    assert settings.port == DEFAULT_PORT == 3000
    assert settings.metrics_path == "/metrics"
    assert settings.request_duration_buckets == DEFAULT_DURATION_BUCKETS
    assert settings.process_metrics is True


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("METRICS_PATH", "stats")
    monkeypatch.setenv("METRICS_DURATION_BUCKETS", "1, 0.5,bad,,2,1")
    monkeypatch.setenv("METRICS_PROCESS_COLLECTOR", "off")
    reset_settings_cache()

    settings = get_settings()

    assert settings.port == 8080
    assert settings.metrics_path == "/stats"
    assert settings.request_duration_buckets == (0.5, 1.0, 2.0)
    assert settings.process_metrics is False


def test_settings_are_cached_until_reset(monkeypatch: pytest.MonkeyPatch):
    first = get_settings()
    monkeypatch.setenv("PORT", "9090")

    assert get_settings() is first
    reset_settings_cache()
    assert get_settings().port == 9090


def test_configured_buckets_reach_the_duration_histogram(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("METRICS_DURATION_BUCKETS", "0.25,0.75")
    reset_settings_cache()

    app = create_app(registry=MetricRegistry())

    assert app.state.http_metrics.duration.buckets == (0.25, 0.75)


def test_duplicate_instrument_aborts_start_up():
    registry = MetricRegistry()
    registry.register(Counter("http_requests_total", "Already taken"))

    with pytest.raises(DuplicateNameError):
        create_app(registry=registry)


def test_log_level_is_normalised_for_uvicorn(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("LOG_LEVEL", " INFO ")
    reset_settings_cache()

    assert get_settings().log_level == "info"


def test_unordered_bucket_environment_does_not_break_start_up(
    monkeypatch: pytest.MonkeyPatch,
):
    monkeypatch.setenv("METRICS_DURATION_BUCKETS", "1,0.5")
    reset_settings_cache()

    app = create_app(registry=MetricRegistry())

    assert app.state.http_metrics.duration.buckets == (0.5, 1.0)
