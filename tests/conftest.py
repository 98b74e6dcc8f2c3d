"""Test configuration for the sample app."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Generator

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from sample_app.config import Settings, reset_settings_cache  # noqa: E402
from sample_app.main import create_app  # noqa: E402
from sample_app.observability import MetricRegistry  # noqa: E402

_CONFIG_VARS = (
    "HOST",
    "PORT",
    "LOG_LEVEL",
    "METRICS_PATH",
    "METRICS_DURATION_BUCKETS",
    "METRICS_PROCESS_COLLECTOR",
)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Provide isolated configuration for each test."""

    for name in _CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture()
def registry() -> MetricRegistry:
    return MetricRegistry()


@pytest.fixture()
def app(registry: MetricRegistry) -> FastAPI:
    return create_app(Settings(), registry)


@pytest.fixture()
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Return a test client for a freshly built application."""

    with TestClient(app) as test_client:
        yield test_client
