"""Configuration utilities for the sample app."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .observability.instruments import DEFAULT_BUCKETS as DEFAULT_DURATION_BUCKETS

BASE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = BASE_DIR.parent
FRONTEND_DIR = BASE_DIR / "frontend"

DEFAULT_PORT = 3000


def _env_flag(name: str, default: bool) -> bool:
    """Return a boolean flag derived from environment variables."""

    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _parse_buckets(raw: str | None) -> tuple[float, ...]:
    """Return bucket bounds parsed from a comma-delimited string."""

    if not raw:
        return DEFAULT_DURATION_BUCKETS
    parts: list[float] = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        try:
            parts.append(float(chunk))
        except ValueError:
            continue
    return tuple(parts) if parts else DEFAULT_DURATION_BUCKETS


def _load_environment() -> None:
    """Load environment variables from a ``.env`` file if present."""

    explicit_path = os.getenv("SAMPLE_APP_ENV_FILE")
    candidates = []

    if explicit_path:
        candidates.append(Path(explicit_path))

    candidates.append(PROJECT_ROOT / ".env")

    for candidate in candidates:
        try_path = candidate.expanduser()
        if try_path.exists():
            load_dotenv(try_path, override=False)


_load_environment()


class Settings(BaseModel):
    """Application configuration loaded from environment variables."""

    model_config = ConfigDict(validate_default=True)

    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", str(DEFAULT_PORT))))
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "info"))
    metrics_path: str = Field(
        default_factory=lambda: os.getenv("METRICS_PATH", "/metrics")
    )
    request_duration_buckets: Tuple[float, ...] = Field(
        default_factory=lambda: _parse_buckets(os.getenv("METRICS_DURATION_BUCKETS"))
    )
    process_metrics: bool = Field(
        default_factory=lambda: _env_flag("METRICS_PROCESS_COLLECTOR", True)
    )

    @field_validator("log_level", mode="after")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        return value.strip().lower() or "info"

    @field_validator("metrics_path", mode="after")
    @classmethod
    def _normalise_metrics_path(cls, value: str) -> str:
        value = value.strip() or "/metrics"
        return value if value.startswith("/") else f"/{value}"

    @field_validator("request_duration_buckets", mode="after")
    @classmethod
    def _normalise_buckets(cls, value: Tuple[float, ...]) -> Tuple[float, ...]:
        bounds = tuple(sorted(set(value)))
        return bounds or DEFAULT_DURATION_BUCKETS


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the cached settings so that subsequent calls reload from the environment."""

    get_settings.cache_clear()


__all__ = [
    "DEFAULT_DURATION_BUCKETS",
    "DEFAULT_PORT",
    "FRONTEND_DIR",
    "Settings",
    "get_settings",
    "reset_settings_cache",
]
