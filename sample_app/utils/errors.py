from __future__ import annotations

from typing import Any, Dict


class MetricsError(Exception):
    """Base class for metric registration and recording failures."""

    def __init__(self, code: str, message: str, extra: Dict[str, Any] | None = None):
        super().__init__(message)
        self.code = code
        self.extra = extra or {}


class DuplicateNameError(MetricsError):
    """Raised when two instruments are registered under the same name."""

    def __init__(self, name: str) -> None:
        super().__init__(
            "duplicate_metric",
            f"metric {name!r} is already registered",
            {"name": name},
        )
        self.name = name


class InvalidAmountError(MetricsError, ValueError):
    """Raised when a counter is asked to move backwards."""

    def __init__(self, name: str, amount: float) -> None:
        super().__init__(
            "invalid_amount",
            f"counter {name!r} cannot be incremented by negative amount {amount!r}",
            {"name": name, "amount": amount},
        )
        self.amount = amount


class InvalidMetricNameError(MetricsError, ValueError):
    """Raised when an instrument is declared with an unusable name or layout."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__("invalid_name", message, {"name": name})
        self.name = name


__all__ = [
    "DuplicateNameError",
    "InvalidAmountError",
    "InvalidMetricNameError",
    "MetricsError",
]
