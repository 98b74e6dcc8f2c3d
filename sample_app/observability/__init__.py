"""Metrics instruments, registry and request instrumentation."""

from .instruments import (
    DEFAULT_BUCKETS,
    Counter,
    Gauge,
    Histogram,
    HistogramSnapshot,
    TimerHandle,
)
from .middleware import HttpMetrics, RequestInstrumentationMiddleware
from .process import ProcessMetrics
from .registry import CONTENT_TYPE_LATEST, MetricRegistry

__all__ = [
    "CONTENT_TYPE_LATEST",
    "Counter",
    "DEFAULT_BUCKETS",
    "Gauge",
    "Histogram",
    "HistogramSnapshot",
    "HttpMetrics",
    "MetricRegistry",
    "ProcessMetrics",
    "RequestInstrumentationMiddleware",
    "TimerHandle",
]
