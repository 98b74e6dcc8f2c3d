"""Process-level instruments refreshed right before each scrape."""

from __future__ import annotations

import platform
import sys
import time
from threading import Lock
from typing import Callable, Dict

try:
    import resource
except ImportError:  # pragma: no cover - not available on Windows
    resource = None  # type: ignore[assignment]

from .instruments import Counter, Gauge
from .registry import MetricRegistry


def _max_rss_bytes() -> int:
    peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # Linux reports kilobytes, macOS reports bytes.
    return peak if sys.platform == "darwin" else peak * 1024


def _python_labels() -> Dict[str, str]:
    major, minor, patchlevel = platform.python_version_tuple()
    return {
        "implementation": platform.python_implementation(),
        "major": major,
        "minor": minor,
        "patchlevel": patchlevel,
    }


class ProcessMetrics:
    """Start time, uptime, CPU time, peak memory and interpreter info.

    The start time is taken when the collector is built, which the app
    factory does during process start-up.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.time,
        cpu_clock: Callable[[], float] = time.process_time,
    ) -> None:
        self._clock = clock
        self._cpu_clock = cpu_clock
        self._lock = Lock()
        self._last_cpu_seconds = 0.0
        self.started_at = clock()

        self.start_time = Gauge(
            "process_start_time_seconds",
            "Start time of the process since unix epoch in seconds.",
        )
        self.uptime = Gauge(
            "process_uptime_seconds",
            "Seconds elapsed since the process started.",
        )
        self.cpu_seconds = Counter(
            "process_cpu_seconds_total",
            "Total user and system CPU time spent in seconds.",
        )
        self.max_resident_memory = Gauge(
            "process_max_resident_memory_bytes",
            "Peak resident memory size in bytes.",
        )
        self.python_info = Gauge(
            "python_info",
            "Python platform information.",
            label_names=("implementation", "major", "minor", "patchlevel"),
        )

        self.start_time.set(None, self.started_at)
        self.python_info.set(_python_labels(), 1)

    def register(self, registry: MetricRegistry) -> "ProcessMetrics":
        registry.register(self.start_time)
        registry.register(self.uptime)
        registry.register(self.cpu_seconds)
        if resource is not None:
            registry.register(self.max_resident_memory)
        registry.register(self.python_info)
        return self

    def update(self) -> None:
        """Refresh time-varying values; call before rendering the registry."""

        now = self._clock()
        cpu_seconds = self._cpu_clock()
        with self._lock:
            delta = max(0.0, cpu_seconds - self._last_cpu_seconds)
            self._last_cpu_seconds = max(self._last_cpu_seconds, cpu_seconds)
        self.cpu_seconds.increment(None, delta)
        self.uptime.set(None, max(0.0, now - self.started_at))
        if resource is not None:
            self.max_resident_memory.set(None, _max_rss_bytes())


__all__ = ["ProcessMetrics"]
