"""Metric instruments keyed by label sets."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from threading import Lock
from time import perf_counter
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from ..utils.errors import InvalidAmountError, InvalidMetricNameError

LabelKey = Tuple[Tuple[str, str], ...]
Labels = Optional[Mapping[str, object]]
Sample = Tuple[str, LabelKey, float]

DEFAULT_BUCKETS: Tuple[float, ...] = (0.1, 0.3, 0.5, 1.0, 2.0, 5.0)

_METRIC_NAME_PATTERN = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*$")
_LABEL_NAME_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def label_key(labels: Labels = None) -> LabelKey:
    """Return the canonical, hashable form of ``labels`` (sorted by name)."""

    if not labels:
        return ()
    return tuple(sorted((str(name), str(value)) for name, value in labels.items()))


def format_value(value: float) -> str:
    """Render a sample value the way the text exposition format expects."""

    if isinstance(value, bool):
        value = int(value)
    if isinstance(value, int):
        return str(value)
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


class Instrument:
    """Named metric accumulator shared by every instrument type."""

    kind = "untyped"

    def __init__(
        self,
        name: str,
        help_text: str,
        *,
        label_names: Iterable[str] = (),
    ) -> None:
        if not _METRIC_NAME_PATTERN.match(name):
            raise InvalidMetricNameError(name, f"invalid metric name {name!r}")
        label_names = tuple(label_names)
        for label in label_names:
            if not _LABEL_NAME_PATTERN.match(label) or label.startswith("__"):
                raise InvalidMetricNameError(
                    name, f"invalid label name {label!r} on metric {name!r}"
                )
        self.name = name
        self.help = help_text
        self.label_names = label_names
        self._lock = Lock()

    def samples(self) -> List[Sample]:
        """Return ``(sample_name, labels, value)`` rows in render order."""

        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class Counter(Instrument):
    """Monotonically increasing value per label set."""

    kind = "counter"

    def __init__(
        self,
        name: str,
        help_text: str,
        *,
        label_names: Iterable[str] = (),
    ) -> None:
        super().__init__(name, help_text, label_names=label_names)
        self._values: Dict[LabelKey, float] = {}

    def increment(self, labels: Labels = None, amount: float = 1) -> None:
        if not amount >= 0:
            raise InvalidAmountError(self.name, amount)
        key = label_key(labels)
        with self._lock:
            self._values[key] = self._values.get(key, 0) + amount

    def get(self, labels: Labels = None) -> float:
        key = label_key(labels)
        with self._lock:
            return self._values.get(key, 0)

    def samples(self) -> List[Sample]:
        with self._lock:
            items = sorted(self._values.items())
        if not items and not self.label_names:
            items = [((), 0)]
        return [(self.name, key, value) for key, value in items]


class Gauge(Instrument):
    """Latest value per label set; each ``set`` replaces the previous one."""

    kind = "gauge"

    def __init__(
        self,
        name: str,
        help_text: str,
        *,
        label_names: Iterable[str] = (),
    ) -> None:
        super().__init__(name, help_text, label_names=label_names)
        self._values: Dict[LabelKey, float] = {}

    def set(self, labels: Labels, value: float) -> None:
        key = label_key(labels)
        with self._lock:
            self._values[key] = value

    def get(self, labels: Labels = None) -> float:
        key = label_key(labels)
        with self._lock:
            return self._values.get(key, 0)

    def samples(self) -> List[Sample]:
        with self._lock:
            items = sorted(self._values.items())
        if not items and not self.label_names:
            items = [((), 0)]
        return [(self.name, key, value) for key, value in items]


@dataclass
class _HistogramSeries:
    """Cumulative bucket counts for one label set; the last slot is ``+Inf``."""

    buckets: List[int]
    total: float = 0.0
    count: int = 0


@dataclass(frozen=True)
class HistogramSnapshot:
    """Point-in-time copy of one histogram series."""

    buckets: Dict[float, int]
    sum: float
    count: int


@dataclass(frozen=True)
class TimerHandle:
    """A started duration measurement.

    ``stop()`` records the elapsed seconds into the owning histogram and
    returns them. Call it at most once per handle.
    """

    histogram: "Histogram"
    labels: Dict[str, object] = field(default_factory=dict)
    started_at: float = 0.0

    def stop(self) -> float:
        elapsed = self.histogram.clock() - self.started_at
        self.histogram.observe(self.labels, elapsed)
        return elapsed


class Histogram(Instrument):
    """Distribution of observations over fixed, ascending bucket bounds."""

    kind = "histogram"

    def __init__(
        self,
        name: str,
        help_text: str,
        *,
        label_names: Iterable[str] = (),
        buckets: Iterable[float] = DEFAULT_BUCKETS,
        clock: Callable[[], float] = perf_counter,
    ) -> None:
        super().__init__(name, help_text, label_names=label_names)
        if "le" in self.label_names:
            raise InvalidMetricNameError(
                name, f"histogram {name!r} cannot use the reserved label 'le'"
            )
        bounds = [float(bound) for bound in buckets]
        # +Inf is always implicit.
        while bounds and bounds[-1] == math.inf:
            bounds.pop()
        for lower, upper in zip(bounds, bounds[1:]):
            if not lower < upper:
                raise InvalidMetricNameError(
                    name, f"histogram {name!r} buckets must be strictly increasing"
                )
        self.buckets: Tuple[float, ...] = tuple(bounds)
        self.clock = clock
        self._series: Dict[LabelKey, _HistogramSeries] = {}

    def observe(self, labels: Labels, value: float) -> None:
        if labels and "le" in labels:
            raise InvalidMetricNameError(
                self.name, f"histogram {self.name!r} cannot use the reserved label 'le'"
            )
        key = label_key(labels)
        with self._lock:
            series = self._series.get(key)
            if series is None:
                series = self._series[key] = _HistogramSeries(
                    [0] * (len(self.buckets) + 1)
                )
            for index, bound in enumerate(self.buckets):
                if value <= bound:
                    series.buckets[index] += 1
            series.buckets[-1] += 1
            series.total += value
            series.count += 1

    def start_timer(self, labels: Labels = None) -> TimerHandle:
        return TimerHandle(self, dict(labels or {}), self.clock())

    def snapshot(self, labels: Labels = None) -> HistogramSnapshot:
        bounds = self.buckets + (math.inf,)
        key = label_key(labels)
        with self._lock:
            series = self._series.get(key)
            if series is None:
                return HistogramSnapshot(dict.fromkeys(bounds, 0), 0.0, 0)
            return HistogramSnapshot(
                dict(zip(bounds, series.buckets)), series.total, series.count
            )

    def samples(self) -> List[Sample]:
        bounds = self.buckets + (math.inf,)
        with self._lock:
            items = [
                (key, list(series.buckets), series.total, series.count)
                for key, series in sorted(self._series.items())
            ]
        if not items and not self.label_names:
            items = [((), [0] * len(bounds), 0.0, 0)]

        rows: List[Sample] = []
        for key, counts, total, count in items:
            for bound, cumulative in zip(bounds, counts):
                le = (("le", format_value(bound)),)
                rows.append((f"{self.name}_bucket", key + le, cumulative))
            rows.append((f"{self.name}_sum", key, total))
            rows.append((f"{self.name}_count", key, count))
        return rows


__all__ = [
    "Counter",
    "DEFAULT_BUCKETS",
    "Gauge",
    "Histogram",
    "HistogramSnapshot",
    "Instrument",
    "LabelKey",
    "Labels",
    "TimerHandle",
    "format_value",
    "label_key",
]
