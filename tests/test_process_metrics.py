"""Tests for the process-level collector."""

from __future__ import annotations

import pytest

from sample_app.observability import MetricRegistry, ProcessMetrics


class _Clock:
    def __init__(self, value: float) -> None:
        self.value = value

    def __call__(self) -> float:
        return self.value


def test_update_refreshes_uptime_and_cpu_time(registry: MetricRegistry):
    wall = _Clock(1000.0)
    cpu = _Clock(1.5)
    process = ProcessMetrics(clock=wall, cpu_clock=cpu).register(registry)

    wall.value = 1012.0
    process.update()

    assert process.start_time.get() == 1000.0
    assert process.uptime.get() == pytest.approx(12.0)
    assert process.cpu_seconds.get() == pytest.approx(1.5)

    cpu.value = 2.0
    process.update()
    assert process.cpu_seconds.get() == pytest.approx(2.0)


def test_cpu_counter_never_decreases(registry: MetricRegistry):
    cpu = _Clock(3.0)
    process = ProcessMetrics(clock=_Clock(0.0), cpu_clock=cpu).register(registry)
    process.update()

    cpu.value = 1.0
    process.update()

    assert process.cpu_seconds.get() == pytest.approx(3.0)


def test_registered_instruments_render(registry: MetricRegistry):
    ProcessMetrics().register(registry).update()

    text = registry.render()

    assert "# TYPE process_cpu_seconds_total counter" in text
    assert "# TYPE process_uptime_seconds gauge" in text
    assert 'python_info{implementation="' in text
