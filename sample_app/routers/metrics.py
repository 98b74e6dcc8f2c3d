"""Metrics exposition endpoint."""

from __future__ import annotations

import time
from typing import Callable, Iterable, Protocol

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from ..observability.instruments import Gauge
from ..observability.registry import MetricRegistry

GENERATED_TIMESTAMP_METRIC = "app_metrics_generated_timestamp_seconds"


class Collector(Protocol):
    def update(self) -> None:
        ...


class MetricsEndpointHandler:
    """Stamp the generation time, then render the registry as a response."""

    def __init__(
        self,
        registry: MetricRegistry,
        generated: Gauge,
        *,
        collectors: Iterable[Collector] = (),
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._registry = registry
        self._generated = generated
        self._collectors = tuple(collectors)
        self._clock = clock

    def __call__(self) -> Response:
        for collector in self._collectors:
            collector.update()
        self._generated.set(None, self._clock())
        return Response(
            content=self._registry.render(),
            media_type=self._registry.content_type,
        )


def build_metrics_handler(
    registry: MetricRegistry,
    *,
    collectors: Iterable[Collector] = (),
    clock: Callable[[], float] = time.time,
) -> MetricsEndpointHandler:
    """Register the generation-time gauge and return a handler bound to ``registry``."""

    generated = registry.register(
        Gauge(
            GENERATED_TIMESTAMP_METRIC,
            "Unix timestamp when /metrics response was generated",
        )
    )
    return MetricsEndpointHandler(
        registry, generated, collectors=collectors, clock=clock
    )


def get_metrics_handler(request: Request) -> MetricsEndpointHandler:
    """Return the handler the app factory stored on application state."""

    return request.app.state.metrics_handler


def create_router(path: str = "/metrics") -> APIRouter:
    router = APIRouter(tags=["observability"])

    @router.get(path, include_in_schema=False)
    def read_metrics(
        handler: MetricsEndpointHandler = Depends(get_metrics_handler),
    ) -> Response:
        return handler()

    return router


__all__ = [
    "GENERATED_TIMESTAMP_METRIC",
    "MetricsEndpointHandler",
    "build_metrics_handler",
    "create_router",
    "get_metrics_handler",
]
