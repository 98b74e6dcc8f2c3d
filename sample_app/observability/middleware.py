"""Request instrumentation feeding the HTTP counter and latency histogram."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from fastapi import Request
from starlette.background import BackgroundTasks
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.routing import Match
from starlette.types import ASGIApp

from .instruments import DEFAULT_BUCKETS, Counter, Histogram, TimerHandle
from .registry import MetricRegistry


@dataclass
class HttpMetrics:
    """The request counter and duration histogram recorded per request."""

    requests: Counter
    duration: Histogram

    @classmethod
    def register(
        cls,
        registry: MetricRegistry,
        *,
        buckets: Iterable[float] = DEFAULT_BUCKETS,
    ) -> "HttpMetrics":
        requests = registry.register(
            Counter(
                "http_requests_total",
                "Total number of HTTP requests",
                label_names=("method", "route", "status"),
            )
        )
        duration = registry.register(
            Histogram(
                "http_request_duration_seconds",
                "HTTP request duration in seconds",
                label_names=("method", "route"),
                buckets=buckets,
            )
        )
        return cls(requests=requests, duration=duration)


def resolve_route(request: Request) -> str:
    """Return the matched route's path template, or the raw path if none matches."""

    for route in request.app.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            template = getattr(route, "path_format", None) or getattr(route, "path", None)
            if template:
                return template
            break
    return request.url.path


def _on_response_finished(response: Response, callback, *args) -> None:
    """Run ``callback(*args)`` once the response body has been fully sent."""

    tasks = BackgroundTasks()
    if response.background is not None:
        tasks.add_task(response.background)
    tasks.add_task(callback, *args)
    response.background = tasks


class RequestInstrumentationMiddleware(BaseHTTPMiddleware):
    """ASGI middleware that counts and times every request."""

    def __init__(self, app: ASGIApp, *, metrics: HttpMetrics) -> None:
        super().__init__(app)
        self._metrics = metrics

    async def dispatch(self, request: Request, call_next):
        method = request.method
        route = resolve_route(request)
        timer = self._metrics.duration.start_timer({"method": method, "route": route})
        try:
            response = await call_next(request)
        except Exception:
            # The server error handler answers with a 500.
            await self._record(timer, method, route, 500)
            raise
        _on_response_finished(
            response, self._record, timer, method, route, response.status_code
        )
        return response

    async def _record(
        self, timer: TimerHandle, method: str, route: str, status: int
    ) -> None:
        self._metrics.requests.increment(
            {"method": method, "route": route, "status": status}
        )
        timer.stop()


__all__ = ["HttpMetrics", "RequestInstrumentationMiddleware", "resolve_route"]
