"""Sample app entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Iterable

from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, JSONResponse

from . import __version__
from .config import FRONTEND_DIR, Settings, get_settings
from .middleware import AccessLogMiddleware
from .observability import (
    HttpMetrics,
    MetricRegistry,
    ProcessMetrics,
    RequestInstrumentationMiddleware,
)
from .routers import api, health, metrics

logger = logging.getLogger("sample_app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Announce the service once the server has started it."""

    settings: Settings = app.state.settings
    logger.info("Sample app running on port %s", settings.port)
    yield


async def handle_unexpected_exception(
    request: Request, exc: Exception
) -> JSONResponse:
    """Ensure unexpected exceptions return a JSON payload."""

    logger.exception(
        "Unhandled exception while processing %s %s", request.method, request.url.path
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error"},
    )


async def serve_frontend() -> FileResponse:
    """Return the demo page that drives traffic against the API."""

    return FileResponse(FRONTEND_DIR / "index.html")


def create_app(
    settings: Settings | None = None,
    registry: MetricRegistry | None = None,
) -> FastAPI:
    """Build the application and the instruments it records into.

    A fresh :class:`MetricRegistry` is created unless one is supplied.
    Registering an instrument twice raises ``DuplicateNameError`` and aborts
    start-up.
    """

    settings = settings or get_settings()
    if registry is None:
        registry = MetricRegistry()

    http_metrics = HttpMetrics.register(
        registry, buckets=settings.request_duration_buckets
    )
    collectors = []
    if settings.process_metrics:
        collectors.append(ProcessMetrics().register(registry))
    metrics_handler = metrics.build_metrics_handler(registry, collectors=collectors)

    app = FastAPI(title="Sample App", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.metrics_registry = registry
    app.state.http_metrics = http_metrics
    app.state.metrics_handler = metrics_handler

    app.add_middleware(RequestInstrumentationMiddleware, metrics=http_metrics)
    app.add_middleware(AccessLogMiddleware)

    routers: Iterable = (
        health.router,
        api.router,
        metrics.create_router(settings.metrics_path),
    )
    for router in routers:
        app.include_router(router)

    app.add_exception_handler(Exception, handle_unexpected_exception)
    app.add_api_route("/", serve_frontend, methods=["GET"], include_in_schema=False)
    return app


app = create_app()


__all__ = ["app", "create_app"]
