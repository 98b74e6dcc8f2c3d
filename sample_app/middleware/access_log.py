"""Access logging for every handled request."""

from __future__ import annotations

import logging
from time import perf_counter

from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("sample_app.access")


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and latency once a response is produced."""

    async def dispatch(self, request, call_next):
        start = perf_counter()
        response = await call_next(request)
        elapsed_ms = (perf_counter() - start) * 1000.0
        logger.info(
            "%s %s %s %.0fms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response


__all__ = ["AccessLogMiddleware"]
