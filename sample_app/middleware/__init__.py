"""ASGI middleware utilities for the sample app."""

from .access_log import AccessLogMiddleware

__all__ = ["AccessLogMiddleware"]
