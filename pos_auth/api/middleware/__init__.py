"""Middleware package."""

from pos_auth.api.middleware.logging import LoggingMiddleware
from pos_auth.api.middleware.request_id import RequestIdMiddleware, get_request_id

__all__ = [
    "LoggingMiddleware",
    "RequestIdMiddleware",
    "get_request_id",
]
