"""
Service errors.

Every operation exposed by the services raises one of these. Each carries
an HTTP-like status code and a user-facing message; the API layer turns
them into JSON responses unchanged.
"""

from __future__ import annotations

import functools
from typing import Any, Awaitable, Callable, ParamSpec, TypeVar

import structlog

logger = structlog.get_logger()

P = ParamSpec("P")
R = TypeVar("R")


class ServiceError(Exception):
    """Base class for classified service errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status_code, "message": self.message}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.status_code}, {self.message!r})"


class InvalidArgumentError(ServiceError):
    """Bad input, invalid reference or broken domain rule."""
    status_code = 400


class UnauthenticatedError(ServiceError):
    """Invalid or expired token."""
    status_code = 401


class ForbiddenError(ServiceError):
    """Operation not allowed on this resource."""
    status_code = 403


class NotFoundError(ServiceError):
    """Tenant-scoped lookup miss."""
    status_code = 404


class ConflictError(ServiceError):
    """Duplicate name within a tenant."""
    status_code = 409


class InternalError(ServiceError):
    """Store or codec failure, or a data-integrity violation."""
    status_code = 500


def service_boundary(
    message: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Error boundary for a service operation.

    Classified errors pass through untouched. Anything else is logged with
    the operation name and the raw error, then replaced by an
    ``InternalError`` carrying ``message`` so internals never reach callers.

    Usage:
        @service_boundary("Error creating role")
        async def create(self, data, business_id): ...
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return await func(*args, **kwargs)
            except ServiceError:
                raise
            except Exception as exc:
                logger.error(
                    "service_operation_failed",
                    operation=func.__qualname__,
                    error=str(exc),
                )
                raise InternalError(message) from exc

        return wrapper

    return decorator
