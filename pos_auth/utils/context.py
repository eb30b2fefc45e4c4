"""
Request Context Utilities.

Holds the request ID for the current request so that log lines emitted
from services can be correlated with the HTTP request that caused them.

Usage:
    from pos_auth.utils.context import get_request_id

    logger.info("Processing", request_id=get_request_id())
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Any, Optional


# Request-scoped context using contextvars (async-safe)
_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_business_id: ContextVar[Optional[str]] = ContextVar("business_id", default=None)


def get_request_id() -> Optional[str]:
    """Get the current request ID (None outside a request)."""
    return _request_id.get()


def set_request_id(request_id: Optional[str]):
    """Set the request ID, returning the token needed to reset it."""
    return _request_id.set(request_id)


def reset_request_id(token) -> None:
    _request_id.reset(token)


def set_context_business(business_id: Optional[str]) -> None:
    """
    Record the tenant the current request operates on.

    Routes call this once the business ID is known so every log line
    emitted for the request carries it.
    """
    _business_id.set(business_id)


def add_request_context(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor that adds request context to all logs."""
    request_id = get_request_id()
    if request_id:
        event_dict.setdefault("request_id", request_id)

    business_id = _business_id.get()
    if business_id:
        event_dict.setdefault("business_id", business_id)

    return event_dict
