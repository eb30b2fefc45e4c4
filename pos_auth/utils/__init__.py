"""Utility functions."""

from pos_auth.utils.context import (
    add_request_context,
    get_request_id,
    set_context_business,
)
from pos_auth.utils.timezone import UTC, utc_now

__all__ = [
    "add_request_context",
    "get_request_id",
    "set_context_business",
    "UTC",
    "utc_now",
]
