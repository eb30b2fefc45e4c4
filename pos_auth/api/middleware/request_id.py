"""
Request ID middleware for request tracing.
"""

import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from pos_auth.utils.context import get_request_id, reset_request_id, set_request_id


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Add unique request ID to each request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        # Check for incoming request ID header
        request_id = request.headers.get("X-Request-ID")

        if not request_id:
            request_id = str(uuid.uuid4())

        token = set_request_id(request_id)

        try:
            request.state.request_id = request_id

            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id

            return response
        finally:
            reset_request_id(token)


__all__ = ["RequestIdMiddleware", "get_request_id"]
