"""
FastAPI middleware for request tracing and correlation.

Adds a unique request ID to every HTTP request and binds it into structlog's
context so every log line emitted while serving the request carries it.
"""

from __future__ import annotations

import uuid
from typing import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add unique request IDs to each HTTP request.

    This middleware generates a UUID for each incoming request and:
    1. Stores it in request.state.request_id for access in route handlers
    2. Binds it as ``request_id`` in structlog contextvars
    3. Adds it to the response as X-Request-ID header for client correlation

    Example:
        >>> from lettings_admin.middleware import RequestIDMiddleware
        >>> app.add_middleware(RequestIDMiddleware)
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """
        Process each request by adding a unique request ID.

        Args:
            request: Incoming FastAPI request
            call_next: Next middleware or route handler in chain

        Returns:
            Response with X-Request-ID header added
        """
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers["X-Request-ID"] = request_id

        return response
