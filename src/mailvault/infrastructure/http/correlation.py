"""
FastAPI middleware that assigns a correlation ID to every request.

A fresh UUID is generated per request (client-supplied IDs are ignored),
stored on ``request.state.correlation_id`` for handlers and echoed in the
``X-Correlation-ID`` response header.
"""

from __future__ import annotations

import uuid
from typing import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

CORRELATION_HEADER = "X-Correlation-ID"


def new_correlation_id() -> str:
    return str(uuid.uuid4())


def correlation_id_from(request: Request) -> str:
    """Return the request's correlation ID, generating one if middleware did not run."""
    correlation_id = getattr(request.state, "correlation_id", None)
    if not correlation_id:
        correlation_id = new_correlation_id()
        request.state.correlation_id = correlation_id
    return correlation_id


class CorrelationMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        correlation_id = new_correlation_id()
        request.state.correlation_id = correlation_id

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
