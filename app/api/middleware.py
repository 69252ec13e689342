"""Middleware for request context and permissive CORS."""

import uuid
from contextvars import ContextVar
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, GET, OPTIONS, PUT, DELETE",
    "Access-Control-Allow-Headers": (
        "Accept, Content-Type, Content-Length, Accept-Encoding, X-CSRF-Token, Authorization"
    ),
}


def get_current_request_id() -> str | None:
    """Return the request ID bound to the current context, if any."""
    return _request_id.get()


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind an X-Request-ID to the request context for log correlation."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        token = _request_id.set(request_id)
        try:
            response = await call_next(request)
        finally:
            _request_id.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response


class CorsMiddleware(BaseHTTPMiddleware):
    """Allow every origin and short-circuit preflight requests.

    Landing pages are hosted on third-party builders, so origins are not
    known ahead of time. OPTIONS requests never reach the routes.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)

        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response
