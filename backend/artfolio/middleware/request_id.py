"""
Artfolio Backend — Request ID Middleware
=========================================

What:  Assigns a short correlation id to each request and echoes it back in
       the X-Request-ID response header.
How:   Reuses a client-supplied X-Request-ID if present, otherwise takes the
       first 8 characters of a fresh UUID. The id is kept in a ContextVar so
       loggers and exception handlers can read it without the Request.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one thread each see their own id.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Set request_id_var and request.state.request_id for the request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response
