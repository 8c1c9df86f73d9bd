"""
Inkwell Backend: Request ID Middleware
=======================================

What:  Assigns each request a short correlation ID and echoes it back.
How:   Reuses a client-supplied X-Request-ID or generates one, stores it in
       a ContextVar for loggers and exception handlers, and sets it on the
       response headers.

Every error body carries the same ID, so a client report of a 500 can be
matched to the server-side log line that holds the real exception.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that assigns a unique ID to each request for tracing."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 hex chars is enough to correlate and still readable in logs
        rid = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
