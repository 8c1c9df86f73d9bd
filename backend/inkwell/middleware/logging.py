"""
Inkwell Backend: Access Log Middleware
=======================================

What:  One `inkwell.access` line per request.
How:   Times the downstream app and logs method, path, status, duration,
       request ID and caller. A request that blows up before producing a
       response is still logged (as 500) before the exception moves on to
       the server error handler.

Never logged: request bodies (passwords on /auth) or the Authorization
header (bearer tokens).
"""

import logging
import time
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger("inkwell.access")

# Load balancer probes; logging them would drown the useful lines
DEFAULT_QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Access log for the API.

    Must sit inside RequestIDMiddleware: the correlation ID is read from
    `request.state.request_id`, which that middleware sets.
    """

    def __init__(self, app: ASGIApp, quiet_paths: Optional[Iterable[str]] = None):
        super().__init__(app)
        self.quiet_paths = frozenset(quiet_paths) if quiet_paths is not None else DEFAULT_QUIET_PATHS

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.quiet_paths:
            return await call_next(request)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._log(request, 500, started)
            raise

        self._log(request, response.status_code, started)
        return response

    def _log(self, request: Request, status: int, started: float) -> None:
        duration_ms = (time.perf_counter() - started) * 1000
        rid = getattr(request.state, "request_id", "")
        caller = request.client.host if request.client else "unknown"

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            rid,
            caller,
            extra={
                "request_id": rid,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
