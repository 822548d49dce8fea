"""
Roster Backend — Request Logging Middleware
=============================================

What:  One access-log line per HTTP request with status, duration and the
       matched route template (so /students/1 and /students/2 group together).
How:   Measures time around call_next and logs to the "roster.access" logger,
       choosing the level from the status class.
When:  After RequestIDMiddleware, so the request ID is available.

Log line:
    2026-01-15T12:00:00 [INFO] roster.access: POST /students 201 1.3ms [a1b2c3d4] from 127.0.0.1

Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("roster.access")

# Probed every few seconds by container runtimes; kept out of the access log
SILENT_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    """5xx → ERROR, 4xx → WARNING, everything else → INFO."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def route_template(request: Request) -> str:
    """Matched route path ("/students/{student_id}"), or the raw path if none matched."""
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, route template, status, duration, request ID and
    client IP. A handler that raises is logged as 500 before the exception
    continues to the server error handler.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SILENT_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            self._log(request, status, (time.perf_counter() - start_time) * 1000)

    @staticmethod
    def _log(request: Request, status: int, duration_ms: float) -> None:
        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"
        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "route": route_template(request),
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
