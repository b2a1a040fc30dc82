"""
DumbPad Backend — Request Logging Middleware
==============================================

What:  One access-log line per HTTP request with status and duration.
How:   Measures from middleware entry to response return and picks the log
       level from the status code (5xx ERROR, 4xx WARNING, else INFO).

Logged: method, path, status, duration, client IP, request ID.
Not logged: request bodies (note content), headers (X-Pin).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from dumbpad.middleware.request_id import request_id_var

logger = logging.getLogger("dumbpad.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs structured information about each HTTP request and response."""

    # Polled by monitors; logging them drowns out real traffic
    QUIET_PATHS = {"/health", "/api/pin-required"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        path = request.url.path

        response = await call_next(request)

        status = response.status_code
        if path in self.QUIET_PATHS and status < 400:
            return response

        duration_ms = (time.perf_counter() - start_time) * 1000
        rid = request_id_var.get("")

        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
