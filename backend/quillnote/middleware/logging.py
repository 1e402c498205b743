"""
Quillnote Backend — Request Logging Middleware
================================================

What:  One access-log line per HTTP request.
How:   Measures duration around call_next and logs method, path, status,
       duration, request ID and client IP on the `quillnote.access` logger.

Logged:     method, path, status, duration, IP, request ID
Not logged: request bodies (note content is user data)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from quillnote.middleware.request_id import request_id_var

logger = logging.getLogger("quillnote.access")

# Probed every few seconds by Docker / load balancers
SKIPPED_PATHS = {"/health", "/api/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs structured information about each HTTP request and response.

    Typical durations:
        - GET /health: 1-5ms
        - GET /api/notes: 5-50ms (database query)
        - POST /api/notes/{id}/summarize: 1000-10000ms (provider call dominates)

    Level follows the status code: 5xx → ERROR, 4xx → WARNING, else INFO.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
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
