"""
Quillnote Backend — Request ID Middleware
===========================================

What:  Assigns a short ID to each request and returns it in X-Request-ID.
Why:   Every log line and error body for one request shares the same ID,
       so a user-reported error can be found in the logs.
How:   Reuses an incoming X-Request-ID (e.g. from the frontend) or generates
       one, stores it in a ContextVar, echoes it in the response header.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests in one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that assigns a unique ID to each request for tracing."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 characters is enough to correlate log lines
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
