"""
SubsAPI: Request ID Middleware
================================

What:  Assigns a correlation ID to each incoming request and echoes it back
       in the X-Request-ID response header.
How:   Accepts a client-supplied X-Request-ID or generates a short UUID,
       stores it in a ContextVar for loggers and exception handlers, and in
       request.state for route handlers.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuses the client's X-Request-ID when present, otherwise mints one."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
