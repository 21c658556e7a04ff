"""
Journeo Backend — Request ID Middleware
=========================================

What:  Gives every request a correlation id and echoes it in the response.
How:   Uses the client's X-Request-ID when sent, otherwise a short UUID;
       stores it in a ContextVar so loggers and error handlers anywhere in
       the request can read it.
Who:   Applied to every request via Starlette middleware.

The id travels in the X-Request-ID header only; error bodies keep the
fixed {status, error, message, path} shape.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 chars is enough to correlate log lines and stays readable
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
