"""
Forum — Access Log Middleware
==============================

What:  One access-log line per page request, written after the response.

Line format:
    PUT(POST) /questions/3/edit → 303 in 41.2ms [a1b2c3d4] user=1 from 10.0.0.7

    - The verb in parentheses is the one on the wire when the method override
      rewrote it (HTML forms can only POST).
    - user= is the id of the logged-in user, or "-" for anonymous callers.
      It is read from request.state after the route ran, so it is only known
      for routes that resolve the current user.

Level by status: 5xx → ERROR, 4xx → WARNING, everything else → INFO.
Form bodies are never logged: they carry passwords.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from forum.middleware.request_id import request_id_var

logger = logging.getLogger("forum.access")

# Probed every few seconds by the orchestrator
QUIET_PATHS = frozenset({"/health"})


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        wire_method = request.method
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        # Inner middleware and routes share this scope
        method = request.scope.get("method", wire_method)
        if method != wire_method:
            method = f"{method}({wire_method})"
        app_user = getattr(request.state, "app_user", None)
        client = request.client.host if request.client else "-"

        logger.log(
            _level_for(response.status_code),
            "%s %s → %d in %.1fms [%s] user=%s from %s",
            method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id_var.get(""),
            app_user.id if app_user is not None else "-",
            client,
        )
        return response
