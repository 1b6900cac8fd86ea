"""
Forum — Correlation IDs
========================

Every page request gets an id that shows up in the access log, in handler
log lines and on the error page, and goes back in the X-Request-ID header.

An id sent by a proxy in front of us is reused when it looks like an id
(letters, digits, '.', '_' or '-', at most 64 characters). Anything else is
replaced: the value ends up in log lines and HTML, so free text from the
client is not echoed.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

HEADER = "X-Request-ID"

_VALID_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


def accept_request_id(incoming: Optional[str]) -> str:
    """The client's id if it is well-formed, a fresh one otherwise."""
    if incoming and _VALID_ID.fullmatch(incoming):
        return incoming
    return new_request_id()


def current_request_id(request: Request) -> str:
    # Handlers for unexpected errors run outside this middleware, after the
    # context variable was reset; request.state still has the id
    return getattr(request.state, "request_id", None) or request_id_var.get("")


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = accept_request_id(request.headers.get(HEADER))
        request.state.request_id = request_id

        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[HEADER] = request_id
        return response
