"""
Forum — HTTP Method Override Middleware
========================================

What:  Lets an HTML form (which can only GET or POST) reach PUT, PATCH and
       DELETE routes.
How:   A POST carrying ?_method=PUT|PATCH|DELETE in its query string is
       dispatched as that method. The body is not read here, so the form
       binder still sees the untouched request body.

Templates write:
    <form method="post" action="{{ url_for('question_edit', question_id=q.id) }}?_method=PUT">
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

OVERRIDABLE_METHODS = {"PUT", "PATCH", "DELETE"}


class MethodOverrideMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "POST":
            override = request.query_params.get("_method", "").upper()
            if override in OVERRIDABLE_METHODS:
                logger.debug("Method override POST → %s for %s", override, request.url.path)
                request.scope["method"] = override
        return await call_next(request)
