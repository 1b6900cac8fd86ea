"""
Forum — Routing Helpers
========================

What:  The `posint` path convertor and redirect-after-post helpers.

Path ids:
    Routes write their ids as {question_id:posint}. The convertor only matches
    [1-9][0-9]*, so /questions/0 or /questions/create never reach an
    id-taking action; they fall through to other routes or a 404.

Redirects:
    Every successful mutation answers 303 See Other. The browser follows it
    with a GET, so refreshing the resulting page never re-submits the form.
"""

from typing import Any, Mapping, Optional
from urllib.parse import urlencode

from starlette import status
from starlette.convertors import Convertor, register_url_convertor
from starlette.requests import Request
from starlette.responses import RedirectResponse


class PositiveIntConvertor(Convertor):
    regex = "[1-9][0-9]*"

    def convert(self, value: str) -> int:
        return int(value)

    def to_string(self, value: Any) -> str:
        value = int(value)
        if value < 1:
            raise ValueError("Path ids must be positive integers")
        return str(value)


register_url_convertor("posint", PositiveIntConvertor())


def path_for(request: Request, name: str, **path_params: Any) -> str:
    """Relative URL path of the named route."""
    return str(request.app.url_path_for(name, **path_params))


def redirect_to_route(
    request: Request,
    name: str,
    query: Optional[Mapping[str, Any]] = None,
    **path_params: Any,
) -> RedirectResponse:
    """303 redirect to the named route (optionally with a query string)."""
    url = path_for(request, name, **path_params)
    if query:
        url = f"{url}?{urlencode(query)}"
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)
