"""
Forum — Template Rendering
===========================

What:  Jinja2 environment (via fastapi.templating) and the render() helper
       every action uses to build an HTML response.
How:   render() adds what every page needs to the context: the logged-in
       user snapshot (request.state.app_user, set by
       security.get_current_user) and the pending flash notices, which are
       consumed by this render.
"""

from pathlib import Path
from typing import Any, Mapping, Optional

from fastapi.templating import Jinja2Templates
from starlette.requests import Request
from starlette.responses import Response

from forum.flash import pop_flashes, translate

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["trans"] = translate


def render(
    request: Request,
    name: str,
    context: Optional[Mapping[str, Any]] = None,
    status_code: int = 200,
) -> Response:
    page_context = {
        "app_user": getattr(request.state, "app_user", None),
        "flashes": pop_flashes(request),
    }
    page_context.update(context or {})
    return templates.TemplateResponse(
        request,
        name,
        page_context,
        status_code=status_code,
    )
