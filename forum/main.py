"""
Forum — FastAPI Application Factory
====================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers and
       returns the app; uvicorn serves `forum.main:app`.

Application Architecture:
    ┌───────────────────────────────────────────────────────────┐
    │                       FastAPI App                         │
    │                                                           │
    │  Middleware Chain:                                        │
    │  Req ID → Logging → Session → Method override → Routes    │
    │                                                           │
    │  Routes:                                                  │
    │  /  /questions  /answer  /user  /login  /health           │
    │                                                           │
    │  Exception Handlers (rendered error.html):                │
    │  NotFound→404 │ HTTPException→its code │ DB→500 │ *→500   │
    └───────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check, log ready
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from forum import __version__
from forum.config import settings
from forum.database import dispose_engine
from forum.exceptions import DatabaseError, ForumError, NotFoundError
from forum.middleware.logging import RequestLoggingMiddleware
from forum.middleware.method_override import MethodOverrideMiddleware
from forum.middleware.request_id import RequestIDMiddleware, current_request_id
from forum.routes import answers, auth, health, home, questions, users
from forum.templating import render

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request noise from libraries; our own access log covers it
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("Forum %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: a development setup is allowed to run with defaults
        logger.error("Configuration error: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Forum shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_page(request: Request, status_code: int, message: str):
    return render(
        request,
        "error.html",
        {
            "status_code": status_code,
            "message": message,
            "request_id": current_request_id(request),
        },
        status_code=status_code,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to rendered error pages.

    Handler hierarchy:
        NotFoundError          → 404
        DatabaseError          → 500 (generic message; context logged)
        ForumError (base)      → its status_code
        HTTPException          → its status code (unknown route, 405, ...)
        Exception (fallback)   → 500, traceback logged

    Form validation errors never get here: forms re-render themselves.
    """

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_page(request, 404, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = current_request_id(request)
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return _error_page(request, 500, exc.message)

    @app.exception_handler(ForumError)
    async def handle_forum_error(request: Request, exc: ForumError):
        rid = current_request_id(request)
        logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return _error_page(request, exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return _error_page(request, exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = current_request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return _error_page(
            request,
            500,
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Forum",
        description="Question-and-answer forum with server-rendered pages.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition: the last one added
    # sees the request first
    app.add_middleware(MethodOverrideMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        session_cookie=settings.session_cookie,
        same_site="lax",
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(home.router)
    app.include_router(questions.router)
    app.include_router(answers.router)
    app.include_router(users.router)
    app.include_router(auth.router)
    app.include_router(health.router)

    return app


app = create_app()
