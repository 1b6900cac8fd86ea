"""
Forum — Custom Exception Hierarchy
===================================

What:  Application-specific exceptions for the failures that escape an action.
Why:   Global handlers (registered in main.py) turn these into rendered error
       pages with the right status code, without try/except in every route.
How:   Each exception carries a user-safe message and an optional context dict
       that is logged but never rendered.

Exception Hierarchy:
    ForumError (base)
    ├── NotFoundError            → 404 Not Found
    └── DatabaseError            → 500 Internal Server Error
        └── ConcurrencyError     → 500 Internal Server Error

Form validation failures and authorization denials are not exceptions:
forms collect field errors and re-render, and the security layer returns a
Decision that the action turns into a redirect or a 403 page.
"""

from typing import Any, Dict, Optional


class ForumError(Exception):
    """
    Base exception for all forum application errors.

    Attributes:
        message:  User-facing error description (safe to render)
        context:  Additional debug info (logged, never rendered)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(ForumError):
    """
    Raised when the entity addressed by a path id does not exist.

    SQLAlchemy returns None for missing rows; repositories convert that into
    this exception so the handler can answer 404.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(ForumError):
    """
    Raised when a flush against the database fails unexpectedly.

    The rendered message is always generic; constraint names and SQL stay in
    the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConcurrencyError(DatabaseError):
    """
    Raised when an optimistic-lock check fails.

    Two requests edited the same row; the later flush saw a different version
    than the one it loaded. Not retried: the request fails with 500 and the
    transaction is rolled back.
    """

    def __init__(
        self,
        resource: str = "resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        super().__init__(
            message=f"The {resource} was modified by someone else. Reload the page and try again.",
            context=ctx,
        )
