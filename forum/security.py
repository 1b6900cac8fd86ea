"""
Forum — Authentication & Authorization
=======================================

What:  Password hashing, session login state, and role checks for actions.
How:   - Passwords: passlib CryptContext (bcrypt).
       - Login state: the user id lives in the signed session cookie
         (Starlette SessionMiddleware); get_current_user() loads the User.
       - Authorization: is_granted() returns a Decision and never raises.
         Actions call it first and hand a denial to deny(), which answers
         with a login redirect or a 403 page before any form is bound.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request
from starlette.responses import Response

from forum.database import get_db_session
from forum.models.user import ROLE_ADMIN, ROLE_USER, User
from forum.routing import redirect_to_route
from forum.templating import render

logger = logging.getLogger(__name__)

IS_AUTHENTICATED = "IS_AUTHENTICATED"

SESSION_USER_KEY = "user_id"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ── Passwords ─────────────────────────────────────────────────────────────

def _truncate_for_bcrypt(password: str) -> str:
    """
    Truncate to bcrypt's 72-byte limit without splitting a UTF-8 sequence.
    """
    b = password.encode("utf-8")[:72]
    return b.decode("utf-8", "ignore")


def hash_password(password: str) -> str:
    return pwd_context.hash(_truncate_for_bcrypt(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(_truncate_for_bcrypt(plain_password), hashed_password)


# ── Login state ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AppUser:
    """
    Plain copy of the logged-in user for templates and logs.

    It outlives the request's database session: a rollback expires the ORM
    User, and an error page must still render the navbar.
    """

    id: int
    email: str
    display_name: str
    is_admin: bool

    @classmethod
    def from_user(cls, user: User) -> "AppUser":
        return cls(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            is_admin=user.is_admin,
        )


def login(request: Request, user: User) -> None:
    # Drop anything from the anonymous session before binding the user
    request.session.clear()
    request.session[SESSION_USER_KEY] = user.id
    logger.info("User %s logged in", user.id)


def logout(request: Request) -> None:
    user_id = request.session.get(SESSION_USER_KEY)
    request.session.clear()
    if user_id is not None:
        logger.info("User %s logged out", user_id)


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> Optional[User]:
    """
    Dependency returning the logged-in User, or None for anonymous callers.

    Also stores an AppUser snapshot on request.state.app_user for templates
    and the access log. A session pointing at a vanished user is treated as
    anonymous.
    """
    user = None
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is not None:
        user = await db.get(User, user_id)
        if user is None:
            logger.warning("Session refers to unknown user %s; ignoring", user_id)
            request.session.pop(SESSION_USER_KEY, None)
    request.state.app_user = AppUser.from_user(user) if user is not None else None
    return user


# ── Authorization ─────────────────────────────────────────────────────────

class Decision(enum.Enum):
    ALLOWED = "allowed"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"

    @property
    def allowed(self) -> bool:
        return self is Decision.ALLOWED


def is_granted(user: Optional[User], attribute: str) -> Decision:
    """
    Decide whether `user` may perform an action guarded by `attribute`.

    Attributes:
        IS_AUTHENTICATED: any logged-in user
        ROLE_USER:        same as IS_AUTHENTICATED (every user has it)
        ROLE_ADMIN:       users holding the admin role

    Anonymous callers get UNAUTHENTICATED (so they can be sent to the login
    page); logged-in users lacking the role get FORBIDDEN.
    """
    if user is None:
        return Decision.UNAUTHENTICATED
    if attribute in (IS_AUTHENTICATED, ROLE_USER):
        return Decision.ALLOWED
    if user.has_role(attribute):
        return Decision.ALLOWED
    return Decision.FORBIDDEN


def deny(request: Request, decision: Decision) -> Response:
    """Response for a denied action: login redirect or 403 page."""
    if decision is Decision.UNAUTHENTICATED:
        logger.info("Anonymous access to %s redirected to login", request.url.path)
        return redirect_to_route(request, "app_login", query={"next": request.url.path})

    app_user = getattr(request.state, "app_user", None)
    logger.warning(
        "Access denied to %s %s for user %s",
        request.method,
        request.url.path,
        app_user.id if app_user is not None else None,
    )
    return render(
        request,
        "error.html",
        {
            "status_code": 403,
            "message": "You do not have permission to access this page.",
        },
        status_code=403,
    )


__all__ = [
    "AppUser",
    "Decision",
    "IS_AUTHENTICATED",
    "ROLE_ADMIN",
    "ROLE_USER",
    "deny",
    "get_current_user",
    "hash_password",
    "is_granted",
    "login",
    "logout",
    "verify_password",
]
