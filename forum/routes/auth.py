"""
Forum — Login, Logout and Registration
=======================================

Session-cookie authentication for the HTML forum. A successful login stores
the user id in the signed session; every action then loads the user through
security.get_current_user.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request
from starlette.responses import RedirectResponse

from forum.database import get_db_session
from forum.flash import add_flash
from forum.forms import FORM_ERRORS, Form
from forum.models.user import User
from forum.repositories import UserRepository
from forum.routing import redirect_to_route
from forum.schemas.forms import LoginForm, RegistrationForm
from forum.security import get_current_user, hash_password, login, logout, verify_password
from forum.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


def _safe_next(target: Optional[str]) -> Optional[str]:
    """Only same-site absolute paths are followed after login."""
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return None


@router.api_route(
    "/login",
    methods=["GET", "POST"],
    name="app_login",
    response_class=HTMLResponse,
)
async def login_view(
    request: Request,
    next_url: Optional[str] = Query(default=None, alias="next"),
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user),
):
    form = Form(LoginForm)
    await form.handle_request(request)

    if form.is_submitted() and form.is_valid():
        account = await UserRepository(db).find_one_by_email(form.data.email)
        if account is not None and verify_password(form.data.password, account.password):
            login(request, account)
            target = _safe_next(next_url)
            if target:
                return RedirectResponse(url=target, status_code=303)
            return redirect_to_route(request, "home_index")
        logger.info("Failed login for %s", form.data.email)
        form.add_error(FORM_ERRORS, "Invalid credentials.")

    return render(
        request,
        "security/login.html",
        {"form": form, "next": _safe_next(next_url)},
    )


@router.get("/logout", name="app_logout")
async def logout_view(request: Request):
    logout(request)
    add_flash(request, "success", "logged_out_successfully")
    return redirect_to_route(request, "home_index")


@router.api_route(
    "/register",
    methods=["GET", "POST"],
    name="app_register",
    response_class=HTMLResponse,
)
async def register(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user),
):
    users = UserRepository(db)
    form = Form(RegistrationForm)
    await form.handle_request(request)

    if form.is_submitted() and form.is_valid():
        if await users.find_one_by_email(form.data.email) is not None:
            form.add_error("email", "This e-mail address is already registered.")

    if form.is_valid():
        account = User(
            email=form.data.email,
            nickname=form.data.nickname or form.data.email.split("@")[0],
            password=hash_password(form.data.password),
        )
        account.roles = []
        await users.save(account)
        logger.info("Registered user %s", account.id)

        login(request, account)
        add_flash(request, "success", "user_registered_successfully")
        return redirect_to_route(request, "home_index")

    return render(request, "security/register.html", {"form": form})
