"""
Forum — User Controller
========================

Routes under /user:

    GET      /user/                        user_index     any caller
    GET      /user/{id}                    user_show      ROLE_ADMIN
    GET,PUT  /user/{id}/edit               user_edit      ROLE_ADMIN
    GET,PUT  /user/{id}/change_password    password_edit  owner or ROLE_ADMIN

Known behaviors kept on purpose:
    - user_edit hashes the submitted password on every save, so the admin
      always sets a password when editing a profile.
    - password_edit redirects to the show page of the user who is logged in,
      not of the user whose password changed.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from forum.database import get_db_session
from forum.flash import add_flash
from forum.forms import Form
from forum.models.user import ROLE_ADMIN, User
from forum.pagination import parse_page
from forum.repositories import UserRepository
from forum.routing import redirect_to_route
from forum.schemas.forms import PasswordForm, UserForm
from forum.security import (
    IS_AUTHENTICATED,
    Decision,
    deny,
    get_current_user,
    hash_password,
    is_granted,
)
from forum.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["Users"])


@router.get("/", name="user_index", response_class=HTMLResponse)
async def index(
    request: Request,
    page: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user),
):
    pagination = await UserRepository(db).paginate(parse_page(page))
    return render(request, "user/index.html", {"pagination": pagination})


@router.get("/{user_id:posint}", name="user_show", response_class=HTMLResponse)
async def show(
    request: Request,
    user_id: int,
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user),
):
    decision = is_granted(user, ROLE_ADMIN)
    if not decision.allowed:
        return deny(request, decision)

    shown = await UserRepository(db).get_or_404(user_id)
    return render(request, "user/show.html", {"user": shown})


@router.api_route(
    "/{user_id:posint}/edit",
    methods=["GET", "PUT"],
    name="user_edit",
    response_class=HTMLResponse,
)
async def edit(
    request: Request,
    user_id: int,
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user),
):
    decision = is_granted(user, ROLE_ADMIN)
    if not decision.allowed:
        return deny(request, decision)

    users = UserRepository(db)
    edited = await users.get_or_404(user_id)

    form = Form(
        UserForm,
        method="PUT",
        initial={
            "email": edited.email,
            "nickname": edited.nickname,
            "is_admin": edited.is_admin,
        },
    )
    await form.handle_request(request)

    if form.is_submitted() and form.is_valid():
        owner = await users.find_one_by_email(form.data.email)
        if owner is not None and owner.id != edited.id:
            form.add_error("email", "This e-mail address is already registered.")

    if form.is_valid():
        edited.email = form.data.email
        edited.nickname = form.data.nickname
        # Re-hashed on every save, whether or not the admin meant to change it
        edited.password = hash_password(form.data.password)
        roles = [role for role in edited.roles if role != ROLE_ADMIN]
        if form.data.is_admin:
            roles.append(ROLE_ADMIN)
        edited.roles = roles
        await users.save(edited)
        logger.info("User %s updated by admin %s", edited.id, user.id)

        add_flash(request, "success", "user_updated_successfully")
        return redirect_to_route(request, "user_index")

    return render(request, "user/edit.html", {"form": form, "user": edited})


@router.api_route(
    "/{user_id:posint}/change_password",
    methods=["GET", "PUT"],
    name="password_edit",
    response_class=HTMLResponse,
)
async def editpass(
    request: Request,
    user_id: int,
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user),
):
    decision = is_granted(user, IS_AUTHENTICATED)
    if not decision.allowed:
        return deny(request, decision)
    # Members may only change their own password
    if user.id != user_id and not user.is_admin:
        return deny(request, Decision.FORBIDDEN)

    users = UserRepository(db)
    edited = await users.get_or_404(user_id)

    form = Form(PasswordForm, method="PUT")
    await form.handle_request(request)

    if form.is_submitted() and form.is_valid():
        edited.password = hash_password(form.data.password)
        await users.save(edited)
        logger.info("Password of user %s changed by user %s", edited.id, user.id)

        add_flash(request, "success", "message.updated_successfully")
        # Keyed off the logged-in user; only right for self-service changes
        return redirect_to_route(request, "user_show", user_id=user.id)

    return render(request, "user/edit_password.html", {"form": form, "user": edited})
