"""Forum — Home page."""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from forum.database import get_db_session
from forum.models.user import User
from forum.repositories import QuestionRepository
from forum.security import get_current_user
from forum.templating import render

router = APIRouter(tags=["Home"])

LATEST_QUESTIONS = 5


@router.get("/", name="home_index", response_class=HTMLResponse)
async def index(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user),
):
    latest = await QuestionRepository(db).paginate(1)
    return render(
        request,
        "home/index.html",
        {"latest_questions": latest.items[:LATEST_QUESTIONS]},
    )
