"""
Forum — Question Controller
============================

Routes under /questions:

    GET       /questions/                    question_index   any caller
    GET,POST  /questions/{id}                question_show    any caller (inline answer)
    GET,POST  /questions/create              question_create  ROLE_ADMIN
    GET,PUT   /questions/{id}/edit           question_edit    ROLE_ADMIN
    GET,DELETE /questions/{id}/delete        question_delete  ROLE_ADMIN

Flow of a mutating action:
    1. Authorization decision (before anything else)
    2. Resolve the question (404 if missing)
    3. Bind + validate the form
    4. Valid: persist, flash, 303 redirect. Otherwise: render the form.
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
from forum.models.answer import Answer
from forum.models.question import Question
from forum.models.user import User
from forum.pagination import parse_page
from forum.repositories import AnswerRepository, CategoryRepository, QuestionRepository
from forum.routing import redirect_to_route
from forum.schemas.forms import DeleteForm, InlineAnswerForm, QuestionForm
from forum.security import ROLE_ADMIN, deny, get_current_user, is_granted
from forum.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/questions", tags=["Questions"])


async def _check_category(form: Form, categories: CategoryRepository) -> None:
    """A question's category must be one of the seeded categories."""
    if await categories.get(form.data.category_id) is None:
        form.add_error("category_id", "Choose one of the listed categories.")


@router.get("/", name="question_index", response_class=HTMLResponse)
async def index(
    request: Request,
    page: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user),
):
    pagination = await QuestionRepository(db).paginate(parse_page(page))
    return render(request, "question/index.html", {"pagination": pagination})


@router.api_route(
    "/create",
    methods=["GET", "POST"],
    name="question_create",
    response_class=HTMLResponse,
)
async def create(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user),
):
    decision = is_granted(user, ROLE_ADMIN)
    if not decision.allowed:
        return deny(request, decision)

    categories = CategoryRepository(db)
    form = Form(QuestionForm)
    await form.handle_request(request)

    if form.is_submitted() and form.is_valid():
        await _check_category(form, categories)

    if form.is_valid():
        question = Question(user=user)
        form.apply_to(question)
        await QuestionRepository(db).save(question)
        logger.info("Question %s created by user %s", question.id, user.id)

        add_flash(request, "success", "question_created_successfully")
        return redirect_to_route(request, "question_index")

    return render(
        request,
        "question/create.html",
        {"form": form, "categories": await categories.find_all()},
    )


@router.api_route(
    "/{question_id:posint}",
    methods=["GET", "POST"],
    name="question_show",
    response_class=HTMLResponse,
)
async def show(
    request: Request,
    question_id: int,
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user),
):
    """
    Show a question with its answers and an inline answer form.

    A valid inline answer is attached to this question and the browser is
    redirected back here, so a refresh does not post the answer twice.
    """
    question = await QuestionRepository(db).get_or_404(question_id)

    form = Form(InlineAnswerForm)
    await form.handle_request(request)

    if form.is_submitted() and form.is_valid():
        answer = Answer(author=user)
        form.apply_to(answer)
        question.add_answer(answer)
        await AnswerRepository(db).save(answer)
        logger.info("Answer %s posted on question %s", answer.id, question.id)

        add_flash(request, "success", "answer_created_successfully")
        return redirect_to_route(request, "question_show", question_id=question.id)

    return render(
        request,
        "question/show.html",
        {"question": question, "answers": question.answers, "form": form},
    )


@router.api_route(
    "/{question_id:posint}/edit",
    methods=["GET", "PUT"],
    name="question_edit",
    response_class=HTMLResponse,
)
async def edit(
    request: Request,
    question_id: int,
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user),
):
    decision = is_granted(user, ROLE_ADMIN)
    if not decision.allowed:
        return deny(request, decision)

    questions = QuestionRepository(db)
    categories = CategoryRepository(db)
    question = await questions.get_or_404(question_id)

    form = Form(
        QuestionForm,
        method="PUT",
        initial={
            "title": question.title,
            "content": question.content,
            "category_id": question.category_id,
        },
    )
    await form.handle_request(request)

    if form.is_submitted() and form.is_valid():
        await _check_category(form, categories)

    if form.is_valid():
        form.apply_to(question)
        await questions.save(question)
        logger.info("Question %s updated by user %s", question.id, user.id)

        add_flash(request, "success", "message_updated_successfully")
        return redirect_to_route(request, "question_index")

    return render(
        request,
        "question/edit.html",
        {
            "form": form,
            "question": question,
            "categories": await categories.find_all(),
        },
    )


@router.api_route(
    "/{question_id:posint}/delete",
    methods=["GET", "DELETE"],
    name="question_delete",
    response_class=HTMLResponse,
)
async def delete(
    request: Request,
    question_id: int,
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user),
):
    """
    Confirm (GET) or perform (DELETE) the deletion of a question.

    Answers are detached from the question and deleted one by one before the
    question itself is deleted. All of it runs in the request's transaction,
    so a failure part-way rolls every deletion back.
    """
    decision = is_granted(user, ROLE_ADMIN)
    if not decision.allowed:
        return deny(request, decision)

    questions = QuestionRepository(db)
    question = await questions.get_or_404(question_id)

    form = Form(DeleteForm, method="DELETE")
    await form.handle_request(request)

    # A bare DELETE carries no fields; submit whatever body it has
    if request.method == "DELETE" and not form.is_submitted():
        form.submit(await Form.read_payload(request))

    if form.is_submitted() and form.is_valid():
        answers = AnswerRepository(db)
        for answer in list(await questions.load_answers(question)):
            question.remove_answer(answer)
            await answers.delete(answer)
        await questions.delete(question)
        logger.info("Question %s and its answers deleted by user %s", question_id, user.id)

        add_flash(request, "success", "message.deleted_successfully")
        return redirect_to_route(request, "question_index")

    return render(
        request,
        "question/delete.html",
        {"form": form, "question": question},
    )
