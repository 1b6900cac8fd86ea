"""
Forum — Answer Controller
==========================

Routes under /answer:

    GET        /answer/                answer_index
    GET        /answer/{id}            answer_show
    GET,POST   /answer/create          answer_create
    GET,PUT    /answer/{id}/edit       answer_edit    → back to the question list
    GET,DELETE /answer/{id}/delete     answer_delete  → back to the question list
    GET,PUT    /answer/{id}/best       answer_best    → back to the question list

The best action binds AnswerBestForm, whose only field is `is_best`; the
content, question and author of the answer cannot change through it.
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
from forum.repositories import AnswerRepository, QuestionRepository
from forum.routing import redirect_to_route
from forum.schemas.forms import AnswerBestForm, AnswerForm, DeleteForm
from forum.security import get_current_user
from forum.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/answer", tags=["Answers"])


async def _resolve_question(form: Form, questions: QuestionRepository) -> Optional[Question]:
    question = await questions.get(form.data.question_id)
    if question is None:
        form.add_error("question_id", "Choose one of the listed questions.")
    return question


@router.get("/", name="answer_index", response_class=HTMLResponse)
async def index(
    request: Request,
    page: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user),
):
    pagination = await AnswerRepository(db).paginate(parse_page(page))
    return render(request, "answer/index.html", {"pagination": pagination})


@router.get("/{answer_id:posint}", name="answer_show", response_class=HTMLResponse)
async def show(
    request: Request,
    answer_id: int,
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user),
):
    answer = await AnswerRepository(db).get_or_404(answer_id)
    return render(request, "answer/show.html", {"answer": answer})


@router.api_route(
    "/create",
    methods=["GET", "POST"],
    name="answer_create",
    response_class=HTMLResponse,
)
async def create(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user),
):
    questions = QuestionRepository(db)
    form = Form(AnswerForm)
    await form.handle_request(request)

    question = None
    if form.is_submitted() and form.is_valid():
        question = await _resolve_question(form, questions)

    if form.is_valid():
        answer = Answer(author=user)
        form.apply_to(answer, exclude={"question_id"})
        answer.question = question
        await AnswerRepository(db).save(answer)
        logger.info("Answer %s created on question %s", answer.id, question.id)

        add_flash(request, "success", "answer_created_successfully")
        return redirect_to_route(request, "answer_index")

    return render(
        request,
        "answer/create.html",
        {"form": form, "questions": await questions.find_all()},
    )


@router.api_route(
    "/{answer_id:posint}/edit",
    methods=["GET", "PUT"],
    name="answer_edit",
    response_class=HTMLResponse,
)
async def edit(
    request: Request,
    answer_id: int,
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user),
):
    answers = AnswerRepository(db)
    questions = QuestionRepository(db)
    answer = await answers.get_or_404(answer_id)

    form = Form(
        AnswerForm,
        method="PUT",
        initial={"content": answer.content, "question_id": answer.question_id},
    )
    await form.handle_request(request)

    question = None
    if form.is_submitted() and form.is_valid():
        question = await _resolve_question(form, questions)

    if form.is_valid():
        form.apply_to(answer, exclude={"question_id"})
        if answer.question is not question:
            # Moving an answer drops its best flag: it was best for the old question
            answer.is_best = False
            answer.question = question
        await answers.save(answer)
        logger.info("Answer %s updated", answer.id)

        add_flash(request, "success", "answer_updated_successfully")
        return redirect_to_route(request, "question_index")

    return render(
        request,
        "answer/edit.html",
        {"form": form, "answer": answer, "questions": await questions.find_all()},
    )


@router.api_route(
    "/{answer_id:posint}/delete",
    methods=["GET", "DELETE"],
    name="answer_delete",
    response_class=HTMLResponse,
)
async def delete(
    request: Request,
    answer_id: int,
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user),
):
    answers = AnswerRepository(db)
    answer = await answers.get_or_404(answer_id)

    form = Form(DeleteForm, method="DELETE")
    await form.handle_request(request)

    if request.method == "DELETE" and not form.is_submitted():
        form.submit(await Form.read_payload(request))

    if form.is_submitted() and form.is_valid():
        question = answer.question
        if question is not None:
            await QuestionRepository(db).load_answers(question)
            question.remove_answer(answer)
        await answers.delete(answer)
        logger.info("Answer %s deleted", answer_id)

        add_flash(request, "success", "answer.deleted_successfully")
        return redirect_to_route(request, "question_index")

    return render(request, "answer/delete.html", {"form": form, "answer": answer})


@router.api_route(
    "/{answer_id:posint}/best",
    methods=["GET", "PUT"],
    name="answer_best",
    response_class=HTMLResponse,
)
async def best(
    request: Request,
    answer_id: int,
    db: AsyncSession = Depends(get_db_session),
    user: Optional[User] = Depends(get_current_user),
):
    """
    Mark or un-mark an answer as the best one for its question.

    Marking an answer un-marks any sibling, so a question never resolves to
    two best answers.
    """
    answers = AnswerRepository(db)
    answer = await answers.get_or_404(answer_id)

    form = Form(AnswerBestForm, method="PUT", initial={"is_best": answer.is_best})
    await form.handle_request(request)

    if form.is_submitted() and form.is_valid():
        form.apply_to(answer)
        if answer.is_best:
            await answers.clear_other_best(answer)
        await answers.save(answer)
        logger.info("Answer %s best flag set to %s", answer.id, answer.is_best)

        add_flash(request, "success", "message_updated_successfully")
        return redirect_to_route(request, "question_index")

    return render(request, "answer/best.html", {"form": form, "answer": answer})
