"""Question repository: newest first, page size from settings."""

from typing import List

from forum.config import settings
from forum.models.answer import Answer
from forum.models.question import Question
from forum.repositories.base import Repository


class QuestionRepository(Repository[Question]):
    model = Question
    resource = "question"
    PAGINATOR_ITEMS_PER_PAGE = settings.questions_per_page

    def default_order(self):
        return (Question.created_at.desc(), Question.id.desc())

    async def load_answers(self, question: Question) -> List[Answer]:
        """
        Load question.answers from the database.

        A question reached through Answer.question does not have its answers
        loaded, and touching the collection would lazy-load outside the event
        loop's control.
        """
        await self.session.refresh(question, attribute_names=["answers"])
        return question.answers
