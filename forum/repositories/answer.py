"""Answer repository: newest first, plus best-answer bookkeeping."""

import logging
from typing import List

from sqlalchemy import select

from forum.config import settings
from forum.models.answer import Answer
from forum.repositories.base import Repository

logger = logging.getLogger(__name__)


class AnswerRepository(Repository[Answer]):
    model = Answer
    resource = "answer"
    PAGINATOR_ITEMS_PER_PAGE = settings.answers_per_page

    def default_order(self):
        return (Answer.created_at.desc(), Answer.id.desc())

    async def find_best_siblings(self, answer: Answer) -> List[Answer]:
        """Other answers of the same question that are marked best."""
        if answer.question_id is None:
            return []
        result = await self.session.execute(
            select(Answer).where(
                Answer.question_id == answer.question_id,
                Answer.id != answer.id,
                Answer.is_best.is_(True),
            )
        )
        return list(result.scalars().all())

    async def clear_other_best(self, answer: Answer) -> int:
        """
        Un-mark every sibling of `answer` that is marked best.

        Siblings are queried by question id rather than walked through
        answer.question.answers: that collection is not loaded when the
        answer was fetched on its own. Only the is_best flag of the siblings
        changes, through the ORM, so their version columns are checked and
        bumped.

        Returns:
            Number of siblings that were un-marked.
        """
        siblings = await self.find_best_siblings(answer)
        for sibling in siblings:
            sibling.is_best = False
        if siblings:
            logger.info(
                "Cleared best flag on %d sibling(s) of answer %s", len(siblings), answer.id
            )
            await self._flush()
        return len(siblings)
