"""
Forum — Question Model
=======================

What:  ORM model for the `questions` table.

Lifecycle:
    1. Created by an admin (owner = the acting user)
    2. Edited by an admin
    3. Deleted by an admin: every answer is detached and deleted first, then
       the question itself (no database-level cascade)

Relationships are loaded with `selectin` so that templates can walk
question.answers / question.user / question.category inside an async session
without triggering lazy IO.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import TIMESTAMP

from forum.database import Base

if TYPE_CHECKING:
    from forum.models.answer import Answer
    from forum.models.category import Category
    from forum.models.user import User


class Question(Base):
    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id"),
        nullable=True,
        comment="Owner; the admin who created the question",
    )

    category_id: Mapped[int] = mapped_column(
        ForeignKey("categories.id"),
        nullable=False,
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    user: Mapped[Optional["User"]] = relationship(lazy="selectin")

    category: Mapped["Category"] = relationship(lazy="selectin")

    # No delete cascade on purpose: deleting a question detaches and deletes
    # each answer explicitly (see routes/questions.py)
    answers: Mapped[List["Answer"]] = relationship(
        back_populates="question",
        lazy="selectin",
        order_by="Answer.id",
    )

    __table_args__ = (
        Index("idx_questions_created_at", created_at.desc()),
    )

    __mapper_args__ = {"version_id_col": version}

    def add_answer(self, answer: "Answer") -> None:
        if answer not in self.answers:
            self.answers.append(answer)

    def remove_answer(self, answer: "Answer") -> None:
        if answer in self.answers:
            self.answers.remove(answer)

    @property
    def best_answer(self) -> Optional["Answer"]:
        """The answer marked best, if any; always one of this question's answers."""
        return next((answer for answer in self.answers if answer.is_best), None)

    def __repr__(self) -> str:
        return f"<Question(id={self.id}, title='{self.title}')>"
