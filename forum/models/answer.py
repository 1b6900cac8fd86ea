"""
Forum — Answer Model
=====================

What:  ORM model for the `answers` table.

Lifecycle:
    1. Created through /answer/create or inline from a question's show page
    2. Edited through the full answer form
    3. "Best" flag toggled through the restricted best form (is_best only)
    4. Deleted on its own, or as part of deleting its question

question_id is nullable: a question deletion detaches each answer from the
collection before deleting it.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Text, false, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import TIMESTAMP

from forum.database import Base

if TYPE_CHECKING:
    from forum.models.question import Question
    from forum.models.user import User


class Answer(Base):
    __tablename__ = "answers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    question_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("questions.id"),
        nullable=True,
    )

    is_best: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
        comment="Marked as the best answer to its question",
    )

    author_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id"),
        nullable=True,
        comment="Logged-in user who posted the answer; NULL for anonymous posts",
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    question: Mapped[Optional["Question"]] = relationship(
        back_populates="answers",
        lazy="selectin",
    )

    author: Mapped[Optional["User"]] = relationship(lazy="selectin")

    __table_args__ = (
        Index("idx_answers_question_id", "question_id"),
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<Answer(id={self.id}, question_id={self.question_id}, is_best={self.is_best})>"
