"""
Forum — User Model
===================

What:  ORM model for the `users` table.
Who:   Loaded by the security layer on every request (session user id) and
       managed by the user controller.

Lifecycle:
    1. Created through registration (or the fixtures loader for the admin)
    2. Edited by an admin (profile + roles) or by the user (password)
    3. Never hard-deleted
"""

from datetime import datetime, timezone
from typing import List

from sqlalchemy import JSON, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TIMESTAMP

from forum.database import Base

ROLE_USER = "ROLE_USER"
ROLE_ADMIN = "ROLE_ADMIN"


class User(Base):
    """A forum member. `password` always holds a hash, never plaintext."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    email: Mapped[str] = mapped_column(
        String(180),
        nullable=False,
        unique=True,
        comment="Login e-mail address",
    )

    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Password hash (bcrypt)",
    )

    nickname: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        default="",
        server_default=text("''"),
        comment="Display name shown next to questions and answers",
    )

    # Stored roles; ROLE_USER is implied for everybody and not stored
    stored_roles: Mapped[List[str]] = mapped_column(
        "roles",
        JSON,
        nullable=False,
        default=list,
        comment="Granted role names, e.g. [\"ROLE_ADMIN\"]",
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # Optimistic lock: bumped on every UPDATE, checked in the WHERE clause
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    @property
    def roles(self) -> List[str]:
        """Granted roles, always including ROLE_USER."""
        roles = list(self.stored_roles or [])
        if ROLE_USER not in roles:
            roles.append(ROLE_USER)
        return roles

    @roles.setter
    def roles(self, value: List[str]) -> None:
        self.stored_roles = sorted({role for role in value if role != ROLE_USER})

    def has_role(self, role: str) -> bool:
        return role in self.roles

    @property
    def is_admin(self) -> bool:
        return self.has_role(ROLE_ADMIN)

    @property
    def display_name(self) -> str:
        return self.nickname or self.email

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
