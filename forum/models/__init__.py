"""
Forum — ORM Models
===================

Importing this package registers every table with `Base.metadata`
(Alembic --autogenerate and `create_all()` rely on that).
"""

from forum.models.user import User, ROLE_ADMIN, ROLE_USER
from forum.models.category import Category
from forum.models.question import Question
from forum.models.answer import Answer

__all__ = ["User", "Category", "Question", "Answer", "ROLE_ADMIN", "ROLE_USER"]
