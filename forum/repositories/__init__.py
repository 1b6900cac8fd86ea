"""
Forum — Repositories
=====================

One repository per entity. They load, page, save (insert-or-update) and
delete; they never commit. The request-scoped session dependency owns the
transaction.

Repository Inventory:
    - QuestionRepository: newest questions first
    - AnswerRepository:   newest answers first, best-answer bookkeeping
    - UserRepository:     users by e-mail, lookup by e-mail
    - CategoryRepository: categories by name, lookup by name
"""

from forum.repositories.answer import AnswerRepository
from forum.repositories.category import CategoryRepository
from forum.repositories.question import QuestionRepository
from forum.repositories.user import UserRepository

__all__ = [
    "AnswerRepository",
    "CategoryRepository",
    "QuestionRepository",
    "UserRepository",
]
