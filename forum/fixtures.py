"""
Forum — Seed Data
==================

What:  Creates the tables (development convenience) and seeds the category
       list and one admin account.
How:   `python -m forum.fixtures`. Existing rows are left alone, so running
       it twice changes nothing.

Production databases are created with Alembic (`alembic upgrade head`);
the seeding part is still useful there.
"""

import asyncio
import logging
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from forum.config import settings
from forum.database import async_session_factory, create_all, dispose_engine
from forum.models import ROLE_ADMIN, Category, User
from forum.repositories import CategoryRepository, UserRepository
from forum.security import hash_password

logger = logging.getLogger(__name__)

CATEGORIES: Sequence[str] = ("General", "Programming", "Science", "Other")


async def load_categories(session: AsyncSession, names: Sequence[str] = CATEGORIES) -> int:
    """Insert missing categories; returns how many were created."""
    categories = CategoryRepository(session)
    created = 0
    for name in names:
        if await categories.find_one_by_name(name) is None:
            await categories.save(Category(name=name))
            created += 1
    return created


async def load_admin(session: AsyncSession, email: str, password: str) -> bool:
    """Create the admin account unless the e-mail is taken; True if created."""
    users = UserRepository(session)
    if await users.find_one_by_email(email) is not None:
        return False
    admin = User(email=email.lower(), nickname="admin", password=hash_password(password))
    admin.roles = [ROLE_ADMIN]
    await users.save(admin)
    return True


async def load_fixtures() -> None:
    await create_all()
    async with async_session_factory() as session:
        created = await load_categories(session)
        admin_created = await load_admin(
            session, settings.seed_admin_email, settings.seed_admin_password
        )
        await session.commit()
    logger.info("Fixtures loaded: %d categories created, admin created: %s", created, admin_created)


def main() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    async def run() -> None:
        try:
            await load_fixtures()
        finally:
            await dispose_engine()

    asyncio.run(run())


if __name__ == "__main__":
    main()
