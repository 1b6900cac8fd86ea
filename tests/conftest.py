"""
Forum — Test Configuration (conftest.py)
=========================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own in-memory SQLite database (aiosqlite +
       StaticPool, so all sessions share the one connection). The app's
       get_db_session dependency is overridden to use it.

Fixture Hierarchy:
    db_engine → session_factory → db_session       (repository/unit tests)
                                → seeded            (categories, admin, member)
                                → client            (anonymous HTTP client)
                                   ├── admin_client (logged in as the admin)
                                   └── member_client (logged in, ROLE_USER only)
    make_question / fetch / count: helpers that open their own short sessions
"""

import os

# Must be set before forum.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import AsyncGenerator, Iterable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from forum.database import create_all, get_db_session
from forum.fixtures import load_admin, load_categories
from forum.main import app
from forum.models import Answer, Question, User
from forum.repositories import CategoryRepository
from forum.security import hash_password

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin1234"
MEMBER_EMAIL = "member@example.com"
MEMBER_PASSWORD = "member1234"


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(bind=engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(session_factory):
    """Categories, the admin account and one ordinary member."""
    async with session_factory() as session:
        await load_categories(session)
        await load_admin(session, ADMIN_EMAIL, ADMIN_PASSWORD)
        member = User(
            email=MEMBER_EMAIL,
            nickname="member",
            password=hash_password(MEMBER_PASSWORD),
        )
        member.roles = []
        session.add(member)
        await session.commit()


@pytest_asyncio.fixture
async def category_id(session_factory, seeded) -> int:
    async with session_factory() as session:
        category = await CategoryRepository(session).find_one_by_name("General")
        return category.id


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    Anonymous HTTP client talking to the app in-process.

    Redirects are NOT followed, so tests can assert the 303 and its Location.
    """

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


async def _login(client: AsyncClient, email: str, password: str) -> AsyncClient:
    response = await client.post("/login", data={"email": email, "password": password})
    assert response.status_code == 303, response.text
    return client


@pytest_asyncio.fixture
async def admin_client(client, seeded) -> AsyncClient:
    return await _login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest_asyncio.fixture
async def member_client(client, seeded) -> AsyncClient:
    return await _login(client, MEMBER_EMAIL, MEMBER_PASSWORD)


@pytest.fixture
def make_question(session_factory, category_id):
    """
    Insert a question (and optionally answers) directly.

    Returns (question_id, [answer ids in insertion order]).
    """

    async def _make(title: str = "How do I parse JSON?", answers: Iterable[str] = ()):
        async with session_factory() as session:
            question = Question(title=title, content="Details here.", category_id=category_id)
            created = [Answer(content=content) for content in answers]
            for answer in created:
                question.add_answer(answer)
            session.add(question)
            await session.commit()
            return question.id, [answer.id for answer in created]

    return _make


@pytest.fixture
def fetch(session_factory):
    """Load one entity in a fresh session (relationships come preloaded)."""

    async def _fetch(model, entity_id):
        async with session_factory() as session:
            return await session.get(model, entity_id)

    return _fetch


@pytest.fixture
def count(session_factory):
    async def _count(model) -> int:
        async with session_factory() as session:
            return (await session.execute(select(func.count()).select_from(model))).scalar()

    return _count


