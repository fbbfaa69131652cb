"""Service and route test fixtures — async DB, fake mailer, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB sessions (one per request)
    - Mail is captured by RecordingMailer; opaque tokens by TokenRecorder
    - Session tokens signed with a fixed test secret

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - Users seeded straight through the repository: tests that are not about
      registration skip the email round-trip
"""

from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

import cashtrackr.models  # noqa: F401
from cashtrackr.api import dependencies
from cashtrackr.db.base import Base
from cashtrackr.infrastructure.credentials import SessionTokens, hash_password
from cashtrackr.infrastructure.database import get_db
from cashtrackr.infrastructure.repositories import (
    SqlBudgetRepository, SqlExpenseRepository, SqlUserRepository,
)
from cashtrackr.main import app
from tests.fakes import TEST_PASSWORD, RecordingMailer, TokenRecorder


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def tokens():
    return TokenRecorder()


@pytest.fixture
def session_tokens():
    return SessionTokens("test-secret", ttl_days=30)


@pytest.fixture
async def client(test_session_factory, mailer, tokens, session_tokens):
    """FastAPI test client with DB, mail and token collaborators overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[dependencies.get_mailer] = lambda: mailer
    app.dependency_overrides[dependencies.get_token_observer] = lambda: tokens
    app.dependency_overrides[dependencies.get_session_tokens] = lambda: session_tokens

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(test_db):
    """Insert a user directly; confirmed by default."""
    async def _make(
        email: str = "test@test.com",
        name: str = "Juan",
        password: str = TEST_PASSWORD,
        confirmed: bool = True,
        token: str | None = None,
    ):
        return await SqlUserRepository(test_db).create({
            "name": name,
            "email": email,
            "password": hash_password(password),
            "confirmed": confirmed,
            "token": token,
        })
    return _make


@pytest.fixture
async def user(make_user):
    return await make_user()


@pytest.fixture
def auth_headers(session_tokens):
    def _headers(user) -> dict:
        return {"Authorization": f"Bearer {session_tokens.issue(user.id)}"}
    return _headers


@pytest.fixture
def make_budget(test_db):
    async def _make(owner, name: str = "Vacaciones", amount: str = "1000"):
        return await SqlBudgetRepository(test_db).create(
            {"name": name, "amount": Decimal(amount), "user_id": owner.id},
        )
    return _make


@pytest.fixture
def make_expense(test_db):
    async def _make(budget, name: str = "Comida", amount: str = "250"):
        return await SqlExpenseRepository(test_db).create(
            {"name": name, "amount": Decimal(amount), "budget_id": budget.id},
        )
    return _make


@pytest.fixture
async def fresh_repos(test_session_factory):
    """Repositories on a brand-new session — reads bypass any cached identity map."""
    sessions = []

    def _repos():
        session = test_session_factory()
        sessions.append(session)
        return (
            SqlUserRepository(session),
            SqlBudgetRepository(session),
            SqlExpenseRepository(session),
        )
    yield _repos
    for session in sessions:
        await session.close()
