"""
Mood Journal — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Overview:
    ├── mock_db_session:   AsyncMock session for service unit tests
    ├── sample_entry_data: field values for a stored entry
    ├── session_provider:  JWTSessionProvider with the test secret
    ├── auth_headers:      builds `Authorization: Bearer` headers per user
    ├── db_engine:         fresh in-memory SQLite database per test
    ├── app:               FastAPI app wired to db_engine and session_provider
    └── test_client:       HTTPX AsyncClient talking to `app` over ASGI
"""

import os

# Must run before any moodjournal import so Settings picks these up.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["AUTH_SECRET"] = "test-secret-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timezone  # noqa: E402
from typing import AsyncGenerator, Callable, Dict  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from moodjournal.auth.session import JWTSessionProvider  # noqa: E402
from moodjournal.database import Base, get_db_session  # noqa: E402
from moodjournal.main import create_app  # noqa: E402
from moodjournal.models.entry import JournalEntry  # noqa: E402,F401

TEST_SECRET = os.environ["AUTH_SECRET"]


# ══════════════════════════════════════════════════════════════════════════
# Unit-test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_entry(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = entry
            result = await entry_service.get_entry(mock_db_session, "user-1", entry_id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_entry_data():
    now = datetime(2026, 1, 20, 8, 41, 21, tzinfo=timezone.utc)
    return {
        "id": uuid4(),
        "user_id": "user-1",
        "title": "Day 1",
        "content": "Good day",
        "mood": "happy",
        "type": "note",
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def session_provider() -> JWTSessionProvider:
    return JWTSessionProvider(secret=TEST_SECRET)


@pytest.fixture
def auth_headers(session_provider) -> Callable[[str], Dict[str, str]]:
    """Returns a function building bearer headers for a given user id."""

    def build(user_id: str = "user-1") -> Dict[str, str]:
        token = session_provider.issue_token(user_id)
        return {"Authorization": f"Bearer {token}"}

    return build


# ══════════════════════════════════════════════════════════════════════════
# Integration Fixtures (real SQLite database, real FastAPI app)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite shared across connections via StaticPool."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def app(db_engine, session_provider):
    """
    FastAPI app whose session dependency uses the test database.

    The override commits and rolls back exactly like get_db_session.
    """
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application = create_app(session_provider=session_provider)
    application.dependency_overrides[get_db_session] = override_get_db_session
    return application


@pytest_asyncio.fixture
async def test_client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    Usage:
        async def test_list(test_client, auth_headers):
            response = await test_client.get("/api/journal/entries", headers=auth_headers())
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
