"""
SubsAPI: Test Configuration (conftest.py)
===========================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for failure paths (no DB)
    ├── database:        Database handle on an in-memory SQLite (aiosqlite),
    │                    schema created from Base.metadata
    ├── db_session:      AsyncSession on that database (service tests)
    ├── test_client:     HTTPX AsyncClient wired to create_app(database)
    └── user_id:         Fresh UUID
"""

import os
import uuid
from unittest.mock import AsyncMock, MagicMock

# Must be set before subsapi.config is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.pool import StaticPool

from subsapi.database import Base, Database
from subsapi.main import create_app
from subsapi.models.subscription import Subscription  # noqa: F401  (registers the table)


@pytest.fixture
def mock_db_session():
    """
    A mock async database session.

    Usage:
        mock_db_session.execute.side_effect = RuntimeError("connection lost")
        with pytest.raises(DatabaseError):
            await service.get_subscription(mock_db_session, 1)
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


@pytest_asyncio.fixture
async def database():
    """
    In-memory SQLite database with the full schema.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    db = Database(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(database):
    """
    Async HTTP client talking to a fresh app bound to the test database.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    app = create_app(database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def user_id():
    return uuid.uuid4()
