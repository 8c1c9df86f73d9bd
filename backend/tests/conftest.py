"""
Inkwell Backend: Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Each test gets its own SQLite file (via aiosqlite) with the full
       schema, two registered users, and an app wired to that database.

Fixture Hierarchy (all function-scoped):
    test_settings
    └── database            Database on tmp_path/inkwell_test.db, tables created
        ├── db_session      One unit-of-work session for service-level tests
        ├── users           alice and bob, committed
        │   ├── claims      Claim objects for service calls
        │   └── auth_headers  {"Authorization": "Bearer <token>"} per user
        └── test_client     HTTPX AsyncClient talking to create_app(test_settings)
    mock_db_session         AsyncMock session for store-failure paths
"""

import os

# Set before any inkwell import so the module-level Settings never sees a
# developer's real DATABASE_URL or secret.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./inkwell_unused.db"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from inkwell.config import Settings
from inkwell.database import Database
from inkwell.main import create_app
from inkwell.models.user import User
from inkwell.security import Claim, create_access_token

TEST_SECRET = "test-secret-not-for-production"


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'inkwell_test.db'}",
        jwt_secret=TEST_SECRET,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database(test_settings):
    """A fresh database with every table created; disposed after the test."""
    db = Database.from_settings(test_settings)
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    """
    One session for service-level tests.

    Commits when the test finishes, like a request would.
    """
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def users(database):
    """
    Two committed accounts.

    The password hash is a placeholder; login is exercised separately
    through /auth/register.
    """
    alice = User(username="alice", email="alice@inkwell.dev", password_hash="not-a-real-hash")
    bob = User(username="bob", email="bob@inkwell.dev", password_hash="not-a-real-hash")
    async with database.session() as session:
        session.add_all([alice, bob])
    return {"alice": alice, "bob": bob}


@pytest.fixture
def claims(users):
    return {name: Claim(user_id=user.id) for name, user in users.items()}


@pytest.fixture
def auth_headers(users):
    return {
        name: {"Authorization": f"Bearer {create_access_token(user.id, secret=TEST_SECRET)}"}
        for name, user in users.items()
    }


@pytest_asyncio.fixture
async def test_client(test_settings, database):
    """
    HTTPX AsyncClient routed straight into the app via ASGITransport.

    ASGITransport does not run the lifespan, so the test database is
    attached to app.state by hand.
    """
    app = create_app(test_settings)
    app.state.database = database
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.execute.side_effect = RuntimeError("connection reset")
        with pytest.raises(DatabaseError):
            await post_service.list_posts(mock_db_session)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.get = AsyncMock()
    session.add = MagicMock()
    return session
