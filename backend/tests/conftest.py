"""
DevConnect Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, fresh per test):
    ├── mock_db_session: AsyncMock session for pure-unit tests
    ├── db_engine:       in-memory SQLite engine with the full schema
    ├── db_session:      AsyncSession bound to db_engine
    ├── make_account:    factory that signs up an account through AccountService
    ├── test_client:     HTTPX AsyncClient wired to the app and db_engine
    └── login_as:        factory that signs up and logs in over HTTP
"""

import os

# Settings are read at import time: configure before importing the app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-not-real"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"

import itertools
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db_session
from app.models.account import Account  # noqa: F401
from app.models.connection_request import ConnectionRequest  # noqa: F401
from app.services.account_service import account_service

STRONG_PASSWORD = "Str0ng!Pass"

_email_counter = itertools.count(1)


# ══════════════════════════════════════════════════════════════════════════
# Unit-test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Mock async database session for tests that never touch SQL.

    Usage:
        mock_db_session.get.return_value = None
        await service.get_by_id(mock_db_session, uuid4())
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite engine with all tables created.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def make_account(db_session):
    """
    Factory: sign up an account through AccountService and return it.

    Usage:
        alice = await make_account(first_name="Alice")
    """

    async def _make(**overrides):
        n = next(_email_counter)
        payload = {
            "first_name": f"User{n:04d}",
            "last_name": "Tester",
            "email": f"user{n}@example.com",
            "password": STRONG_PASSWORD,
        }
        payload.update(overrides)
        return await account_service.create(db_session, payload)

    return _make


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    get_db_session is overridden so each request gets its own session on the
    test engine, committed on success exactly like production.
    """
    from app.main import app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def _test_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _test_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def login_as(test_client):
    """
    Factory: create an account over HTTP, log in, and return its id plus
    headers carrying the bearer token taken from the login cookie.

    Usage:
        alice = await login_as("alice@example.com", "Alice")
        await test_client.get("/profile/view", headers=alice["headers"])
    """

    async def _login(email: str, first_name: str) -> dict:
        response = await test_client.post(
            "/signup",
            json={
                "first_name": first_name,
                "last_name": "Tester",
                "email": email,
                "password": STRONG_PASSWORD,
            },
        )
        assert response.status_code == 201, response.text
        account_id = response.json()["data"]["id"]

        response = await test_client.post(
            "/login", json={"email": email, "password": STRONG_PASSWORD}
        )
        assert response.status_code == 200, response.text
        token = response.headers["set-cookie"].split("token=", 1)[1].split(";", 1)[0]
        # Each caller authenticates by header; keep the shared jar empty
        test_client.cookies.clear()
        return {"id": account_id, "headers": {"Authorization": f"Bearer {token}"}}

    return _login
