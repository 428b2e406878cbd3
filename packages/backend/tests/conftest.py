"""Test fixtures — a fresh in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI without a server DB:

1. Each test gets its own aiosqlite engine on `sqlite+aiosqlite://`.
   StaticPool keeps a single connection, so the in-memory database lives
   as long as the engine does.
2. Tables are created from the ORM metadata, then the app's get_db is
   overridden to hand out sessions bound to that engine.
3. After the test the engine is disposed and the database vanishes.

Env vars are set before realfolio is imported: the settings singleton and
the module-level engine read them at import time.
"""

import os

os.environ.setdefault("REALFOLIO_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("REALFOLIO_JWT_SECRET", "test-secret")
os.environ.setdefault("REALFOLIO_BCRYPT_ROUNDS", "4")

import uuid

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from realfolio.auth.dependencies import get_token_service
from realfolio.auth.policy import ADMIN, AGENT
from realfolio.db.engine import create_tables, get_db
from realfolio.main import app
from realfolio.services.auth_service import AuthService


@pytest_asyncio.fixture()
async def session_factory():
    """Per-test engine with freshly created tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)
    try:
        yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    finally:
        await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client with the app's get_db bound to the per-test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ─── Users ─────────────────────────────────────────────────


async def make_user(db_session, role: str = AGENT, name: str = "Agent") -> dict:
    """Create a user directly and return its id, email, password and auth header."""
    svc = AuthService(db_session, get_token_service())
    email = f"{role}-{uuid.uuid4().hex[:8]}@example.com"
    password = "password123"
    user = await svc.create_user(name=name, email=email, password=password, role=role)
    token = get_token_service().issue(str(user.id))
    return {
        "id": str(user.id),
        "email": email,
        "password": password,
        "token": token,
        "headers": {"Authorization": f"Bearer {token}"},
    }


@pytest_asyncio.fixture()
async def agent(db_session):
    return await make_user(db_session, AGENT, name="Agent One")


@pytest_asyncio.fixture()
async def other_agent(db_session):
    return await make_user(db_session, AGENT, name="Agent Two")


@pytest_asyncio.fixture()
async def admin(db_session):
    return await make_user(db_session, ADMIN, name="Admin")
