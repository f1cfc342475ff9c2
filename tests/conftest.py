# tests/conftest.py

import os

# Must be set before taskflow.core.config is imported.
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")

import httpx
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from taskflow.core.database import build_engine, get_db, init_db
from taskflow.main import app
from taskflow.models.user import User


@pytest_asyncio.fixture()
async def engine():
    """Fresh in-memory database per test, with the default admin and workers."""
    engine = build_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await init_db(engine, seed=True)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture()
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def admin(db) -> User:
    return await db.get(User, "admin1")


@pytest_asyncio.fixture()
async def worker1(db) -> User:
    return await db.get(User, "worker1")


@pytest_asyncio.fixture()
async def worker2(db) -> User:
    return await db.get(User, "worker2")


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client against the app, wired to the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
