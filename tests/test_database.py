# tests/test_database.py

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from taskflow.core.database import build_engine, init_db, seed_default_users
from taskflow.models.user import User


@pytest.mark.asyncio
async def test_seeding_is_idempotent(db) -> None:
    assert await seed_default_users(db) == 0

    result = await db.execute(select(User.id).order_by(User.id))
    assert list(result.scalars().all()) == ["admin1", "worker1", "worker2"]


@pytest.mark.asyncio
async def test_seeding_skips_taken_email() -> None:
    engine = build_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    try:
        await init_db(engine, seed=False)
        factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        async with factory() as db:
            db.add(User(
                id="user_existing",
                email="admin@example.com",
                hashed_password="x",
                name="Registered Admin",
                role="admin",
            ))
            await db.commit()

            assert await seed_default_users(db) == 2

            owner = await db.execute(select(User.id).where(User.email == "admin@example.com"))
            assert owner.scalar_one() == "user_existing"
            assert await db.get(User, "admin1") is None
    finally:
        await engine.dispose()
