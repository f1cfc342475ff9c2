import logging
from datetime import datetime, timezone

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from .config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def utcnow() -> datetime:
    # Naive UTC: SQLite drops tzinfo on the way back, so every stored timestamp is naive.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def build_engine(url: str, **kwargs) -> AsyncEngine:
    connect_args = kwargs.pop("connect_args", {})
    if url.startswith("postgresql+asyncpg"):
        connect_args.setdefault("server_settings", {"application_name": "taskflow"})
    return create_async_engine(url, echo=settings.DATABASE_ECHO, connect_args=connect_args, **kwargs)


engine = build_engine(settings.DATABASE_URL)

AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

async def get_db():
    async with AsyncSessionLocal() as session:
        yield session


DEFAULT_USERS = [
    ("admin1", "admin@example.com", "admin123", "Admin User", "admin"),
    ("worker1", "worker@example.com", "worker123", "Worker One", "worker"),
    ("worker2", "worker2@example.com", "worker123", "Worker Two", "worker"),
]


async def seed_default_users(session: AsyncSession) -> int:
    """Insert the default admin and workers unless their id or email is already taken."""
    from taskflow.core.security import get_password_hash
    from taskflow.models.user import User

    created = 0
    for user_id, email, password, name, role in DEFAULT_USERS:
        existing = await session.execute(
            select(User.id).where(or_(User.id == user_id, User.email == email))
        )
        if existing.first() is not None:
            continue
        session.add(User(
            id=user_id,
            email=email,
            hashed_password=get_password_hash(password),
            name=name,
            role=role,
        ))
        created += 1
    await session.commit()
    return created


async def init_db(bind: AsyncEngine = None, seed: bool = None):
    """Create the schema and, if enabled, the seed users."""
    # Register every model on Base.metadata before create_all.
    from taskflow.models import task, task_error, user  # noqa: F401

    bind = bind or engine
    seed = settings.SEED_DEFAULT_USERS if seed is None else seed

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if seed:
        session_factory = async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)
        async with session_factory() as session:
            created = await seed_default_users(session)
        logger.info("Seeded %d default user(s)", created)
    logger.info("Database initialized url=%s", bind.url.render_as_string(hide_password=True))


async def close_db(bind: AsyncEngine = None):
    await (bind or engine).dispose()
    logger.info("Database connection closed")
