import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.core.errors import DuplicateEmailError, StoreError
from taskflow.models.user import User
from taskflow.stores import session

logger = logging.getLogger(__name__)


async def find_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(db, select(User).where(User.email == email), "find user by email", logger)
    return result.scalar_one_or_none()


async def find_by_id(db: AsyncSession, user_id: str) -> Optional[User]:
    return await session.get(db, User, user_id, "find user by id", logger)


async def insert_user(db: AsyncSession, *, email: str, hashed_password: str, name: str, role: str) -> User:
    if await find_by_email(db, email) is not None:
        raise DuplicateEmailError()

    user = User(
        id=f"user_{uuid.uuid4().hex}",
        email=email,
        hashed_password=hashed_password,
        name=name,
        role=role,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        # Lost a race against another registration with the same email.
        await db.rollback()
        raise DuplicateEmailError() from e
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Failed to insert user email=%s", email)
        raise StoreError(str(e)) from e
    await session.refresh(db, user, "reload user", logger)
    return user


async def list_users(db: AsyncSession, role: Optional[str] = None) -> List[User]:
    query = select(User)
    if role is not None:
        query = query.where(User.role == role)
    result = await session.execute(db, query.order_by(User.created_at), "list users", logger)
    return list(result.scalars().all())
