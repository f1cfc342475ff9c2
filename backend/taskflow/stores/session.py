"""
Session calls shared by the stores.

Any SQLAlchemy failure is rolled back, logged against the calling store and
re-raised as StoreError, so callers only ever see the taskflow error types.
"""
import logging
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.core.errors import StoreError


async def _fail(db: AsyncSession, logger: logging.Logger, action: str, e: SQLAlchemyError):
    await db.rollback()
    logger.exception("Store failure while trying to %s", action)
    raise StoreError(str(e)) from e


async def execute(db: AsyncSession, stmt, action: str, logger: logging.Logger):
    try:
        return await db.execute(stmt)
    except SQLAlchemyError as e:
        await _fail(db, logger, action, e)


async def get(db: AsyncSession, entity, ident: Any, action: str, logger: logging.Logger, **kwargs) -> Optional[Any]:
    try:
        return await db.get(entity, ident, **kwargs)
    except SQLAlchemyError as e:
        await _fail(db, logger, action, e)


async def commit(db: AsyncSession, action: str, logger: logging.Logger):
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await _fail(db, logger, action, e)


async def refresh(db: AsyncSession, instance, action: str, logger: logging.Logger):
    try:
        await db.refresh(instance)
    except SQLAlchemyError as e:
        await _fail(db, logger, action, e)
