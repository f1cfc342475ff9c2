# tests/helpers.py

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.models.task import Task
from taskflow.models.user import User
from taskflow.services.auth import issue_token


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {issue_token(user)}"}


async def set_created_at(db: AsyncSession, task_id: str, when: datetime) -> None:
    task = await db.get(Task, task_id)
    task.created_at = when
    await db.commit()
