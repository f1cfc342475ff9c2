"""
Persistence for tasks and their error reports.

Every function takes the session it should run in; callers own its lifetime.
Writes are single statements followed by a commit, so there is nothing to
roll back beyond the failed statement itself.
"""
import logging
import uuid
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.core.database import utcnow
from taskflow.core.errors import AuthorizationError, NotFoundError, StoreError
from taskflow.models.task import Task
from taskflow.models.task_error import TaskError
from taskflow.models.user import User
from taskflow.schemas.task import TaskStatus
from taskflow.schemas.user import UserRole
from taskflow.services import policy
from taskflow.stores import session

logger = logging.getLogger(__name__)

ALL_ASSIGNEES = "all"


async def insert_task(
    db: AsyncSession,
    *,
    title: str,
    link: str,
    assigned_to: str,
    created_by: str,
    description: Optional[str] = None,
) -> Task:
    # SQLite does not enforce foreign keys by default, so check the assignee here.
    if await session.get(db, User, assigned_to, "look up assignee", logger) is None:
        raise StoreError(f"Unknown assignee {assigned_to!r}")

    task = Task(
        id=f"task_{uuid.uuid4().hex}",
        title=title,
        description=description,
        link=link,
        assigned_to=assigned_to,
        created_by=created_by,
        status=TaskStatus.pending.value,
        created_at=utcnow(),
    )
    db.add(task)
    await session.commit(db, "insert task", logger)
    await session.refresh(db, task, "reload task", logger)
    return task


async def get_task(db: AsyncSession, task_id: str) -> Optional[Task]:
    return await session.get(db, Task, task_id, "get task", logger)


async def list_tasks(
    db: AsyncSession,
    *,
    requester_role: str,
    requester_id: str,
    assignee: Optional[str] = None,
) -> List[Task]:
    """Newest first. A worker only ever sees their own tasks, whatever assignee was asked for."""
    if not policy.can_view_all_tasks(requester_role):
        assignee = requester_id

    query = select(Task)
    if assignee and assignee != ALL_ASSIGNEES:
        query = query.where(Task.assigned_to == assignee)
    query = query.order_by(Task.created_at.desc(), Task.id.desc())

    result = await session.execute(db, query, "list tasks", logger)
    return list(result.scalars().all())


async def update_status(
    db: AsyncSession,
    task_id: str,
    new_status,
    *,
    requester_role: str,
    requester_id: str,
) -> Optional[Task]:
    """
    Move a task to new_status and stamp the matching timestamp.

    Returns None when no row matched. For workers the UPDATE is limited to
    rows assigned to them, so a task owned by someone else is
    indistinguishable from one that does not exist.
    """
    target = policy.parse_status(new_status)
    # Ownership is enforced by the row filter below, not here.
    if not policy.can_transition(requester_role, None, target, is_owner=True):
        raise AuthorizationError("Workers can only mark tasks as completed")

    values = {"status": target.value}
    if target is TaskStatus.completed:
        values["completed_at"] = utcnow()
    elif target is TaskStatus.approved:
        values["approved_at"] = utcnow()

    stmt = update(Task).where(Task.id == task_id)
    if requester_role == UserRole.worker:
        stmt = stmt.where(Task.assigned_to == requester_id)
    stmt = stmt.values(**values).execution_options(synchronize_session=False)

    result = await session.execute(db, stmt, f"update task {task_id}", logger)
    await session.commit(db, "update task status", logger)

    if result.rowcount == 0:
        return None
    return await session.get(db, Task, task_id, "reload task", logger, populate_existing=True)


async def insert_error(db: AsyncSession, task_id: str, description: str, reporter_id: str) -> TaskError:
    if await get_task(db, task_id) is None:
        raise NotFoundError("Task not found")

    error = TaskError(
        id=f"error_{uuid.uuid4().hex}",
        task_id=task_id,
        description=description,
        reported_by=reporter_id,
        reported_at=utcnow(),
    )
    db.add(error)
    await session.commit(db, "insert error report", logger)
    await session.refresh(db, error, "reload error report", logger)
    return error


async def list_errors_for_task(db: AsyncSession, task_id: str) -> List[TaskError]:
    result = await session.execute(
        db,
        select(TaskError)
        .join(Task, Task.id == TaskError.task_id)
        .where(TaskError.task_id == task_id)
        .order_by(TaskError.reported_at, TaskError.id),
        "list errors for task",
        logger,
    )
    return list(result.scalars().all())


async def list_errors_for_tasks(db: AsyncSession, task_ids: Iterable[str]) -> Dict[str, List[TaskError]]:
    """Bulk form of list_errors_for_task: one query for the whole task list."""
    task_ids = list(task_ids)
    grouped: Dict[str, List[TaskError]] = defaultdict(list)
    if not task_ids:
        return grouped

    result = await session.execute(
        db,
        select(TaskError)
        .join(Task, Task.id == TaskError.task_id)
        .where(TaskError.task_id.in_(task_ids))
        .order_by(TaskError.reported_at, TaskError.id),
        "list errors for tasks",
        logger,
    )
    for error in result.scalars().all():
        grouped[error.task_id].append(error)
    return grouped


async def count_errors_for_tasks(db: AsyncSession, task_ids: Iterable[str]) -> int:
    task_ids = list(task_ids)
    if not task_ids:
        return 0
    result = await session.execute(
        db,
        select(func.count(TaskError.id))
        .join(Task, Task.id == TaskError.task_id)
        .where(TaskError.task_id.in_(task_ids)),
        "count errors",
        logger,
    )
    return result.scalar_one()
