import logging
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.core.errors import AuthorizationError, NotFoundOrUnauthorized, ValidationError
from taskflow.models.user import User
from taskflow.schemas.task import TaskErrorResponse, TaskFilter, TaskResponse, TaskWithErrors
from taskflow.services import policy
from taskflow.stores import task_store

logger = logging.getLogger(__name__)


def matches_period(created_at: datetime, month: Optional[int], year: Optional[int]) -> bool:
    """month is 0-based (January = 0)."""
    if month is not None and created_at.month - 1 != month:
        return False
    if year is not None and created_at.year != year:
        return False
    return True


def matches_search(task: TaskResponse, search: str) -> bool:
    needle = search.lower()
    if needle in task.title.lower():
        return True
    return bool(task.description) and needle in task.description.lower()


def filter_by_period(tasks: Iterable, month: Optional[int], year: Optional[int]) -> list:
    if month is None and year is None:
        return list(tasks)
    return [t for t in tasks if matches_period(t.created_at, month, year)]


async def create_task(
    db: AsyncSession,
    requester: User,
    *,
    title: Optional[str],
    link: Optional[str],
    assigned_to: Optional[str],
    description: Optional[str] = None,
) -> TaskWithErrors:
    if not policy.can_create_task(requester.role):
        raise AuthorizationError("Admin access required")
    if not title or not link or not assigned_to:
        raise ValidationError("Title, link, and assignedTo are required")

    task = await task_store.insert_task(
        db,
        title=title,
        description=description or None,
        link=link,
        assigned_to=assigned_to,
        created_by=requester.id,
    )
    logger.info("Task %s created by %s for %s", task.id, requester.id, assigned_to)
    return TaskWithErrors.model_validate(task)


async def list_tasks(db: AsyncSession, requester: User, filters: Optional[TaskFilter] = None) -> List[TaskWithErrors]:
    filters = filters or TaskFilter()
    tasks = await task_store.list_tasks(
        db,
        requester_role=requester.role,
        requester_id=requester.id,
        assignee=filters.assignee,
    )
    if not tasks:
        return []

    errors_by_task = await task_store.list_errors_for_tasks(db, [t.id for t in tasks])
    results = []
    for task in tasks:
        item = TaskWithErrors.model_validate(task)
        item.errors = [TaskErrorResponse.model_validate(e) for e in errors_by_task.get(task.id, [])]
        results.append(item)

    results = filter_by_period(results, filters.month, filters.year)
    if filters.search:
        results = [t for t in results if matches_search(t, filters.search)]
    return results


async def update_task_status(db: AsyncSession, requester: User, task_id: str, new_status) -> TaskResponse:
    task = await task_store.update_status(
        db,
        task_id,
        new_status,
        requester_role=requester.role,
        requester_id=requester.id,
    )
    if task is None:
        raise NotFoundOrUnauthorized()
    logger.info("Task %s moved to %s by %s", task.id, task.status, requester.id)
    return TaskResponse.model_validate(task)


async def add_error(db: AsyncSession, requester: User, task_id: str, description: Optional[str]) -> TaskErrorResponse:
    if not policy.can_report_error(requester.role):
        raise AuthorizationError("Admin access required")
    if not description:
        raise ValidationError("Error description required")

    error = await task_store.insert_error(db, task_id, description, requester.id)
    logger.info("Error %s reported on task %s by %s", error.id, task_id, requester.id)
    return TaskErrorResponse.model_validate(error)


async def list_errors_for_task(db: AsyncSession, requester: User, task_id: str) -> List[TaskErrorResponse]:
    # Any authenticated user may read a task's errors; no ownership check here.
    errors = await task_store.list_errors_for_task(db, task_id)
    return [TaskErrorResponse.model_validate(e) for e in errors]
