import math
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.models.user import User
from taskflow.schemas.task import TaskFilter, TaskStats, TaskStatus
from taskflow.services.tasks import filter_by_period
from taskflow.stores import task_store


def success_rate(completed: int, total: int) -> int:
    """Percentage rounded half up; 0 for an empty set."""
    if total == 0:
        return 0
    return int(math.floor(completed * 100 / total + 0.5))


async def compute_stats(db: AsyncSession, requester: User, filters: Optional[TaskFilter] = None) -> TaskStats:
    filters = filters or TaskFilter()
    tasks = await task_store.list_tasks(
        db,
        requester_role=requester.role,
        requester_id=requester.id,
        assignee=filters.assignee,
    )
    tasks = filter_by_period(tasks, filters.month, filters.year)

    total = len(tasks)
    approved = sum(1 for t in tasks if t.status == TaskStatus.approved)
    completed = approved + sum(1 for t in tasks if t.status == TaskStatus.completed)
    pending = sum(1 for t in tasks if t.status == TaskStatus.pending)
    errors = await task_store.count_errors_for_tasks(db, [t.id for t in tasks]) if tasks else 0

    return TaskStats(
        total=total,
        completed=completed,
        approved=approved,
        pending=pending,
        errors=errors,
        success_rate=success_rate(completed, total),
    )
