# tests/test_stats.py

from datetime import datetime

import pytest

from taskflow.schemas.task import TaskFilter
from taskflow.services import stats as stats_service
from taskflow.services import tasks as task_service
from taskflow.services.stats import success_rate
from taskflow.stores import task_store

from .helpers import set_created_at


async def _create(db, admin, assigned_to="worker1", title="Fix link"):
    return await task_service.create_task(
        db, admin, title=title, link="http://x", assigned_to=assigned_to
    )


@pytest.mark.parametrize(
    "completed,total,expected",
    [(0, 0, 0), (0, 3, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (1, 2, 50), (4, 4, 100)],
)
def test_success_rate(completed, total, expected) -> None:
    assert success_rate(completed, total) == expected


@pytest.mark.asyncio
async def test_empty_stats(db, admin) -> None:
    stats = await stats_service.compute_stats(db, admin)

    assert stats.total == 0
    assert stats.errors == 0
    assert stats.success_rate == 0


@pytest.mark.asyncio
async def test_stats_after_approval(db, admin, worker1) -> None:
    task = await _create(db, admin)
    await task_service.update_task_status(db, worker1, task.id, "completed")
    await task_service.update_task_status(db, admin, task.id, "approved")

    stats = await stats_service.compute_stats(db, admin, TaskFilter(assignee="worker1"))

    assert stats.total == 1
    assert stats.completed == 1
    assert stats.approved == 1
    assert stats.pending == 0
    assert stats.success_rate == 100


@pytest.mark.asyncio
async def test_stats_counts_and_errors(db, admin, worker1) -> None:
    a = await _create(db, admin, title="a")
    b = await _create(db, admin, title="b")
    c = await _create(db, admin, title="c")
    await _create(db, admin, title="d", assigned_to="worker2")
    await task_service.update_task_status(db, worker1, a.id, "completed")
    await task_service.update_task_status(db, admin, b.id, "approved")
    await task_service.add_error(db, admin, a.id, "one")
    await task_service.add_error(db, admin, a.id, "two")
    await task_service.add_error(db, admin, c.id, "three")

    stats = await stats_service.compute_stats(db, worker1)

    assert (stats.total, stats.completed, stats.approved, stats.pending) == (3, 2, 1, 1)
    assert stats.errors == 3
    assert stats.success_rate == 67
    assert stats.completed >= stats.approved


@pytest.mark.asyncio
async def test_worker_stats_ignore_requested_assignee(db, admin, worker2) -> None:
    await _create(db, admin, assigned_to="worker1")

    stats = await stats_service.compute_stats(db, worker2, TaskFilter(assignee="worker1"))
    assert stats.total == 0


@pytest.mark.asyncio
async def test_period_filter_skips_error_count_when_empty(db, admin, monkeypatch) -> None:
    task = await _create(db, admin)
    await set_created_at(db, task.id, datetime(2024, 3, 5))

    stats = await stats_service.compute_stats(db, admin, TaskFilter(month=2, year=2024))
    assert stats.total == 1

    async def fail(*args, **kwargs):
        raise AssertionError("errors should not be counted")

    monkeypatch.setattr(task_store, "count_errors_for_tasks", fail)
    stats = await stats_service.compute_stats(db, admin, TaskFilter(month=3, year=2024))
    assert stats.total == 0
    assert stats.errors == 0
    assert stats.success_rate == 0
