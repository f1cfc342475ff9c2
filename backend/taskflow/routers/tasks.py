from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from taskflow.core.database import get_db
from taskflow.models.user import User
from taskflow.routers.auth import get_current_user
from taskflow.schemas.task import (
    TaskCreate,
    TaskErrorCreate,
    TaskErrorResponse,
    TaskFilter,
    TaskResponse,
    TaskStatusUpdate,
    TaskWithErrors,
)
from taskflow.services import tasks as task_service

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
    responses={404: {"description": "Not found"}},
)

@router.get("", response_model=List[TaskWithErrors])
async def get_tasks(
    worker: Optional[str] = None,
    month: Optional[int] = Query(None, ge=0, le=11),
    year: Optional[int] = None,
    search: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    filters = TaskFilter(assignee=worker, month=month, year=year, search=search)
    return await task_service.list_tasks(db, current_user, filters)

@router.post("", response_model=TaskWithErrors)
async def create_task(
    task_in: TaskCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a task and assign it to a worker (admin only)"""
    return await task_service.create_task(
        db,
        current_user,
        title=task_in.title,
        description=task_in.description,
        link=task_in.link,
        assigned_to=task_in.assigned_to,
    )

@router.patch("/{task_id}/status", response_model=TaskResponse)
async def update_task_status(
    task_id: str,
    update: TaskStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await task_service.update_task_status(db, current_user, task_id, update.status)

@router.post("/{task_id}/errors", response_model=TaskErrorResponse)
async def add_task_error(
    task_id: str,
    error_in: TaskErrorCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Log an error against a task (admin only)"""
    return await task_service.add_error(db, current_user, task_id, error_in.description)

@router.get("/{task_id}/errors", response_model=List[TaskErrorResponse])
async def get_task_errors(
    task_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await task_service.list_errors_for_task(db, current_user, task_id)
