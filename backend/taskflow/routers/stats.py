from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from taskflow.core.database import get_db
from taskflow.models.user import User
from taskflow.routers.auth import get_current_user
from taskflow.schemas.task import TaskFilter, TaskStats
from taskflow.services import stats as stats_service

router = APIRouter(
    prefix="/api/stats",
    tags=["stats"],
)

@router.get("", response_model=TaskStats)
async def get_stats(
    worker: Optional[str] = None,
    month: Optional[int] = Query(None, ge=0, le=11),
    year: Optional[int] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    filters = TaskFilter(assignee=worker, month=month, year=year)
    return await stats_service.compute_stats(db, current_user, filters)
