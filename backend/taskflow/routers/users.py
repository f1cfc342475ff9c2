from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from taskflow.core.database import get_db
from taskflow.models.user import User
from taskflow.routers.auth import get_current_user
from taskflow.schemas.user import UserResponse, UserRole
from taskflow.stores import user_store

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
)

@router.get("", response_model=List[UserResponse])
async def get_users(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await user_store.list_users(db)

@router.get("/workers", response_model=List[UserResponse])
async def get_workers(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await user_store.list_users(db, role=UserRole.worker.value)
