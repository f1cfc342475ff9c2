from typing import Annotated, Optional
from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from taskflow.core.database import get_db
from taskflow.models.user import User
from taskflow.schemas.user import LoginRequest, LoginResponse, RegisterResponse, UserPublic, UserRegister, UserResponse
from taskflow.services import auth as auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])

# auto_error is off so a missing header goes through the same error path as a bad token.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login", auto_error=False)

async def get_current_user(
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
    db: AsyncSession = Depends(get_db),
) -> User:
    return await auth_service.authenticate(db, token)

@router.post("/login", response_model=LoginResponse)
async def login(credentials: LoginRequest, db: AsyncSession = Depends(get_db)):
    token, user = await auth_service.login(db, credentials.email, credentials.password)
    return {"token": token, "user": UserPublic.model_validate(user)}

@router.post("/register", response_model=RegisterResponse)
async def register_user(
    user_in: UserRegister,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a user account (admin only)"""
    user = await auth_service.register_user(
        db,
        current_user,
        email=user_in.email,
        password=user_in.password,
        name=user_in.name,
        role=user_in.role,
    )
    return {"message": "User created successfully", "user": UserPublic.model_validate(user)}

@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user profile information"""
    return current_user
