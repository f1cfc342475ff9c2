from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from enum import Enum

class UserRole(str, Enum):
    admin = "admin"
    worker = "worker"

class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class UserRegister(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None

class UserPublic(BaseModel):
    id: str
    email: str
    name: str
    role: UserRole

    class Config:
        from_attributes = True

class UserResponse(UserPublic):
    created_at: datetime

class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserPublic

class RegisterResponse(BaseModel):
    message: str
    user: UserPublic
