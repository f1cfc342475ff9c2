from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from enum import Enum

class TaskStatus(str, Enum):
    pending = "pending"
    completed = "completed"
    approved = "approved"

class TaskCreate(BaseModel):
    # Presence is checked by the task service so every missing field yields the same error.
    title: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    assigned_to: Optional[str] = Field(None, alias="assignedTo")

    class Config:
        populate_by_name = True

class TaskStatusUpdate(BaseModel):
    status: Optional[str] = None

class TaskErrorCreate(BaseModel):
    description: Optional[str] = None

class TaskFilter(BaseModel):
    assignee: Optional[str] = None
    month: Optional[int] = Field(None, ge=0, le=11)  # 0-based, January = 0
    year: Optional[int] = None
    search: Optional[str] = None

class TaskErrorResponse(BaseModel):
    id: str
    task_id: str
    description: str
    reported_by: str
    reported_at: datetime

    class Config:
        from_attributes = True

class TaskResponse(BaseModel):
    id: str
    title: str
    description: Optional[str]
    link: str
    assigned_to: str
    created_by: str
    status: TaskStatus
    created_at: datetime
    completed_at: Optional[datetime]
    approved_at: Optional[datetime]

    class Config:
        from_attributes = True

class TaskWithErrors(TaskResponse):
    errors: List[TaskErrorResponse] = []

class TaskStats(BaseModel):
    total: int
    completed: int
    approved: int
    pending: int
    errors: int
    success_rate: int = Field(..., alias="successRate")

    class Config:
        populate_by_name = True
