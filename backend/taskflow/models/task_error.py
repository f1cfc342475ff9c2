from sqlalchemy import Column, String, DateTime, ForeignKey, Text
from taskflow.core.database import Base, utcnow

class TaskError(Base):
    """An admin-logged defect note attached to a task."""

    __tablename__ = "errors"

    id = Column(String, primary_key=True, index=True)
    task_id = Column(String, ForeignKey("tasks.id"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    reported_by = Column(String, ForeignKey("users.id"), nullable=False)
    reported_at = Column(DateTime, default=utcnow, nullable=False)
