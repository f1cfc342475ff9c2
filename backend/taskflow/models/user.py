from sqlalchemy import Column, String, DateTime
from taskflow.core.database import Base, utcnow

class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False)  # admin, worker
    created_at = Column(DateTime, default=utcnow, nullable=False)
