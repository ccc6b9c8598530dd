from typing import Optional
from sqlmodel import SQLModel, Field
import uuid
from datetime import datetime, timezone
from enum import Enum

class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

class Task(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    ticket_number: str = Field(unique=True, index=True)
    title: str
    description: Optional[str] = None
    status: TaskStatus = Field(default=TaskStatus.PENDING, index=True)
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)

    assigned_to_id: Optional[uuid.UUID] = Field(default=None, foreign_key="user.id", index=True)
    created_by_id: uuid.UUID = Field(foreign_key="user.id")
    project_id: Optional[uuid.UUID] = Field(default=None, foreign_key="project.id", index=True)

    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
