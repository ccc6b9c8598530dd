from pydantic import Field
from datetime import datetime
import uuid
from typing import Optional
from guardline.schemas import APIModel
from guardline.tasks.models import TaskStatus, TaskPriority

class TaskCreate(APIModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    assigned_to_id: Optional[uuid.UUID] = None
    project_id: Optional[uuid.UUID] = None
    due_date: Optional[datetime] = None

class TaskUpdate(APIModel):
    non_nullable = ("title", "status", "priority")

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assigned_to_id: Optional[uuid.UUID] = None
    project_id: Optional[uuid.UUID] = None
    due_date: Optional[datetime] = None

class TaskRead(APIModel):
    id: uuid.UUID
    ticket_number: str
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    assigned_to_id: Optional[uuid.UUID] = None
    created_by_id: uuid.UUID
    project_id: Optional[uuid.UUID] = None
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
