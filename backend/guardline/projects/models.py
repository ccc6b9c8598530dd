from typing import Optional, List
from sqlmodel import SQLModel, Field, Column, JSON
from decimal import Decimal
import uuid
from datetime import datetime, timezone
from enum import Enum

class ServiceType(str, Enum):
    CCTV = "cctv"
    ALARM = "alarm"
    ACCESS_CONTROL = "access_control"
    INTERCOM = "intercom"
    CLOUD_STORAGE = "cloud_storage"
    MONITORING = "monitoring"
    FIBER_INSTALLATION = "fiber_installation"
    MAINTENANCE = "maintenance"

class ProjectStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"

class Project(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    ticket_number: str = Field(unique=True, index=True)

    # At least one of the two is always set
    client_id: Optional[uuid.UUID] = Field(default=None, foreign_key="client.id", index=True)
    lead_id: Optional[uuid.UUID] = Field(default=None, foreign_key="lead.id", index=True)

    service_type: ServiceType
    assigned_technician_id: Optional[uuid.UUID] = Field(default=None, foreign_key="user.id", index=True)
    project_name: str
    status: ProjectStatus = Field(default=ProjectStatus.SCHEDULED, index=True)

    start_date: Optional[datetime] = None
    estimated_completion_date: Optional[datetime] = None
    actual_completion_date: Optional[datetime] = None
    total_cost: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    equipment_used: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))
    work_notes: Optional[str] = None
    client_feedback: Optional[str] = None
    client_rating: Optional[int] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
