from pydantic import Field, field_validator, model_validator
from datetime import datetime
from decimal import Decimal
import uuid
from typing import Optional, List
from guardline.schemas import APIModel
from guardline.projects.models import ProjectStatus, ServiceType

MISSING_LINK_MESSAGE = "A project must be linked to a client or a lead"

def _strip_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("projectName must not be blank")
    return value

class ProjectCreate(APIModel):
    project_name: str
    service_type: ServiceType
    client_id: Optional[uuid.UUID] = None
    lead_id: Optional[uuid.UUID] = None
    assigned_technician_id: Optional[uuid.UUID] = None
    status: ProjectStatus = ProjectStatus.SCHEDULED
    start_date: Optional[datetime] = None
    estimated_completion_date: Optional[datetime] = None
    total_cost: Optional[Decimal] = Field(default=None, ge=0)
    equipment_used: Optional[List[str]] = None
    work_notes: Optional[str] = None

    @field_validator("project_name")
    @classmethod
    def check_project_name(cls, value: Optional[str]) -> Optional[str]:
        return _strip_name(value)

    @model_validator(mode="after")
    def require_client_or_lead(self):
        if self.client_id is None and self.lead_id is None:
            raise ValueError(MISSING_LINK_MESSAGE)
        return self

class ProjectUpdate(APIModel):
    non_nullable = ("project_name", "service_type", "status")

    project_name: Optional[str] = None
    service_type: Optional[ServiceType] = None
    client_id: Optional[uuid.UUID] = None
    lead_id: Optional[uuid.UUID] = None
    assigned_technician_id: Optional[uuid.UUID] = None
    status: Optional[ProjectStatus] = None
    start_date: Optional[datetime] = None
    estimated_completion_date: Optional[datetime] = None
    actual_completion_date: Optional[datetime] = None
    total_cost: Optional[Decimal] = Field(default=None, ge=0)
    equipment_used: Optional[List[str]] = None
    work_notes: Optional[str] = None
    client_feedback: Optional[str] = None
    client_rating: Optional[int] = Field(default=None, ge=1, le=5)

    @field_validator("project_name")
    @classmethod
    def check_project_name(cls, value: Optional[str]) -> Optional[str]:
        return _strip_name(value)

class ProjectRead(APIModel):
    id: uuid.UUID
    ticket_number: str
    client_id: Optional[uuid.UUID] = None
    lead_id: Optional[uuid.UUID] = None
    service_type: ServiceType
    assigned_technician_id: Optional[uuid.UUID] = None
    project_name: str
    status: ProjectStatus
    start_date: Optional[datetime] = None
    estimated_completion_date: Optional[datetime] = None
    actual_completion_date: Optional[datetime] = None
    total_cost: Optional[Decimal] = None
    equipment_used: Optional[List[str]] = None
    work_notes: Optional[str] = None
    client_feedback: Optional[str] = None
    client_rating: Optional[int] = None
    created_at: datetime
    updated_at: datetime
