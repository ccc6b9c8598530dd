from pydantic import EmailStr, Field, field_validator
from datetime import datetime
from decimal import Decimal
import uuid
from typing import Optional
from guardline.schemas import APIModel
from guardline.leads.models import LeadSource, LeadStatus
from guardline.leads.history_models import LeadAction

class LeadBase(APIModel):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    company: Optional[str] = None
    industry: Optional[str] = None
    service_type: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    estimated_value: Optional[Decimal] = Field(default=None, ge=0)
    assigned_to_id: Optional[uuid.UUID] = None

class LeadCreate(LeadBase):
    source: LeadSource = LeadSource.MANUAL
    status: LeadStatus = LeadStatus.NEW

    @field_validator("source")
    @classmethod
    def reject_inquiry_source(cls, value: LeadSource) -> LeadSource:
        if value == LeadSource.INQUIRY:
            raise ValueError("Leads from inquiries are created by converting the inquiry")
        return value

    @field_validator("status")
    @classmethod
    def reject_converted(cls, value: LeadStatus) -> LeadStatus:
        if value == LeadStatus.CONVERTED:
            raise ValueError("Leads are marked converted only by converting them to a client")
        return value


class LeadUpdate(APIModel):
    non_nullable = ("name", "email", "phone", "status")

    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, min_length=1)
    company: Optional[str] = None
    industry: Optional[str] = None
    service_type: Optional[str] = None
    address: Optional[str] = None
    status: Optional[LeadStatus] = None
    notes: Optional[str] = None
    estimated_value: Optional[Decimal] = Field(default=None, ge=0)
    assigned_to_id: Optional[uuid.UUID] = None

    @field_validator("status")
    @classmethod
    def reject_converted(cls, value: Optional[LeadStatus]) -> Optional[LeadStatus]:
        if value == LeadStatus.CONVERTED:
            raise ValueError("Leads are marked converted only by converting them to a client")
        return value

class LeadRead(APIModel):
    id: uuid.UUID
    source: LeadSource
    inquiry_id: Optional[uuid.UUID] = None
    name: str
    email: str
    phone: str
    company: Optional[str] = None
    industry: Optional[str] = None
    service_type: Optional[str] = None
    address: Optional[str] = None
    status: LeadStatus
    assigned_to_id: Optional[uuid.UUID] = None
    notes: Optional[str] = None
    estimated_value: Optional[Decimal] = None
    created_at: datetime
    updated_at: datetime

class LeadHistoryRead(APIModel):
    id: uuid.UUID
    lead_id: uuid.UUID
    action: LeadAction
    performed_by_id: Optional[uuid.UUID] = None
    description: str
    old_value: Optional[dict] = None
    new_value: Optional[dict] = None
    created_at: datetime
