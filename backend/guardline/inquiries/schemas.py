from pydantic import EmailStr, Field, field_validator
from datetime import datetime
import uuid
from typing import Optional
from guardline.schemas import APIModel
from guardline.inquiries.models import InquiryType, InquiryStatus

class InquiryCreate(APIModel):
    type: InquiryType = InquiryType.QUOTE
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    company: Optional[str] = None
    service_type: str = Field(min_length=1)
    property_type: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    urgency: Optional[str] = None
    preferred_date: Optional[str] = None
    preferred_time: Optional[str] = None

class InquiryUpdate(APIModel):
    non_nullable = ("status",)

    status: Optional[InquiryStatus] = None
    notes: Optional[str] = None
    assigned_to_id: Optional[uuid.UUID] = None

    @field_validator("status")
    @classmethod
    def reject_converted(cls, value: Optional[InquiryStatus]) -> Optional[InquiryStatus]:
        if value == InquiryStatus.CONVERTED:
            raise ValueError("Inquiries are marked converted only by converting them to a lead")
        return value

class InquiryRead(APIModel):
    id: uuid.UUID
    type: InquiryType
    name: str
    email: str
    phone: str
    company: Optional[str] = None
    service_type: str
    property_type: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    urgency: Optional[str] = None
    preferred_date: Optional[str] = None
    preferred_time: Optional[str] = None
    status: InquiryStatus
    assigned_to_id: Optional[uuid.UUID] = None
    converted_lead_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime
