from typing import Optional
from sqlmodel import SQLModel, Field
import uuid
from datetime import datetime, timezone
from enum import Enum

class InquiryType(str, Enum):
    QUOTE = "quote"
    APPOINTMENT = "appointment"

class InquiryStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    CONVERTED = "converted"
    CLOSED = "closed"

class Inquiry(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    type: InquiryType = Field(default=InquiryType.QUOTE)

    name: str
    email: str
    phone: str
    company: Optional[str] = None
    service_type: str
    property_type: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None

    # Appointment requests only
    urgency: Optional[str] = None
    preferred_date: Optional[str] = None
    preferred_time: Optional[str] = None

    status: InquiryStatus = Field(default=InquiryStatus.NEW, index=True)
    assigned_to_id: Optional[uuid.UUID] = Field(default=None, foreign_key="user.id")
    # Set once by the inquiry -> lead conversion
    converted_lead_id: Optional[uuid.UUID] = Field(default=None, unique=True)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
