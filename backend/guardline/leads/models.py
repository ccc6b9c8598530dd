from typing import Optional
from sqlmodel import SQLModel, Field
from decimal import Decimal
import uuid
from datetime import datetime, timezone
from enum import Enum

class LeadSource(str, Enum):
    MANUAL = "manual"
    INQUIRY = "inquiry"
    REFERRAL = "referral"
    WEBSITE = "website"

class LeadStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    CONVERTED = "converted"
    LOST = "lost"

class Lead(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    source: LeadSource = Field(default=LeadSource.MANUAL)
    # Present iff source is INQUIRY; unique so an inquiry yields at most one lead
    inquiry_id: Optional[uuid.UUID] = Field(default=None, foreign_key="inquiry.id", unique=True)

    name: str = Field(index=True)
    email: str
    phone: str
    company: Optional[str] = None
    industry: Optional[str] = None
    service_type: Optional[str] = None
    address: Optional[str] = None

    status: LeadStatus = Field(default=LeadStatus.NEW, index=True)
    assigned_to_id: Optional[uuid.UUID] = Field(default=None, foreign_key="user.id")
    notes: Optional[str] = None
    estimated_value: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
