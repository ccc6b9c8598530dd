from typing import Optional
from sqlmodel import SQLModel, Field
from decimal import Decimal
import uuid
from datetime import datetime, timezone
from enum import Enum

class ClientStatus(str, Enum):
    POTENTIAL = "potential"
    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"

class Client(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    # Unique: a lead converts to at most one client
    lead_id: Optional[uuid.UUID] = Field(default=None, foreign_key="lead.id", unique=True)
    account_manager_id: Optional[uuid.UUID] = Field(default=None, foreign_key="user.id")

    name: str = Field(index=True)
    email: str
    phone: str
    company: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None
    address: Optional[str] = None

    status: ClientStatus = Field(default=ClientStatus.POTENTIAL, index=True)
    contract_value: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    contract_start_date: Optional[datetime] = None
    contract_end_date: Optional[datetime] = None
    preferred_contact_method: Optional[str] = None
    notes: Optional[str] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
