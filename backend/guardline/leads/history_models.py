from typing import Optional
from sqlmodel import SQLModel, Field, Column, JSON
import uuid
from datetime import datetime, timezone
from enum import Enum

class LeadAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    ASSIGNED = "assigned"
    STATUS_CHANGED = "status_changed"
    CONVERTED = "converted"

class LeadHistory(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    lead_id: uuid.UUID = Field(foreign_key="lead.id", index=True, ondelete="CASCADE")
    action: LeadAction
    performed_by_id: Optional[uuid.UUID] = Field(default=None, foreign_key="user.id")
    description: str

    # Only the fields that changed, as JSON-safe values
    old_value: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    new_value: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
