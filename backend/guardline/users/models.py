from typing import Optional
from sqlmodel import SQLModel, Field
import uuid
from datetime import datetime, timezone
from enum import Enum

class UserRole(str, Enum):
    CLIENT = "client"
    EMPLOYEE = "employee"
    SALES = "sales"
    PROJECT_MANAGER = "project_manager"
    MANAGER = "manager"
    ADMIN = "admin"

class User(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: str = Field(unique=True, index=True)
    hashed_password: str

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None

    role: UserRole = Field(default=UserRole.CLIENT)
    is_active: bool = Field(default=True)

    # Timestamp
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

