from pydantic import EmailStr, Field
from datetime import datetime
from typing import Optional
import uuid
from guardline.schemas import APIModel
from guardline.users.models import UserRole

class UserBase(APIModel):
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None

class UserCreate(UserBase):
    password: str = Field(min_length=8)

class UserRead(UserBase):
    id: uuid.UUID
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime

class UserUpdate(APIModel):
    non_nullable = ("role", "is_active")

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=8)
    # Only users with manage_users may change these two
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
