from pydantic import EmailStr, Field, model_validator
from datetime import datetime
from decimal import Decimal
import uuid
from typing import Optional
from guardline.schemas import APIModel
from guardline.clients.models import ClientStatus

class ContractTerms(APIModel):
    company_size: Optional[str] = None
    contract_value: Optional[Decimal] = Field(default=None, ge=0)
    contract_start_date: Optional[datetime] = None
    contract_end_date: Optional[datetime] = None
    preferred_contact_method: Optional[str] = None

    @model_validator(mode="after")
    def check_contract_dates(self):
        start, end = self.contract_start_date, self.contract_end_date
        if start and end and end < start:
            raise ValueError("contractEndDate must not be before contractStartDate")
        return self

class ClientCreate(ContractTerms):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    company: Optional[str] = None
    industry: Optional[str] = None
    address: Optional[str] = None
    status: ClientStatus = ClientStatus.POTENTIAL
    notes: Optional[str] = None
    account_manager_id: Optional[uuid.UUID] = None

class LeadConversionOptions(ContractTerms):
    """Optional extras supplied when converting a lead; identity fields always come from the lead."""
    account_manager_id: Optional[uuid.UUID] = None

class ClientUpdate(ContractTerms):
    non_nullable = ("name", "email", "phone", "status")

    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, min_length=1)
    company: Optional[str] = None
    industry: Optional[str] = None
    address: Optional[str] = None
    status: Optional[ClientStatus] = None
    notes: Optional[str] = None
    account_manager_id: Optional[uuid.UUID] = None

class ClientRead(APIModel):
    id: uuid.UUID
    lead_id: Optional[uuid.UUID] = None
    account_manager_id: Optional[uuid.UUID] = None
    name: str
    email: str
    phone: str
    company: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None
    address: Optional[str] = None
    status: ClientStatus
    contract_value: Optional[Decimal] = None
    contract_start_date: Optional[datetime] = None
    contract_end_date: Optional[datetime] = None
    preferred_contact_method: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
