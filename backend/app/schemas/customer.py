"""Pydantic schemas for customer API endpoints."""
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr


class CustomerCreate(BaseModel):
    name: str
    email: EmailStr
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    industry: str | None = None
    contact_person: str | None = None
    contract_start_date: date | None = None
    contract_end_date: date | None = None
    monthly_amount: Decimal | None = None
    status: str = "active"
    notes: str | None = None


class CustomerUpdate(BaseModel):
    name: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    industry: str | None = None
    contact_person: str | None = None
    contract_start_date: date | None = None
    contract_end_date: date | None = None
    monthly_amount: Decimal | None = None
    status: str | None = None
    notes: str | None = None


class CustomerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: str | None
    address: str | None
    city: str | None
    state: str | None
    zip_code: str | None
    country: str | None
    industry: str | None
    contact_person: str | None
    contract_start_date: date | None
    contract_end_date: date | None
    monthly_amount: Decimal | None
    status: str
    notes: str | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None
