"""Pydantic schemas for lease API endpoints."""
import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class LeasePaymentIn(BaseModel):
    amount: Decimal
    due_date: date
    paid_date: date | None = None
    status: str = "pending"


class LeasePaymentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    amount: Decimal
    due_date: date
    paid_date: date | None
    status: str


class LeaseCreate(BaseModel):
    customer_id: str
    asset_id: str | None = None
    start_date: date
    end_date: date
    monthly_payment: Decimal = Decimal("0")
    deposit: Decimal | None = None
    next_payment_date: date | None = None
    status: str = "active"
    terms: str | None = None
    payments: list[LeasePaymentIn] = []


class LeaseUpdate(BaseModel):
    customer_id: str | None = None
    asset_id: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    monthly_payment: Decimal | None = None
    deposit: Decimal | None = None
    next_payment_date: date | None = None
    status: str | None = None
    terms: str | None = None


class LeaseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_id: str
    asset_id: str | None
    start_date: date
    end_date: date
    monthly_payment: Decimal
    deposit: Decimal | None
    next_payment_date: date | None
    status: str
    terms: str | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    payments: list[LeasePaymentOut] = []
