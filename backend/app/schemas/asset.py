"""Pydantic schemas for asset API endpoints."""
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class AssetCreate(BaseModel):
    make: str
    model: str
    serial_number: str
    name: str | None = None
    manufacturer: str | None = None
    category: str | None = None
    description: str | None = None
    customer_id: str | None = None
    location: str | None = None
    location_type: str = "fixed"
    condition: str = "good"
    status: str = "operational"
    purchase_date: date | None = None
    purchase_price: Decimal | None = None
    current_value: Decimal | None = None
    warranty_start: date | None = None
    warranty_end: date | None = None
    warranty_provider: str | None = None
    last_service_date: date | None = None
    next_service_date: date | None = None
    notes: str | None = None


class AssetUpdate(BaseModel):
    make: str | None = None
    model: str | None = None
    serial_number: str | None = None
    name: str | None = None
    manufacturer: str | None = None
    category: str | None = None
    description: str | None = None
    customer_id: str | None = None
    location: str | None = None
    location_type: str | None = None
    condition: str | None = None
    status: str | None = None
    purchase_date: date | None = None
    purchase_price: Decimal | None = None
    current_value: Decimal | None = None
    warranty_start: date | None = None
    warranty_end: date | None = None
    warranty_provider: str | None = None
    last_service_date: date | None = None
    next_service_date: date | None = None
    notes: str | None = None


class AssetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None
    make: str | None
    model: str | None
    serial_number: str | None
    manufacturer: str | None
    category: str | None
    description: str | None
    customer_id: str | None
    location: str | None
    location_type: str
    condition: str
    status: str
    purchase_date: date | None
    purchase_price: Decimal | None
    current_value: Decimal | None
    warranty_start: date | None
    warranty_end: date | None
    warranty_provider: str | None
    last_service_date: date | None
    next_service_date: date | None
    notes: str | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None
