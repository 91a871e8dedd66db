"""Pydantic schemas for work order API endpoints."""
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from app.schemas.parts import PartIn, PartOut


class WorkOrderCreate(BaseModel):
    title: str
    asset_id: str | None = None
    description: str | None = None
    type: str = "service"
    service_type: str = "scheduled"
    priority: str = "medium"
    status: str = "open"
    customer_name: str | None = None
    contact_person: str | None = None
    contact_phone: str | None = None
    location: str | None = None
    assigned_to: str | None = None
    requested_by: str | None = None
    supervisor_name: str | None = None
    scheduled_date: date | None = None
    due_date: date | None = None
    completed_date: date | None = None
    next_service_date: date | None = None
    fault_description: str | None = None
    work_carried_out: str | None = None
    page_count: int | None = None
    estimated_cost: Decimal | None = None
    actual_cost: Decimal | None = None
    consumable_parts: list[PartIn] = []


class WorkOrderUpdate(BaseModel):
    title: str | None = None
    asset_id: str | None = None
    description: str | None = None
    type: str | None = None
    service_type: str | None = None
    priority: str | None = None
    status: str | None = None
    customer_name: str | None = None
    contact_person: str | None = None
    contact_phone: str | None = None
    location: str | None = None
    assigned_to: str | None = None
    requested_by: str | None = None
    supervisor_name: str | None = None
    scheduled_date: date | None = None
    due_date: date | None = None
    completed_date: date | None = None
    next_service_date: date | None = None
    fault_description: str | None = None
    work_carried_out: str | None = None
    page_count: int | None = None
    estimated_cost: Decimal | None = None
    actual_cost: Decimal | None = None
    cancel_reason: str | None = None


class WorkOrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    asset_id: str | None
    description: str | None
    type: str
    service_type: str
    priority: str
    status: str
    customer_name: str | None
    contact_person: str | None
    contact_phone: str | None
    location: str | None
    assigned_to: str | None
    requested_by: str | None
    supervisor_name: str | None
    scheduled_date: date | None
    due_date: date | None
    completed_date: date | None
    next_service_date: date | None
    fault_description: str | None
    work_carried_out: str | None
    page_count: int | None
    estimated_cost: Decimal | None
    actual_cost: Decimal | None
    cancel_reason: str | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    consumable_parts: list[PartOut] = []
