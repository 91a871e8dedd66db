"""Pydantic schemas for maintenance schedule API endpoints."""
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from app.schemas.parts import PartIn, PartOut


class MaintenanceCreate(BaseModel):
    asset_id: str
    title: str
    description: str | None = None
    type: str = "service"
    service_type: str = "scheduled"
    scheduled_date: date | None = None
    completed_date: date | None = None
    frequency: str | None = None
    priority: str = "medium"
    status: str = "scheduled"
    assigned_to: str | None = None
    estimated_duration: int | None = None
    actual_duration: int | None = None
    work_carried_out: str | None = None
    notes: str | None = None
    parts: list[PartIn] = []


class MaintenanceUpdate(BaseModel):
    asset_id: str | None = None
    title: str | None = None
    description: str | None = None
    type: str | None = None
    service_type: str | None = None
    scheduled_date: date | None = None
    completed_date: date | None = None
    frequency: str | None = None
    priority: str | None = None
    status: str | None = None
    assigned_to: str | None = None
    estimated_duration: int | None = None
    actual_duration: int | None = None
    work_carried_out: str | None = None
    notes: str | None = None


class MaintenanceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    asset_id: str
    title: str
    description: str | None
    type: str
    service_type: str
    scheduled_date: date | None
    completed_date: date | None
    frequency: str | None
    priority: str
    status: str
    assigned_to: str | None
    estimated_duration: int | None
    actual_duration: int | None
    work_carried_out: str | None
    notes: str | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    parts: list[PartOut] = []
