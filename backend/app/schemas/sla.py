"""Pydantic schemas for SLA agreement API endpoints."""
import json
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class SlaAgreementCreate(BaseModel):
    name: str
    description: str = ""
    customer_id: str | None = None
    customer_name: str | None = None
    service_level: str = "standard"
    response_time: str | None = None
    resolution_time: str | None = None
    availability: str | None = None
    penalties: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: str = "pending"
    terms: list[dict[str, Any]] = []


class SlaAgreementUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    customer_id: str | None = None
    customer_name: str | None = None
    service_level: str | None = None
    response_time: str | None = None
    resolution_time: str | None = None
    availability: str | None = None
    penalties: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: str | None = None
    terms: list[dict[str, Any]] | None = None


class SlaAgreementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    customer_id: str | None
    customer_name: str | None
    service_level: str
    response_time: str | None
    resolution_time: str | None
    availability: str | None
    penalties: str | None
    start_date: date | None
    end_date: date | None
    status: str
    terms: list[dict[str, Any]]
    folder_path: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    @field_validator("terms", mode="before")
    @classmethod
    def _decode_terms(cls, v):
        if isinstance(v, str):
            return json.loads(v) if v else []
        return v
