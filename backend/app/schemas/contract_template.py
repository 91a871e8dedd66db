"""Pydantic schemas for contract template API endpoints.

Tags and layout elements are stored as JSON text; the Out schema decodes
them back into lists.
"""
import json
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class ContractTemplateCreate(BaseModel):
    name: str
    description: str = ""
    type: str = "CUSTOM"
    size: str = "0 KB"
    author: str | None = None
    tags: list[str] = []
    elements: list[dict[str, Any]] = []
    status: str = "active"


class ContractTemplateUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    type: str | None = None
    size: str | None = None
    version: str | None = None
    author: str | None = None
    tags: list[str] | None = None
    elements: list[dict[str, Any]] | None = None
    status: str | None = None


class ContractTemplateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    type: str
    size: str
    version: str
    author: str
    tags: list[str]
    elements: list[dict[str, Any]]
    folder_path: str
    status: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    @field_validator("tags", "elements", mode="before")
    @classmethod
    def _decode_json(cls, v):
        if isinstance(v, str):
            return json.loads(v) if v else []
        return v
