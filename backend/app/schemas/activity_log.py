import json
import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ActivityLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: str | None
    user_name: str
    action: str
    module: str
    entity_type: str
    entity_id: str | None
    entity_name: str | None
    description: str
    ip_address: str | None
    user_agent: str | None
    metadata: Any | None = Field(default=None, validation_alias="metadata_json")
    created_at: datetime

    @field_validator("metadata", mode="before")
    @classmethod
    def _decode_metadata(cls, v):
        if isinstance(v, str):
            return json.loads(v)
        return v
