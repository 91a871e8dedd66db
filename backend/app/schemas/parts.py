"""Inline part lines shared by work orders and maintenance schedules."""
import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class PartIn(BaseModel):
    name: str
    quantity: int = Field(default=1, ge=1)
    cost: Decimal = Decimal("0")


class PartOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    quantity: int
    cost: Decimal
