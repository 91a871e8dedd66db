"""Pydantic schemas for CSV bulk import results."""
from pydantic import BaseModel


class ImportResponse(BaseModel):
    success: bool
    message: str
    created: int = 0
    errors: list[str] = []
