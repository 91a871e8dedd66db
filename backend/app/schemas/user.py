"""Pydantic schemas for user management endpoints. Password hashes never leave the API."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserCreate(BaseModel):
    name: str
    email: EmailStr
    password: str = Field(min_length=8)
    role: str = "viewer"
    phone: str | None = None
    department: str | None = None
    avatar: str | None = None
    status: str = "active"
    specialization: str | None = None
    experience_years: int | None = None
    supervisor_id: str | None = None


class UserUpdate(BaseModel):
    name: str | None = None
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=8)
    role: str | None = None
    phone: str | None = None
    department: str | None = None
    avatar: str | None = None
    status: str | None = None
    specialization: str | None = None
    experience_years: int | None = None
    supervisor_id: str | None = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    role: str
    phone: str | None
    department: str | None
    avatar: str | None
    status: str
    last_login: datetime | None
    specialization: str | None
    experience_years: int | None
    supervisor_id: str | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None
