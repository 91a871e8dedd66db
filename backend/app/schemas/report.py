from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ReportGenerateRequest(BaseModel):
    type: str
    format: str = "PDF"


class ReportCreate(BaseModel):
    name: str
    type: str
    format: str = "PDF"
    file_size: str = "0 KB"
    file_path: str | None = None
    status: str = "completed"
    generated_by: str | None = None


class ReportUpdate(BaseModel):
    name: str | None = None
    type: str | None = None
    format: str | None = None
    file_size: str | None = None
    file_path: str | None = None
    status: str | None = None


class ReportOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: str
    format: str
    file_size: str
    file_path: str | None
    status: str
    generated_by: str
    created_at: datetime
