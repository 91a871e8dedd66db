from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, PrefixedIdMixin, TimestampMixin

# Report type -> display name used by POST /reports/generate
REPORT_NAMES = {
    "Equipment Reports": "Equipment Inventory & Utilization Report",
    "Work Order Reports": "Work Order Analytics Report",
    "Service Maintenance Reports": "Service Maintenance Summary",
    "Repair Maintenance Reports": "Repair History & Analysis",
    "Customer Reports": "Customer Account Summary",
    "Financial & Lease Reports": "Financial & Lease Analytics",
}


class Report(Base, PrefixedIdMixin, TimestampMixin):
    __tablename__ = "reports"
    ID_PREFIX = "RPT"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    format: Mapped[str] = mapped_column(String(20), nullable=False, default="PDF")
    file_size: Mapped[str] = mapped_column(String(20), nullable=False, default="0 KB")
    file_path: Mapped[str | None] = mapped_column(String(500), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="completed")
    generated_by: Mapped[str] = mapped_column(String(255), nullable=False, default="System")
