from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import (
    IDENTIFIER_LENGTH,
    Base,
    PrefixedIdMixin,
    SoftDeleteMixin,
    TimestampMixin,
    UUIDMixin,
)

MAINTENANCE_TYPES = ("service", "repair", "preventive", "emergency")
MAINTENANCE_STATUSES = ("scheduled", "in-progress", "completed", "overdue", "cancelled")


class MaintenanceSchedule(Base, PrefixedIdMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "maintenance_schedules"
    ID_PREFIX = "MT"

    asset_id: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH), ForeignKey("assets.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="service")
    service_type: Mapped[str] = mapped_column(String(20), nullable=False, default="scheduled")
    scheduled_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    completed_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    frequency: Mapped[str | None] = mapped_column(String(50), nullable=True)
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default="medium")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="scheduled")
    assigned_to: Mapped[str | None] = mapped_column(String(255), nullable=True)
    estimated_duration: Mapped[int | None] = mapped_column(Integer, nullable=True)  # minutes
    actual_duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    work_carried_out: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    asset: Mapped["Asset"] = relationship("Asset", back_populates="maintenance_schedules")  # noqa: F821
    parts: Mapped[list["MaintenancePart"]] = relationship(
        "MaintenancePart", back_populates="schedule", cascade="all, delete-orphan", lazy="selectin"
    )


class MaintenancePart(Base, UUIDMixin):
    __tablename__ = "maintenance_parts"

    schedule_id: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH), ForeignKey("maintenance_schedules.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)

    schedule: Mapped["MaintenanceSchedule"] = relationship("MaintenanceSchedule", back_populates="parts")
