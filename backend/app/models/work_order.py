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

WORK_ORDER_STATUSES = ("open", "assigned", "in-progress", "completed", "cancelled")
WORK_ORDER_PRIORITIES = ("low", "medium", "high", "critical")


class WorkOrder(Base, PrefixedIdMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "work_orders"
    ID_PREFIX = "WO"

    asset_id: Mapped[str | None] = mapped_column(
        String(IDENTIFIER_LENGTH), ForeignKey("assets.id"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="service")  # service, repair
    service_type: Mapped[str] = mapped_column(String(20), nullable=False, default="scheduled")
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default="medium")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="open")
    customer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_person: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    assigned_to: Mapped[str | None] = mapped_column(String(255), nullable=True)
    requested_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    supervisor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    scheduled_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    completed_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    next_service_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    fault_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    work_carried_out: Mapped[str | None] = mapped_column(Text, nullable=True)
    page_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    estimated_cost: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    actual_cost: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    cancel_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    consumable_parts: Mapped[list["ConsumablePart"]] = relationship(
        "ConsumablePart", back_populates="work_order", cascade="all, delete-orphan", lazy="selectin"
    )


class ConsumablePart(Base, UUIDMixin):
    __tablename__ = "consumable_parts"

    work_order_id: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH), ForeignKey("work_orders.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)

    work_order: Mapped["WorkOrder"] = relationship("WorkOrder", back_populates="consumable_parts")
