from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import IDENTIFIER_LENGTH, Base, PrefixedIdMixin, SoftDeleteMixin, TimestampMixin

ASSET_CONDITIONS = ("new", "good", "damaged", "poor")
ASSET_STATUSES = ("operational", "maintenance", "repair", "retired")


class Asset(Base, PrefixedIdMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "assets"
    ID_PREFIX = "AST"

    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    make: Mapped[str | None] = mapped_column(String(100), nullable=True)
    model: Mapped[str | None] = mapped_column(String(100), nullable=True)
    serial_number: Mapped[str | None] = mapped_column(String(100), nullable=True, unique=True)
    manufacturer: Mapped[str | None] = mapped_column(String(255), nullable=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    customer_id: Mapped[str | None] = mapped_column(
        String(IDENTIFIER_LENGTH), ForeignKey("customers.id"), nullable=True, index=True
    )
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    location_type: Mapped[str] = mapped_column(String(20), nullable=False, default="fixed")  # fixed, mobile
    condition: Mapped[str] = mapped_column(String(20), nullable=False, default="good")
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="operational")
    purchase_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    purchase_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    current_value: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    warranty_start: Mapped[date | None] = mapped_column(Date, nullable=True)
    warranty_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    warranty_provider: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_service_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    next_service_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    customer: Mapped["Customer | None"] = relationship("Customer", back_populates="assets")  # noqa: F821
    maintenance_schedules: Mapped[list["MaintenanceSchedule"]] = relationship(  # noqa: F821
        "MaintenanceSchedule", back_populates="asset"
    )
