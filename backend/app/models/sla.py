from datetime import date

from sqlalchemy import Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import IDENTIFIER_LENGTH, Base, PrefixedIdMixin, SoftDeleteMixin, TimestampMixin

SERVICE_LEVELS = ("basic", "standard", "premium", "enterprise")
SLA_STATUSES = ("active", "inactive", "expired", "pending")


class SlaAgreement(Base, PrefixedIdMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "sla_agreements"
    ID_PREFIX = "SLA"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    customer_id: Mapped[str | None] = mapped_column(
        String(IDENTIFIER_LENGTH), ForeignKey("customers.id"), nullable=True, index=True
    )
    customer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)  # denormalized for display
    service_level: Mapped[str] = mapped_column(String(20), nullable=False, default="standard")
    response_time: Mapped[str | None] = mapped_column(String(100), nullable=True)
    resolution_time: Mapped[str | None] = mapped_column(String(100), nullable=True)
    availability: Mapped[str | None] = mapped_column(String(50), nullable=True)
    penalties: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    terms: Mapped[str] = mapped_column(Text, nullable=False, default="[]")  # JSON list of SLA terms
    folder_path: Mapped[str] = mapped_column(String(500), nullable=False)
