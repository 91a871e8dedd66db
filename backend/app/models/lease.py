from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import (
    IDENTIFIER_LENGTH,
    Base,
    PrefixedIdMixin,
    SoftDeleteMixin,
    TimestampMixin,
    UUIDMixin,
)


class Lease(Base, PrefixedIdMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "leases"
    ID_PREFIX = "LSE"

    customer_id: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH), ForeignKey("customers.id"), nullable=False, index=True
    )
    asset_id: Mapped[str | None] = mapped_column(
        String(IDENTIFIER_LENGTH), ForeignKey("assets.id"), nullable=True, index=True
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    monthly_payment: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    deposit: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    next_payment_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active")
    terms: Mapped[str | None] = mapped_column(Text, nullable=True)

    customer: Mapped["Customer"] = relationship("Customer", back_populates="leases")  # noqa: F821
    payments: Mapped[list["LeasePayment"]] = relationship(
        "LeasePayment", back_populates="lease", cascade="all, delete-orphan", lazy="selectin"
    )


class LeasePayment(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "lease_payments"

    lease_id: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH), ForeignKey("leases.id"), nullable=False, index=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    paid_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")  # pending, paid, overdue

    lease: Mapped["Lease"] = relationship("Lease", back_populates="payments")
