from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import IDENTIFIER_LENGTH, Base, PrefixedIdMixin, SoftDeleteMixin, TimestampMixin

ROLES = ("admin", "manager", "supervisor", "technician", "viewer")
USER_STATUSES = ("active", "inactive", "suspended")


class User(Base, PrefixedIdMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "users"
    ID_PREFIX = "USR"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(50), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # Technician-specific
    specialization: Mapped[str | None] = mapped_column(String(100), nullable=True)
    experience_years: Mapped[int | None] = mapped_column(Integer, nullable=True)
    supervisor_id: Mapped[str | None] = mapped_column(String(IDENTIFIER_LENGTH), nullable=True)

    @property
    def is_active(self) -> bool:
        return self.status == "active" and self.deleted_at is None
