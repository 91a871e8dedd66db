from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import IDENTIFIER_LENGTH, Base, TimestampMixin, UUIDMixin

ACTIVITY_ACTIONS = ("CREATE", "UPDATE", "DELETE", "IMPORT", "LOGIN", "GENERATE")


class ActivityLog(Base, UUIDMixin, TimestampMixin):
    """Append-only trail of user actions shown on the dashboard."""

    __tablename__ = "activity_logs"

    user_id: Mapped[str | None] = mapped_column(
        String(IDENTIFIER_LENGTH), ForeignKey("users.id"), nullable=True, index=True
    )
    user_name: Mapped[str] = mapped_column(String(255), nullable=False, default="System")  # denormalized
    action: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    module: Mapped[str] = mapped_column(String(50), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False)
    entity_id: Mapped[str | None] = mapped_column(String(IDENTIFIER_LENGTH), nullable=True, index=True)
    entity_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    ip_address: Mapped[str | None] = mapped_column(String(50), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)
    metadata_json: Mapped[str | None] = mapped_column("metadata", Text, nullable=True)  # JSON snapshot
