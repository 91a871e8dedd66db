from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, PrefixedIdMixin, SoftDeleteMixin, TimestampMixin

TEMPLATE_TYPES = ("PDF", "DOCX", "CUSTOM")


class ContractTemplate(Base, PrefixedIdMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "contract_templates"
    ID_PREFIX = "TMP"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="CUSTOM")
    size: Mapped[str] = mapped_column(String(20), nullable=False, default="0 KB")
    version: Mapped[str] = mapped_column(String(20), nullable=False, default="1.0")
    author: Mapped[str] = mapped_column(String(255), nullable=False, default="System")
    tags: Mapped[str] = mapped_column(Text, nullable=False, default="[]")  # JSON list
    elements: Mapped[str] = mapped_column(Text, nullable=False, default="[]")  # JSON list of layout elements
    folder_path: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
