from sqlalchemy import Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin


class IdSequence(Base, TimestampMixin):
    """Per-prefix counter behind identifier allocation.

    One row per prefix. ``last_value`` is the highest suffix handed out (or
    observed through an import); allocation locks the row, increments it and
    formats ``<prefix><last_value>``.
    """

    __tablename__ = "id_sequences"

    prefix: Mapped[str] = mapped_column(String(10), primary_key=True)
    last_value: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
