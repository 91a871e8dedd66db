"""Persistence for prefixed-ID entities: allocate-and-create, upsert, soft delete."""
import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.services.id_allocator import IdAllocator, find_identifiers, highest_suffix, format_identifier

logger = logging.getLogger(__name__)


class DuplicateIdentifierError(Exception):
    """A create collided with an existing identifier and re-allocation did not resolve it."""

    def __init__(self, identifier: str):
        super().__init__(f"Identifier '{identifier}' is already in use.")
        self.identifier = identifier


class EntityStore:
    """Entity-table operations keyed by a ``<PREFIX><NNN>`` string identifier.

    ``create`` never overwrites: a unique-key collision on the identifier is
    rolled back, the sequence is resynced against the table and a fresh
    identifier is allocated, up to ``ID_ALLOCATION_MAX_RETRIES`` attempts.
    Collisions on other unique columns propagate as ``IntegrityError``.
    """

    def __init__(self, db: AsyncSession, model, prefix: str, allocator: IdAllocator | None = None):
        self.db = db
        self.model = model
        self.prefix = prefix
        self.allocator = allocator or IdAllocator()

    @property
    def soft_deletes(self) -> bool:
        return hasattr(self.model, "deleted_at")

    # ─── Reads ───

    async def find_max_identifier(self) -> str | None:
        """Numerically largest identifier for the prefix (CUST1000 beats CUST999)."""
        identifiers = await find_identifiers(self.db, self.model, self.prefix)
        highest = highest_suffix(self.prefix, identifiers, self.allocator.strict)
        if highest == 0:
            return None
        return format_identifier(self.prefix, highest, self.allocator.width)

    async def get(self, identifier: str, include_deleted: bool = False):
        stmt = select(self.model).where(self.model.id == identifier)
        if self.soft_deletes and not include_deleted:
            stmt = stmt.where(self.model.deleted_at.is_(None))
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def list(self, include_deleted: bool = False, filters: Sequence[Any] = (), limit: int | None = None):
        stmt = select(self.model).where(*filters)
        if self.soft_deletes and not include_deleted:
            stmt = stmt.where(self.model.deleted_at.is_(None))
        stmt = stmt.order_by(self.model.created_at.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return list((await self.db.execute(stmt)).scalars().all())

    # ─── Writes ───

    async def create(self, fields: dict[str, Any], build: Callable[[Any], None] | None = None):
        """Allocate the next identifier, insert and commit.

        ``build`` is called on each fresh instance before insert, to attach
        child rows (parts, payments); it runs again on every retry.
        """
        last_identifier = self.prefix
        for attempt in range(1, settings.ID_ALLOCATION_MAX_RETRIES + 1):
            identifier = None
            try:
                identifier = await self.allocator.allocate(self.db, self.model, self.prefix)
                last_identifier = identifier
                entity = self.model(id=identifier, **fields)
                if build is not None:
                    build(entity)
                self.db.add(entity)
                await self.db.commit()
            except IntegrityError:
                await self.db.rollback()
                if identifier is None:
                    logger.warning(
                        "Id sequence %s conflict during allocation (attempt %d/%d); retrying",
                        self.prefix, attempt, settings.ID_ALLOCATION_MAX_RETRIES,
                    )
                    continue
                if not await self._identifier_taken(identifier):
                    raise
                logger.warning(
                    "Identifier %s already taken (attempt %d/%d); re-allocating",
                    identifier, attempt, settings.ID_ALLOCATION_MAX_RETRIES,
                )
                await self.allocator.resync(self.db, self.model, self.prefix)
                await self.db.commit()
                continue
            await self.db.refresh(entity)
            logger.info("Created %s %s", self.model.__tablename__, identifier)
            return entity
        raise DuplicateIdentifierError(last_identifier)

    async def upsert(
        self,
        identifier: str,
        fields: dict[str, Any],
        create_defaults: Callable[[], dict[str, Any]] | None = None,
    ) -> tuple[Any, bool]:
        """Create-if-absent-else-update by identifier; commits. Returns (entity, created).

        ``create_defaults`` is called only when the row is inserted, once per row.
        """
        entity = await self.db.get(self.model, identifier)
        created = entity is None
        if created:
            defaults = create_defaults() if create_defaults is not None else {}
            entity = self.model(id=identifier, **{**defaults, **fields})
            self.db.add(entity)
        else:
            for field, value in fields.items():
                setattr(entity, field, value)
        await self.allocator.observe(self.db, self.model, self.prefix, identifier)
        await self.db.commit()
        return entity, created

    async def update(self, entity, fields: dict[str, Any]):
        for field, value in fields.items():
            setattr(entity, field, value)
        self.db.add(entity)
        await self.db.commit()
        await self.db.refresh(entity)
        return entity

    async def delete(self, entity) -> None:
        """Soft delete when the table supports it; the identifier stays reserved either way."""
        if self.soft_deletes:
            entity.deleted_at = datetime.now(timezone.utc)
            self.db.add(entity)
        else:
            await self.db.delete(entity)
        await self.db.commit()

    async def _identifier_taken(self, identifier: str) -> bool:
        result = await self.db.execute(select(self.model.id).where(self.model.id == identifier))
        return result.scalar_one_or_none() is not None
