"""Sequential human-readable identifiers: <PREFIX><NNN>.

Pure helpers compute the next identifier from existing ones. ``IdAllocator``
keeps an explicit per-prefix counter in ``id_sequences`` and serializes
allocations for a prefix with a row lock held until the caller commits.
"""
import logging
import re
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.id_sequence import IdSequence

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 3

_DIGITS = re.compile(r"[0-9]+")


class MalformedIdentifierError(ValueError):
    """An identifier carries the prefix but its suffix is not a decimal number."""

    def __init__(self, prefix: str, identifier: str):
        super().__init__(f"Identifier '{identifier}' does not match {prefix}<digits>")
        self.prefix = prefix
        self.identifier = identifier


# ─── Pure helpers ───

def format_identifier(prefix: str, number: int, width: int = DEFAULT_WIDTH) -> str:
    """Zero-pad to at least ``width`` digits; larger numbers widen, never truncate."""
    if number < 1:
        raise ValueError(f"Identifier numbers start at 1, got {number}")
    return f"{prefix}{number:0{width}d}"


def parse_suffix(prefix: str, identifier: str) -> int | None:
    """Return the numeric suffix, or None when the identifier has another prefix.

    Raises MalformedIdentifierError when the prefix matches but the rest is not
    all ASCII digits (e.g. ``CUSTX12`` for prefix ``CUST``).
    """
    if not identifier.startswith(prefix):
        return None
    suffix = identifier[len(prefix):]
    if not _DIGITS.fullmatch(suffix):
        raise MalformedIdentifierError(prefix, identifier)
    return int(suffix)


def highest_suffix(prefix: str, identifiers: Iterable[str], strict: bool = False) -> int:
    """Largest numeric suffix among ``identifiers`` sharing ``prefix`` (0 if none).

    Malformed identifiers raise in strict mode; otherwise they are skipped and
    logged, since a legacy row must not stall allocation for the whole prefix.
    """
    highest = 0
    for identifier in identifiers:
        try:
            number = parse_suffix(prefix, identifier)
        except MalformedIdentifierError:
            if strict:
                raise
            logger.warning("Ignoring malformed identifier %r for prefix %s", identifier, prefix)
            continue
        if number is not None and number > highest:
            highest = number
    return highest


def next_identifier(
    prefix: str,
    existing: str | Iterable[str] | None = None,
    width: int = DEFAULT_WIDTH,
    strict: bool = False,
) -> str:
    """Next identifier after ``existing``.

    ``existing`` is either the last identifier (a single string), the full set
    of identifiers for the prefix, or None when the collection is empty.

        >>> next_identifier("CUST", None)
        'CUST001'
        >>> next_identifier("CUST", {"CUST998", "CUST999"})
        'CUST1000'
    """
    if existing is None:
        candidates: Iterable[str] = ()
    elif isinstance(existing, str):
        candidates = (existing,)
    else:
        candidates = existing
    return format_identifier(prefix, highest_suffix(prefix, candidates, strict) + 1, width)


# ─── Store-backed allocation ───

async def find_identifiers(db: AsyncSession, model, prefix: str) -> list[str]:
    """All identifiers for ``prefix`` in the model's table, soft-deleted rows included."""
    result = await db.execute(select(model.id).where(model.id.startswith(prefix, autoescape=True)))
    return list(result.scalars().all())


class IdAllocator:
    """Mints identifiers from the ``id_sequences`` counter for a prefix.

    The counter row is read with ``SELECT ... FOR UPDATE``; the lock is held
    until the caller's transaction ends, so the increment and the insert of
    the new entity commit together.
    """

    def __init__(self, width: int | None = None, strict: bool | None = None):
        self.width = width if width is not None else settings.ID_SUFFIX_WIDTH
        self.strict = strict if strict is not None else settings.ID_STRICT_SUFFIX

    async def allocate(self, db: AsyncSession, model, prefix: str) -> str:
        sequence = await self._locked_sequence(db, model, prefix)
        sequence.last_value += 1
        await db.flush()
        identifier = format_identifier(prefix, sequence.last_value, self.width)
        logger.debug("Allocated %s", identifier)
        return identifier

    async def observe(self, db: AsyncSession, model, prefix: str, identifier: str) -> None:
        """Advance the counter past an identifier written with an explicit value."""
        try:
            number = parse_suffix(prefix, identifier)
        except MalformedIdentifierError:
            if self.strict:
                raise
            logger.warning("Imported identifier %r does not follow %s<digits>", identifier, prefix)
            return
        if number is None:
            return
        sequence = await self._locked_sequence(db, model, prefix)
        if number > sequence.last_value:
            sequence.last_value = number
            await db.flush()

    async def resync(self, db: AsyncSession, model, prefix: str) -> int:
        """Raise the counter to the highest identifier actually present in the table."""
        sequence = await self._locked_sequence(db, model, prefix)
        present = highest_suffix(prefix, await find_identifiers(db, model, prefix), self.strict)
        if present > sequence.last_value:
            logger.warning(
                "Sequence %s behind table (%d < %d); resyncing", prefix, sequence.last_value, present
            )
            sequence.last_value = present
            await db.flush()
        return sequence.last_value

    async def _locked_sequence(self, db: AsyncSession, model, prefix: str) -> IdSequence:
        sequence = await self._select_for_update(db, prefix)
        if sequence is not None:
            return sequence

        # First allocation for this prefix: seed from rows that predate the counter.
        # A concurrent first allocation may win the insert; re-read the row locked.
        seed = highest_suffix(prefix, await find_identifiers(db, model, prefix), self.strict)
        try:
            async with db.begin_nested():
                db.add(IdSequence(prefix=prefix, last_value=seed))
        except IntegrityError:
            logger.info("Id sequence %s seeded concurrently", prefix)
        else:
            logger.info("Seeded id sequence %s at %d", prefix, seed)
        sequence = await self._select_for_update(db, prefix)
        if sequence is None:
            raise RuntimeError(f"Id sequence {prefix} missing after seeding")
        return sequence

    async def _select_for_update(self, db: AsyncSession, prefix: str) -> IdSequence | None:
        result = await db.execute(
            select(IdSequence).where(IdSequence.prefix == prefix).with_for_update()
        )
        return result.scalar_one_or_none()
