"""Tests for identifier allocation.

Pure helpers are tested directly; IdAllocator runs against a mocked
AsyncSession whose execute() results are queued per call.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from app.models.customer import Customer
from app.models.id_sequence import IdSequence
from app.services.id_allocator import (
    IdAllocator,
    MalformedIdentifierError,
    format_identifier,
    highest_suffix,
    next_identifier,
    parse_suffix,
)


# ─── Helpers ──────────────────────────────────────────────────────────────────

def _result(sequence=None, identifiers=None):
    result = MagicMock()
    result.scalar_one_or_none.return_value = sequence
    result.scalars.return_value.all.return_value = identifiers or []
    return result


def _mock_session(*results, savepoint_error=None):
    db = AsyncMock()
    db.execute = AsyncMock(side_effect=list(results))
    db.add = MagicMock()
    savepoint = MagicMock()
    savepoint.__aenter__ = AsyncMock(return_value=savepoint)
    savepoint.__aexit__ = AsyncMock(side_effect=savepoint_error, return_value=False)
    db.begin_nested = MagicMock(return_value=savepoint)
    return db


# ─── next_identifier ──────────────────────────────────────────────────────────

def test_first_identifier_for_empty_collection():
    assert next_identifier("CUST", None) == "CUST001"
    assert next_identifier("AST", []) == "AST001"


def test_next_after_single_identifier():
    assert next_identifier("WO", "WO041") == "WO042"


def test_suffix_widens_past_three_digits():
    """CUST999 is followed by CUST1000, not a truncated or wrapped value."""
    assert next_identifier("CUST", "CUST999") == "CUST1000"


def test_numeric_not_lexicographic_maximum():
    """Lexicographically 'CUST999' > 'CUST1000'; the numeric max must win."""
    existing = ["CUST999", "CUST1000", "CUST002"]
    assert next_identifier("CUST", existing) == "CUST1001"


def test_result_strictly_greater_than_every_existing_suffix():
    existing = {"MT001", "MT007", "MT003"}
    nxt = next_identifier("MT", existing)
    assert parse_suffix("MT", nxt) > max(parse_suffix("MT", i) for i in existing)


def test_other_prefixes_are_ignored():
    assert next_identifier("SLA", ["LSE050", "SLA002"]) == "SLA003"


def test_malformed_suffix_skipped_when_not_strict():
    assert next_identifier("CUST", ["CUST004", "CUSTX12"]) == "CUST005"


def test_malformed_suffix_raises_when_strict():
    with pytest.raises(MalformedIdentifierError):
        next_identifier("CUST", ["CUST004", "CUST-12"], strict=True)


def test_custom_width():
    assert next_identifier("RPT", None, width=5) == "RPT00001"


# ─── format / parse ───────────────────────────────────────────────────────────

def test_format_identifier_rejects_zero():
    with pytest.raises(ValueError):
        format_identifier("TMP", 0)


def test_parse_suffix_other_prefix_is_none():
    assert parse_suffix("USR", "CUST001") is None


def test_parse_suffix_rejects_non_ascii_digits():
    with pytest.raises(MalformedIdentifierError):
        parse_suffix("AST", "AST١٢")


def test_highest_suffix_empty_is_zero():
    assert highest_suffix("AST", []) == 0


# ─── IdAllocator ──────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_allocate_increments_existing_sequence():
    sequence = IdSequence(prefix="CUST", last_value=41)
    db = _mock_session(_result(sequence=sequence))

    identifier = await IdAllocator(width=3, strict=False).allocate(db, Customer, "CUST")

    assert identifier == "CUST042"
    assert sequence.last_value == 42
    db.flush.assert_awaited()


@pytest.mark.asyncio
async def test_allocate_seeds_sequence_from_table():
    """First allocation for a prefix starts after the highest existing row."""
    db = _mock_session(
        _result(sequence=None),
        _result(identifiers=["CUST999", "CUST1000", "CUSTX"]),
        _result(sequence=IdSequence(prefix="CUST", last_value=1000)),
    )

    identifier = await IdAllocator(width=3, strict=False).allocate(db, Customer, "CUST")

    assert identifier == "CUST1001"
    seeded = db.add.call_args.args[0]
    assert isinstance(seeded, IdSequence)
    assert seeded.prefix == "CUST"
    assert seeded.last_value == 1000
    db.begin_nested.assert_called_once()


@pytest.mark.asyncio
async def test_allocate_on_empty_table_starts_at_one():
    db = _mock_session(
        _result(sequence=None),
        _result(identifiers=[]),
        _result(sequence=IdSequence(prefix="CUST", last_value=0)),
    )
    assert await IdAllocator(width=3, strict=False).allocate(db, Customer, "CUST") == "CUST001"


@pytest.mark.asyncio
async def test_allocate_uses_row_seeded_by_concurrent_first_allocation():
    """Losing the seed insert race rolls back only the savepoint and re-reads the winner's row."""
    winner = IdSequence(prefix="CUST", last_value=1)
    conflict = IntegrityError(
        "INSERT INTO id_sequences ...", {},
        Exception('duplicate key value violates unique constraint "id_sequences_pkey"'),
    )
    db = _mock_session(
        _result(sequence=None),
        _result(identifiers=[]),
        _result(sequence=winner),
        savepoint_error=conflict,
    )

    identifier = await IdAllocator(width=3, strict=False).allocate(db, Customer, "CUST")

    assert identifier == "CUST002"
    assert winner.last_value == 2
    db.rollback.assert_not_awaited()


@pytest.mark.asyncio
async def test_observe_advances_counter_past_imported_identifier():
    sequence = IdSequence(prefix="CUST", last_value=5)
    db = _mock_session(_result(sequence=sequence), _result(sequence=sequence))
    allocator = IdAllocator(width=3, strict=False)

    await allocator.observe(db, Customer, "CUST", "CUST012")
    assert sequence.last_value == 12

    await allocator.observe(db, Customer, "CUST", "CUST003")
    assert sequence.last_value == 12


@pytest.mark.asyncio
async def test_observe_ignores_malformed_identifier_when_not_strict():
    db = _mock_session()
    await IdAllocator(width=3, strict=False).observe(db, Customer, "CUST", "CUST-A1")
    db.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_resync_raises_counter_to_table_maximum():
    sequence = IdSequence(prefix="CUST", last_value=3)
    db = _mock_session(_result(sequence=sequence), _result(identifiers=["CUST001", "CUST007"]))

    assert await IdAllocator(width=3, strict=False).resync(db, Customer, "CUST") == 7
    assert sequence.last_value == 7
