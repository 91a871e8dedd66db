"""Tests for EntityStore create/upsert semantics using mocked sessions."""
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from app.models.customer import Customer
from app.models.report import Report
from app.services.entity_store import DuplicateIdentifierError, EntityStore


# ─── Helpers ──────────────────────────────────────────────────────────────────

def _integrity_error():
    return IntegrityError("INSERT INTO customers ...", {}, Exception("duplicate key value"))


def _sequence_conflict():
    return IntegrityError(
        "INSERT INTO id_sequences ...", {},
        Exception("duplicate key value violates unique constraint \"id_sequences_pkey\""),
    )


def _taken_result(identifier):
    result = MagicMock()
    result.scalar_one_or_none.return_value = identifier
    return result


def _mock_session(commit_side_effect=None, execute_results=()):
    db = AsyncMock()
    db.add = MagicMock()
    db.commit = AsyncMock(side_effect=commit_side_effect)
    db.execute = AsyncMock(side_effect=list(execute_results))
    return db


def _mock_allocator(*identifiers):
    allocator = MagicMock()
    allocator.width = 3
    allocator.strict = False
    allocator.allocate = AsyncMock(side_effect=list(identifiers))
    allocator.observe = AsyncMock()
    allocator.resync = AsyncMock(return_value=0)
    return allocator


FIELDS = {"name": "Acme Leasing", "email": "ops@acme.com"}


# ─── create ───────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_create_assigns_allocated_identifier():
    db = _mock_session()
    store = EntityStore(db, Customer, "CUST", allocator=_mock_allocator("CUST001"))

    customer = await store.create(FIELDS)

    assert customer.id == "CUST001"
    assert customer.name == "Acme Leasing"
    db.commit.assert_awaited_once()
    db.refresh.assert_awaited_once_with(customer)


@pytest.mark.asyncio
async def test_create_retries_after_identifier_collision():
    """A taken identifier is rolled back, the sequence resynced and a new one tried."""
    db = _mock_session(
        commit_side_effect=[_integrity_error(), None, None],
        execute_results=[_taken_result("CUST001")],
    )
    allocator = _mock_allocator("CUST001", "CUST002")
    store = EntityStore(db, Customer, "CUST", allocator=allocator)

    customer = await store.create(FIELDS)

    assert customer.id == "CUST002"
    db.rollback.assert_awaited_once()
    allocator.resync.assert_awaited_once_with(db, Customer, "CUST")


@pytest.mark.asyncio
async def test_create_never_overwrites_and_raises_duplicate_after_retries(monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "ID_ALLOCATION_MAX_RETRIES", 2)
    db = _mock_session(
        commit_side_effect=[_integrity_error(), None, _integrity_error(), None],
        execute_results=[_taken_result("CUST001"), _taken_result("CUST001")],
    )
    store = EntityStore(db, Customer, "CUST", allocator=_mock_allocator("CUST001", "CUST001"))

    with pytest.raises(DuplicateIdentifierError) as exc_info:
        await store.create(FIELDS)

    assert exc_info.value.identifier == "CUST001"
    db.refresh.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_rolls_back_and_retries_when_sequence_seeding_conflicts():
    """A concurrent first allocation for the prefix fails allocate(); the attempt is retried."""
    db = _mock_session()
    allocator = _mock_allocator(_sequence_conflict(), "CUST001")
    store = EntityStore(db, Customer, "CUST", allocator=allocator)

    customer = await store.create(FIELDS)

    assert customer.id == "CUST001"
    db.rollback.assert_awaited_once()
    db.commit.assert_awaited_once()
    allocator.resync.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_raises_duplicate_when_sequence_conflict_persists(monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "ID_ALLOCATION_MAX_RETRIES", 2)
    db = _mock_session()
    allocator = _mock_allocator(_sequence_conflict(), _sequence_conflict())
    store = EntityStore(db, Customer, "CUST", allocator=allocator)

    with pytest.raises(DuplicateIdentifierError):
        await store.create(FIELDS)

    assert db.rollback.await_count == 2
    db.add.assert_not_called()


@pytest.mark.asyncio
async def test_create_reraises_other_unique_violations():
    """A collision on a column other than the identifier is not retried."""
    db = _mock_session(
        commit_side_effect=[_integrity_error()],
        execute_results=[_taken_result(None)],
    )
    allocator = _mock_allocator("CUST001")
    store = EntityStore(db, Customer, "CUST", allocator=allocator)

    with pytest.raises(IntegrityError):
        await store.create(FIELDS)
    allocator.resync.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_runs_build_hook_with_identifier():
    db = _mock_session()
    store = EntityStore(db, Customer, "CUST", allocator=_mock_allocator("CUST010"))
    seen = []

    await store.create(FIELDS, build=lambda entity: seen.append(entity.id))

    assert seen == ["CUST010"]


# ─── upsert ───────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_upsert_inserts_when_absent_and_observes_identifier():
    db = _mock_session()
    db.get = AsyncMock(return_value=None)
    allocator = _mock_allocator()
    store = EntityStore(db, Customer, "CUST", allocator=allocator)

    customer, created = await store.upsert("CUST050", FIELDS)

    assert created is True
    assert customer.id == "CUST050"
    db.add.assert_called_once_with(customer)
    allocator.observe.assert_awaited_once_with(db, Customer, "CUST", "CUST050")
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_upsert_updates_existing_without_create_defaults():
    existing = Customer(id="CUST050", name="Old Name", email="old@acme.com")
    db = _mock_session()
    db.get = AsyncMock(return_value=existing)
    store = EntityStore(db, Customer, "CUST", allocator=_mock_allocator())

    customer, created = await store.upsert("CUST050", FIELDS, create_defaults=lambda: {"notes": "imported"})

    assert created is False
    assert customer is existing
    assert customer.name == "Acme Leasing"
    assert customer.notes is None


# ─── find_max_identifier / delete ─────────────────────────────────────────────

@pytest.mark.asyncio
async def test_find_max_identifier_is_numeric():
    result = MagicMock()
    result.scalars.return_value.all.return_value = ["CUST999", "CUST1000", "CUST010"]
    db = _mock_session(execute_results=[result])
    store = EntityStore(db, Customer, "CUST", allocator=_mock_allocator())

    assert await store.find_max_identifier() == "CUST1000"


@pytest.mark.asyncio
async def test_find_max_identifier_empty_table():
    result = MagicMock()
    result.scalars.return_value.all.return_value = []
    db = _mock_session(execute_results=[result])
    store = EntityStore(db, Customer, "CUST", allocator=_mock_allocator())

    assert await store.find_max_identifier() is None


@pytest.mark.asyncio
async def test_delete_soft_deletes_when_supported():
    customer = Customer(id="CUST001", name="Acme", email="a@acme.com")
    db = _mock_session()
    store = EntityStore(db, Customer, "CUST", allocator=_mock_allocator())

    await store.delete(customer)

    assert customer.deleted_at is not None
    db.delete.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_hard_deletes_reports():
    report = Report(id="RPT001", name="Summary", type="Customer Reports")
    db = _mock_session()
    store = EntityStore(db, Report, "RPT", allocator=_mock_allocator())

    await store.delete(report)

    db.delete.assert_awaited_once_with(report)
    db.commit.assert_awaited_once()
