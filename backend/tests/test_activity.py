"""Tests for activity log writes."""
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from app.services.activity import log_activity


class FakeUser:
    id = "USR001"
    name = "Admin User"


@pytest.mark.asyncio
async def test_log_activity_attributes_actor_and_serialises_metadata():
    db = AsyncMock()
    db.add = MagicMock()

    entry = await log_activity(
        db, "UPDATE", "assets", "asset", "Updated asset Copier",
        entity_id="AST001", entity_name="Copier", actor=FakeUser(), metadata={"fields": ["status"]},
    )

    assert entry.user_id == "USR001"
    assert entry.user_name == "Admin User"
    assert entry.metadata_json == '{"fields": ["status"]}'
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_log_activity_without_actor_is_system():
    db = AsyncMock()
    db.add = MagicMock()

    entry = await log_activity(db, "GENERATE", "reports", "report", "Generated report")

    assert entry.user_id is None
    assert entry.user_name == "System"


@pytest.mark.asyncio
async def test_log_activity_failure_is_swallowed():
    """The change being logged is already committed; a failed log write must not raise."""
    db = AsyncMock()
    db.add = MagicMock()
    db.commit = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("disk full")))

    entry = await log_activity(db, "DELETE", "customers", "customer", "Deleted customer Acme")

    assert entry is None
    db.rollback.assert_awaited_once()
