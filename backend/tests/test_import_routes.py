"""Tests for POST /api/v1/{entity}/import response envelopes."""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.db.session import get_session
from app.services.csv_import import ImportOutcome


# ─── Helpers ──────────────────────────────────────────────────────────────────

def make_mock_session():
    mock_session = AsyncMock()
    mock_session.add = MagicMock()
    return mock_session


def make_session_override(mock_session):
    async def _override():
        yield mock_session
    return _override


async def _post(path, mock_session, **kwargs):
    app.dependency_overrides[get_session] = make_session_override(mock_session)
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            return await client.post(path, **kwargs)
    finally:
        app.dependency_overrides.clear()


# ─── Tests ────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_import_without_file_returns_400():
    response = await _post("/api/v1/customers/import", make_mock_session())

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "No file provided", "errors": []}


@pytest.mark.asyncio
async def test_import_empty_file_returns_validation_failed():
    response = await _post(
        "/api/v1/customers/import",
        make_mock_session(),
        files={"file": ("customers.csv", b"", "text/csv")},
    )

    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["message"] == "Validation failed"
    assert data["errors"] == ["CSV file is empty"]


@pytest.mark.asyncio
async def test_import_missing_columns_returns_validation_errors():
    mock_session = make_mock_session()
    response = await _post(
        "/api/v1/assets/import",
        mock_session,
        files={"file": ("assets.csv", b"id,name\nAST001,Copier\n", "text/csv")},
    )

    assert response.status_code == 400
    data = response.json()
    assert data["message"] == "Validation failed"
    assert data["errors"] == ["Missing required columns: customerId"]
    mock_session.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_import_success_reports_count_and_row_errors():
    outcome = ImportOutcome(created=2, errors=["Customer CUST002: duplicate key value"])
    mock_session = make_mock_session()

    with patch("app.api.v1.import_routes.run_import", AsyncMock(return_value=outcome)):
        response = await _post(
            "/api/v1/customers/import",
            mock_session,
            files={"file": ("customers.csv", b"id,name,email\n", "text/csv")},
        )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "2 customers processed",
        "created": 2,
        "errors": ["Customer CUST002: duplicate key value"],
    }
    # The import itself is recorded in the activity feed
    logged = mock_session.add.call_args.args[0]
    assert logged.action == "IMPORT"
    assert logged.module == "customers"


@pytest.mark.asyncio
async def test_import_uses_entity_plural_in_message():
    with patch("app.api.v1.import_routes.run_import", AsyncMock(return_value=ImportOutcome(created=5))):
        response = await _post(
            "/api/v1/work-orders/import",
            make_mock_session(),
            files={"file": ("wo.csv", b"id,title,assetId\n", "text/csv")},
        )

    assert response.status_code == 200
    assert response.json()["message"] == "5 work orders processed"


@pytest.mark.asyncio
async def test_import_unexpected_failure_returns_500_envelope():
    with patch("app.api.v1.import_routes.run_import", AsyncMock(side_effect=RuntimeError("database exploded"))):
        response = await _post(
            "/api/v1/maintenance/import",
            make_mock_session(),
            files={"file": ("mt.csv", b"id,title,assetId\n", "text/csv")},
        )

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Import failed", "errors": ["database exploded"]}


@pytest.mark.asyncio
async def test_import_unknown_entity_is_rejected():
    response = await _post(
        "/api/v1/reports/import",
        make_mock_session(),
        files={"file": ("r.csv", b"id\n", "text/csv")},
    )
    assert response.status_code == 422
