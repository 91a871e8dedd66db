"""Tests for the health endpoint and request-id tagging."""
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.exc import OperationalError

from app.main import app
from app.db.session import get_session


def make_session_override(mock_session):
    async def _override():
        yield mock_session
    return _override


async def _get_health(mock_session, headers=None):
    app.dependency_overrides[get_session] = make_session_override(mock_session)
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            return await client.get("/health", headers=headers)
    finally:
        app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_health_returns_ok_when_database_reachable():
    """GET /health should return 200 with status ok and database connected."""
    response = await _get_health(AsyncMock())

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "connected"}


@pytest.mark.asyncio
async def test_health_returns_503_when_database_unreachable():
    mock_session = AsyncMock()
    mock_session.execute = AsyncMock(
        side_effect=OperationalError("SELECT 1", {}, Exception("connection refused"))
    )

    response = await _get_health(mock_session)

    assert response.status_code == 503
    assert response.json() == {"status": "error", "database": "disconnected"}


@pytest.mark.asyncio
async def test_response_carries_generated_request_id():
    response = await _get_health(AsyncMock())
    assert response.headers.get("X-Request-ID")


@pytest.mark.asyncio
async def test_incoming_request_id_is_echoed():
    response = await _get_health(AsyncMock(), headers={"X-Request-ID": "req-abc-123"})
    assert response.headers["X-Request-ID"] == "req-abc-123"
