"""Tests for authentication endpoints and optional bearer-token resolution."""
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.core.security import create_access_token, decode_token
from app.db.session import get_session


# ─── Fixtures ─────────────────────────────────────────────────────────────────

class FakeUser:
    """Minimal user stub returned by DB mock."""

    def __init__(self, status="active"):
        now = datetime(2026, 1, 5, tzinfo=timezone.utc)
        self.id = "USR001"
        self.email = "admin@example.com"
        self.name = "Admin User"
        self.role = "admin"
        self.phone = None
        self.department = "Operations"
        self.avatar = None
        self.status = status
        self.last_login = None
        self.specialization = None
        self.experience_years = None
        self.supervisor_id = None
        self.password_hash = "$2b$12$placeholder"  # verify_password is mocked
        self.created_at = now
        self.updated_at = now
        self.deleted_at = None

    @property
    def is_active(self):
        return self.status == "active" and self.deleted_at is None


def make_mock_session(user):
    mock_result = MagicMock()
    mock_result.scalar_one_or_none.return_value = user

    mock_session = AsyncMock()
    mock_session.execute = AsyncMock(return_value=mock_result)
    mock_session.add = MagicMock()
    return mock_session


async def _login(mock_session, password_ok=True):
    async def override_get_session():
        yield mock_session

    with patch("app.api.v1.auth.verify_password", return_value=password_ok):
        app.dependency_overrides[get_session] = override_get_session
        try:
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                return await client.post(
                    "/api/v1/auth/login",
                    json={"email": "admin@example.com", "password": "changeme123"},
                )
        finally:
            app.dependency_overrides.clear()


# ─── Login Tests ──────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_login_valid_credentials_returns_jwt_and_profile():
    """POST /api/v1/auth/login with valid credentials should return access_token and user."""
    fake_user = FakeUser()
    response = await _login(make_mock_session(fake_user))

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert decode_token(data["access_token"])["sub"] == "USR001"
    assert data["user"]["id"] == "USR001"
    assert "password_hash" not in data["user"]
    assert fake_user.last_login is not None


@pytest.mark.asyncio
async def test_login_wrong_password_returns_401():
    response = await _login(make_mock_session(FakeUser()), password_ok=False)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_unknown_email_returns_401():
    response = await _login(make_mock_session(None))
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_inactive_user_returns_403():
    response = await _login(make_mock_session(FakeUser(status="suspended")))
    assert response.status_code == 403


# ─── Token → user ─────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_me_resolves_bearer_token():
    token = create_access_token(subject="USR001", role="admin")

    async def override_get_session():
        yield make_mock_session(FakeUser())

    app.dependency_overrides[get_session] = override_get_session
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json()["email"] == "admin@example.com"


@pytest.mark.asyncio
async def test_me_with_invalid_token_returns_401():
    async def override_get_session():
        yield make_mock_session(None)

    app.dependency_overrides[get_session] = override_get_session
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/api/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 401
