"""Tests for the entity CRUD endpoints.

EntityStore writes are patched out; reads go through a mocked AsyncSession,
following the dependency-override pattern used across the API tests.
"""
import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.exc import OperationalError

from app.main import app
from app.db.session import get_session
from app.models.asset import Asset
from app.models.contract_template import ContractTemplate
from app.models.customer import Customer
from app.models.report import Report
from app.models.work_order import ConsumablePart, WorkOrder
from app.services.entity_store import DuplicateIdentifierError, EntityStore

NOW = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


# ─── Helpers ──────────────────────────────────────────────────────────────────

def make_customer(customer_id="CUST001", **kwargs):
    return Customer(
        id=customer_id,
        name=kwargs.get("name", "Acme Leasing"),
        email=kwargs.get("email", "ops@acme.com"),
        status=kwargs.get("status", "active"),
        created_at=NOW,
        updated_at=NOW,
    )


def make_mock_session(row=None, rows=None):
    mock_result = MagicMock()
    mock_result.scalar_one_or_none.return_value = row
    mock_result.scalars.return_value.all.return_value = rows or []
    mock_result.first.return_value = None

    mock_session = AsyncMock()
    mock_session.execute = AsyncMock(return_value=mock_result)
    mock_session.add = MagicMock()
    return mock_session


async def _request(method, path, mock_session, **kwargs):
    async def override_get_session():
        yield mock_session

    app.dependency_overrides[get_session] = override_get_session
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            return await client.request(method, path, **kwargs)
    finally:
        app.dependency_overrides.clear()


# ─── Customers ────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_create_customer_returns_201_with_allocated_id():
    customer = make_customer("CUST007")
    mock_session = make_mock_session()

    with patch.object(EntityStore, "create", AsyncMock(return_value=customer)) as create:
        response = await _request(
            "POST", "/api/v1/customers", mock_session,
            json={"name": "Acme Leasing", "email": "ops@acme.com"},
        )

    assert response.status_code == 201
    assert response.json()["id"] == "CUST007"
    fields = create.await_args.args[0]
    assert "id" not in fields
    assert fields["status"] == "active"
    logged = mock_session.add.call_args.args[0]
    assert logged.action == "CREATE"
    assert logged.entity_id == "CUST007"


@pytest.mark.asyncio
async def test_create_customer_duplicate_identifier_returns_409():
    with patch.object(EntityStore, "create", AsyncMock(side_effect=DuplicateIdentifierError("CUST001"))):
        response = await _request(
            "POST", "/api/v1/customers", make_mock_session(),
            json={"name": "Acme Leasing", "email": "ops@acme.com"},
        )

    assert response.status_code == 409
    assert "CUST001" in response.json()["detail"]


@pytest.mark.asyncio
async def test_create_customer_still_201_when_activity_write_fails():
    """The activity rollback discards loaded state; the response is built from the committed row."""
    customer = make_customer("CUST008")
    mock_session = make_mock_session()
    mock_session.commit = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("no such table")))

    async def discard_loaded_state():
        customer.__dict__.pop("name", None)
        customer.__dict__.pop("email", None)

    mock_session.rollback = AsyncMock(side_effect=discard_loaded_state)

    with patch.object(EntityStore, "create", AsyncMock(return_value=customer)):
        response = await _request(
            "POST", "/api/v1/customers", mock_session,
            json={"name": "Acme Leasing", "email": "ops@acme.com"},
        )

    assert response.status_code == 201
    assert response.json()["id"] == "CUST008"
    assert response.json()["name"] == "Acme Leasing"
    mock_session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_get_missing_customer_returns_404():
    response = await _request("GET", "/api/v1/customers/CUST404", make_mock_session(row=None))

    assert response.status_code == 404
    assert response.json() == {"detail": "Customer not found."}


@pytest.mark.asyncio
async def test_list_customers_returns_rows():
    rows = [make_customer("CUST002", name="Globex"), make_customer("CUST001")]
    response = await _request("GET", "/api/v1/customers", make_mock_session(rows=rows))

    assert response.status_code == 200
    assert [c["id"] for c in response.json()] == ["CUST002", "CUST001"]


@pytest.mark.asyncio
async def test_update_customer_without_fields_returns_400():
    response = await _request("PUT", "/api/v1/customers/CUST001", make_mock_session(row=make_customer()), json={})

    assert response.status_code == 400
    assert response.json()["detail"] == "No fields to update."


@pytest.mark.asyncio
async def test_delete_customer_soft_deletes():
    customer = make_customer()
    mock_session = make_mock_session(row=customer)

    response = await _request("DELETE", "/api/v1/customers/CUST001", mock_session)

    assert response.status_code == 204
    assert customer.deleted_at is not None
    mock_session.delete.assert_not_awaited()


# ─── Assets ───────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_create_asset_requires_make_model_serial():
    response = await _request("POST", "/api/v1/assets", make_mock_session(), json={"make": "Canon"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_asset_with_taken_serial_returns_409():
    mock_session = make_mock_session()
    mock_session.execute.return_value.first.return_value = ("AST001",)

    response = await _request(
        "POST", "/api/v1/assets", mock_session,
        json={"make": "Canon", "model": "iR-ADV C5535", "serial_number": "SN-1"},
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_create_asset_defaults_name_from_make_and_model():
    asset = Asset(
        id="AST001", name="Canon iR-ADV C5535", make="Canon", model="iR-ADV C5535",
        serial_number="SN-1", location_type="fixed", condition="good", status="operational",
        created_at=NOW, updated_at=NOW,
    )
    with patch.object(EntityStore, "create", AsyncMock(return_value=asset)) as create:
        response = await _request(
            "POST", "/api/v1/assets", make_mock_session(),
            json={"make": "Canon", "model": "iR-ADV C5535", "serial_number": "SN-1"},
        )

    assert response.status_code == 201
    assert create.await_args.args[0]["name"] == "Canon iR-ADV C5535"


# ─── Work orders ──────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_create_work_order_attaches_parts_inline():
    work_order = WorkOrder(
        id="WO001", title="Fuser jam", type="repair", service_type="on-call",
        priority="high", status="open", created_at=NOW, updated_at=NOW,
    )
    captured = {}

    async def fake_create(self, fields, build=None):
        build(work_order)
        for part in work_order.consumable_parts:
            part.id = uuid.uuid4()
        captured.update(fields)
        return work_order

    with patch.object(EntityStore, "create", fake_create):
        response = await _request(
            "POST", "/api/v1/work-orders", make_mock_session(),
            json={
                "title": "Fuser jam",
                "type": "repair",
                "priority": "high",
                "consumable_parts": [{"name": "Fuser unit", "quantity": 1, "cost": "180.00"}],
            },
        )

    assert response.status_code == 201
    assert captured["status"] == "open"
    assert len(work_order.consumable_parts) == 1
    assert isinstance(work_order.consumable_parts[0], ConsumablePart)


# ─── Contract templates ───────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_create_template_sets_folder_version_and_json_fields():
    captured = {}

    async def fake_create(self, fields, build=None):
        template = ContractTemplate(id="TMP003", created_at=NOW, updated_at=NOW, **fields)
        build(template)
        captured["template"] = template
        return template

    with patch.object(EntityStore, "create", fake_create):
        response = await _request(
            "POST", "/api/v1/contracts/templates", make_mock_session(),
            json={"name": "Standard lease", "tags": ["lease", "copier"], "elements": [{"type": "text"}]},
        )

    assert response.status_code == 201
    data = response.json()
    assert data["folder_path"] == "templates/TMP003"
    assert data["version"] == "1.0"
    assert data["author"] == "System"
    assert data["tags"] == ["lease", "copier"]
    assert captured["template"].tags == '["lease", "copier"]'


# ─── Reports ──────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_generate_report_names_report_from_type():
    captured = {}

    async def fake_create(self, fields, build=None):
        captured.update(fields)
        return Report(id="RPT004", file_size="0 KB", created_at=NOW, **fields)

    with patch.object(EntityStore, "create", fake_create):
        response = await _request(
            "POST", "/api/v1/reports/generate", make_mock_session(),
            json={"type": "Work Order Reports"},
        )

    assert response.status_code == 201
    assert response.json()["name"] == "Work Order Analytics Report"
    assert captured["generated_by"] == "System"


@pytest.mark.asyncio
async def test_generate_report_unknown_type_uses_fallback_name():
    async def fake_create(self, fields, build=None):
        return Report(id="RPT005", file_size="0 KB", created_at=NOW, **fields)

    with patch.object(EntityStore, "create", fake_create):
        response = await _request(
            "POST", "/api/v1/reports/generate", make_mock_session(),
            json={"type": "Toner Usage"},
        )

    assert response.json()["name"] == "Toner Usage Report"


@pytest.mark.asyncio
async def test_delete_report_is_hard_delete():
    report = Report(id="RPT001", name="Summary", type="Customer Reports", created_at=NOW)
    mock_session = make_mock_session(row=report)

    response = await _request("DELETE", "/api/v1/reports/RPT001", mock_session)

    assert response.status_code == 204
    mock_session.delete.assert_awaited_once_with(report)


# ─── Users ────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_create_user_hashes_password_and_hides_it():
    from app.models.user import User

    captured = {}

    async def fake_create(self, fields, build=None):
        captured.update(fields)
        return User(id="USR002", status="active", created_at=NOW, updated_at=NOW, **{
            k: v for k, v in fields.items() if k != "status"
        })

    with patch.object(EntityStore, "create", fake_create), \
            patch("app.api.v1.users.hash_password", return_value="hashed-pw"):
        response = await _request(
            "POST", "/api/v1/users", make_mock_session(),
            json={"name": "Tess", "email": "Tess@Acme.com", "password": "s3cretpass", "role": "technician"},
        )

    assert response.status_code == 201
    assert captured["password_hash"] == "hashed-pw"
    assert captured["email"] == "tess@acme.com"
    assert "password" not in captured
    assert "password_hash" not in response.json()


@pytest.mark.asyncio
async def test_create_user_rejects_unknown_role():
    response = await _request(
        "POST", "/api/v1/users", make_mock_session(),
        json={"name": "Tess", "email": "tess@acme.com", "password": "s3cretpass", "role": "janitor"},
    )
    assert response.status_code == 422


# ─── Activity logs ────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_activity_logs_decode_metadata():
    from app.models.activity_log import ActivityLog

    entry = ActivityLog(
        id=uuid.uuid4(), user_id=None, user_name="System", action="IMPORT", module="customers",
        entity_type="customers", description="Imported 2 customers processed",
        metadata_json='{"created": 2, "errors": 0}', created_at=NOW,
    )
    response = await _request("GET", "/api/v1/activity-logs", make_mock_session(rows=[entry]), params={"limit": 5})

    assert response.status_code == 200
    data = response.json()
    assert data[0]["metadata"] == {"created": 2, "errors": 0}
    assert data[0]["action"] == "IMPORT"
