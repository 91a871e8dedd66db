"""Per-entity CSV import configuration.

CSV headers use the camelCase names the UI exports (``customerId``,
``serialNumber``); each ``row_to_record`` maps them onto model attributes,
turning blanks into None and applying the same defaults as the create routes.
"""
from app.core.config import settings
from app.core.security import hash_password
from app.models.asset import Asset
from app.models.customer import Customer
from app.models.maintenance import MaintenanceSchedule
from app.models.user import User
from app.models.work_order import WorkOrder
from app.services.csv_import import (
    ImportSpec,
    blank_to_none,
    parse_date,
    parse_decimal,
    parse_int,
)


def _customer_record(row: dict[str, str]) -> dict:
    return {
        "name": row["name"],
        "email": row["email"],
        "phone": blank_to_none(row.get("phone")),
        "address": blank_to_none(row.get("address")),
        "city": blank_to_none(row.get("city")),
        "state": blank_to_none(row.get("state")),
        "zip_code": blank_to_none(row.get("zipCode")),
        "country": blank_to_none(row.get("country")),
        "industry": blank_to_none(row.get("industry")),
        "contact_person": blank_to_none(row.get("contactPerson")),
        "contract_start_date": parse_date(row.get("contractStartDate")),
        "contract_end_date": parse_date(row.get("contractEndDate")),
        "monthly_amount": parse_decimal(row.get("monthlyAmount")),
        "status": (blank_to_none(row.get("status")) or "active").lower(),
    }


def _asset_record(row: dict[str, str]) -> dict:
    return {
        "name": row["name"],
        "customer_id": row["customerId"],
        "description": blank_to_none(row.get("description")),
        "serial_number": blank_to_none(row.get("serialNumber")),
        "make": blank_to_none(row.get("make")),
        "model": blank_to_none(row.get("model")),
        "manufacturer": blank_to_none(row.get("manufacturer")),
        "category": blank_to_none(row.get("category")),
        "location": blank_to_none(row.get("location")),
        "purchase_date": parse_date(row.get("purchaseDate")),
        "purchase_price": parse_decimal(row.get("purchasePrice")),
        "current_value": parse_decimal(row.get("currentValue")),
        "warranty_start": parse_date(row.get("warrantyStart")),
        "warranty_end": parse_date(row.get("warrantyEnd") or row.get("warrantyExpiry")),
        "status": (blank_to_none(row.get("status")) or "operational").lower(),
    }


def _user_record(row: dict[str, str]) -> dict:
    return {
        "name": row["name"],
        "email": row["email"].lower(),
        "role": row["role"].lower(),
        "phone": blank_to_none(row.get("phone")),
        "department": blank_to_none(row.get("department")),
        "status": (blank_to_none(row.get("status")) or "active").lower(),
    }


def _user_defaults() -> dict:
    return {"password_hash": hash_password(settings.IMPORT_DEFAULT_PASSWORD)}


def _work_order_record(row: dict[str, str]) -> dict:
    return {
        "title": row["title"],
        "asset_id": row["assetId"],
        "description": blank_to_none(row.get("description")),
        "priority": (blank_to_none(row.get("priority")) or "medium").lower(),
        "status": (blank_to_none(row.get("status")) or "open").lower(),
        "assigned_to": blank_to_none(row.get("assignedTo")),
        "requested_by": blank_to_none(row.get("requestedBy")),
        "scheduled_date": parse_date(row.get("scheduledDate")),
        "due_date": parse_date(row.get("dueDate")),
        "completed_date": parse_date(row.get("completedDate")),
        "estimated_cost": parse_decimal(row.get("estimatedCost")),
    }


def _maintenance_record(row: dict[str, str]) -> dict:
    return {
        "title": row["title"],
        "asset_id": row["assetId"],
        "description": blank_to_none(row.get("description")),
        "scheduled_date": parse_date(row.get("scheduledDate")),
        "completed_date": parse_date(row.get("completedDate")),
        "frequency": blank_to_none(row.get("frequency")),
        "priority": (blank_to_none(row.get("priority")) or "medium").lower(),
        "assigned_to": blank_to_none(row.get("assignedTo")),
        "status": (blank_to_none(row.get("status")) or "scheduled").lower(),
        "estimated_duration": parse_int(row.get("estimatedDuration")),
    }


IMPORT_SPECS: dict[str, ImportSpec] = {
    "customers": ImportSpec(
        entity_kind="customers",
        entity_label="Customer",
        entity_plural="customers",
        model=Customer,
        prefix=Customer.ID_PREFIX,
        required_fields=("id", "name", "email"),
        row_to_record=_customer_record,
    ),
    "assets": ImportSpec(
        entity_kind="assets",
        entity_label="Asset",
        entity_plural="assets",
        model=Asset,
        prefix=Asset.ID_PREFIX,
        required_fields=("id", "name", "customerId"),
        row_to_record=_asset_record,
    ),
    "users": ImportSpec(
        entity_kind="users",
        entity_label="User",
        entity_plural="users",
        model=User,
        prefix=User.ID_PREFIX,
        required_fields=("id", "name", "email", "role"),
        row_to_record=_user_record,
        create_defaults=_user_defaults,
    ),
    "work-orders": ImportSpec(
        entity_kind="work-orders",
        entity_label="Work Order",
        entity_plural="work orders",
        model=WorkOrder,
        prefix=WorkOrder.ID_PREFIX,
        required_fields=("id", "title", "assetId"),
        row_to_record=_work_order_record,
    ),
    "maintenance": ImportSpec(
        entity_kind="maintenance",
        entity_label="Maintenance",
        entity_plural="maintenance items",
        model=MaintenanceSchedule,
        prefix=MaintenanceSchedule.ID_PREFIX,
        required_fields=("id", "title", "assetId"),
        row_to_record=_maintenance_record,
    ),
}
