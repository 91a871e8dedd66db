"""Customer API endpoints."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import get_optional_user
from app.db.session import get_session
from app.models.customer import Customer
from app.schemas.customer import CustomerCreate, CustomerOut, CustomerUpdate
from app.services.activity import log_activity
from app.services.entity_store import DuplicateIdentifierError, EntityStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _store(db: AsyncSession) -> EntityStore:
    return EntityStore(db, Customer, Customer.ID_PREFIX)


async def _get_or_404(store: EntityStore, customer_id: str) -> Customer:
    customer = await store.get(customer_id)
    if customer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found.")
    return customer


# ─── List / detail ───

@router.get("", response_model=list[CustomerOut], summary="List customers, newest first")
async def list_customers(
    db: Annotated[AsyncSession, Depends(get_session)],
    include_deleted: bool = Query(default=False),
    status_filter: str | None = Query(default=None, alias="status"),
):
    filters = [Customer.status == status_filter] if status_filter else []
    return await _store(db).list(include_deleted=include_deleted, filters=filters)


@router.get("/{customer_id}", response_model=CustomerOut, summary="Get customer by ID")
async def get_customer(
    customer_id: str,
    db: Annotated[AsyncSession, Depends(get_session)],
):
    return await _get_or_404(_store(db), customer_id)


# ─── Create ───

@router.post(
    "",
    response_model=CustomerOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a customer with the next CUST identifier",
)
async def create_customer(
    body: CustomerCreate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    try:
        customer = await _store(db).create(body.model_dump())
    except DuplicateIdentifierError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))

    # Snapshot before the activity write, which may roll back the session
    payload = CustomerOut.model_validate(customer)
    await log_activity(
        db, "CREATE", "customers", "customer",
        description=f"Created customer {customer.name}",
        entity_id=customer.id, entity_name=customer.name,
        actor=current_user, request=request,
    )
    return payload


# ─── Update ───

@router.put("/{customer_id}", response_model=CustomerOut, summary="Update customer fields")
async def update_customer(
    customer_id: str,
    body: CustomerUpdate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    store = _store(db)
    customer = await _get_or_404(store, customer_id)

    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update.")

    customer = await store.update(customer, updates)
    payload = CustomerOut.model_validate(customer)
    await log_activity(
        db, "UPDATE", "customers", "customer",
        description=f"Updated customer {customer.name}",
        entity_id=customer.id, entity_name=customer.name,
        actor=current_user, request=request, metadata={"fields": sorted(updates)},
    )
    return payload


# ─── Delete ───

@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Soft-delete a customer")
async def delete_customer(
    customer_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    store = _store(db)
    customer = await _get_or_404(store, customer_id)
    await store.delete(customer)
    await log_activity(
        db, "DELETE", "customers", "customer",
        description=f"Deleted customer {customer.name}",
        entity_id=customer.id, entity_name=customer.name,
        actor=current_user, request=request,
    )
