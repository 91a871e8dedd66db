"""Lease API endpoints. Payment schedule lines are created inline with the lease."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import get_optional_user
from app.db.session import get_session
from app.models.lease import Lease, LeasePayment
from app.schemas.lease import LeaseCreate, LeaseOut, LeaseUpdate
from app.services.activity import log_activity
from app.services.entity_store import DuplicateIdentifierError, EntityStore

router = APIRouter()


def _store(db: AsyncSession) -> EntityStore:
    return EntityStore(db, Lease, Lease.ID_PREFIX)


async def _get_or_404(store: EntityStore, lease_id: str) -> Lease:
    lease = await store.get(lease_id)
    if lease is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lease not found.")
    return lease


@router.get("", response_model=list[LeaseOut], summary="List leases, newest first")
async def list_leases(
    db: Annotated[AsyncSession, Depends(get_session)],
    include_deleted: bool = Query(default=False),
    customer_id: str | None = Query(default=None),
):
    filters = [Lease.customer_id == customer_id] if customer_id else []
    return await _store(db).list(include_deleted=include_deleted, filters=filters)


@router.get("/{lease_id}", response_model=LeaseOut, summary="Get lease with payment schedule")
async def get_lease(
    lease_id: str,
    db: Annotated[AsyncSession, Depends(get_session)],
):
    return await _get_or_404(_store(db), lease_id)


@router.post(
    "",
    response_model=LeaseOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a lease with the next LSE identifier",
)
async def create_lease(
    body: LeaseCreate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    if body.end_date < body.start_date:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="end_date must not be before start_date.",
        )

    fields = body.model_dump(exclude={"payments"})

    def attach_payments(lease: Lease) -> None:
        lease.payments = [LeasePayment(**p.model_dump()) for p in body.payments]

    try:
        lease = await _store(db).create(fields, build=attach_payments)
    except DuplicateIdentifierError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except IntegrityError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Unknown customer_id or asset_id.",
        )

    payload = LeaseOut.model_validate(lease)
    await log_activity(
        db, "CREATE", "leases", "lease",
        description=f"Created lease {lease.id} for customer {lease.customer_id}",
        entity_id=lease.id, entity_name=lease.id,
        actor=current_user, request=request,
        metadata={"monthly_payment": lease.monthly_payment, "payments": len(body.payments)},
    )
    return payload


@router.put("/{lease_id}", response_model=LeaseOut, summary="Update lease fields")
async def update_lease(
    lease_id: str,
    body: LeaseUpdate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    store = _store(db)
    lease = await _get_or_404(store, lease_id)

    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update.")

    lease = await store.update(lease, updates)
    payload = LeaseOut.model_validate(lease)
    await log_activity(
        db, "UPDATE", "leases", "lease",
        description=f"Updated lease {lease.id}",
        entity_id=lease.id, entity_name=lease.id,
        actor=current_user, request=request, metadata={"fields": sorted(updates)},
    )
    return payload


@router.delete("/{lease_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Soft-delete a lease")
async def delete_lease(
    lease_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    store = _store(db)
    lease = await _get_or_404(store, lease_id)
    await store.delete(lease)
    await log_activity(
        db, "DELETE", "leases", "lease",
        description=f"Deleted lease {lease.id}",
        entity_id=lease.id, entity_name=lease.id,
        actor=current_user, request=request,
    )
