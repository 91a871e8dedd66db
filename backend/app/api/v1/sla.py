"""SLA agreement API endpoints."""
import json
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import get_optional_user
from app.db.session import get_session
from app.models.customer import Customer
from app.models.sla import SlaAgreement
from app.schemas.sla import SlaAgreementCreate, SlaAgreementOut, SlaAgreementUpdate
from app.services.activity import log_activity
from app.services.entity_store import DuplicateIdentifierError, EntityStore

router = APIRouter()


def _store(db: AsyncSession) -> EntityStore:
    return EntityStore(db, SlaAgreement, SlaAgreement.ID_PREFIX)


async def _get_or_404(store: EntityStore, sla_id: str) -> SlaAgreement:
    agreement = await store.get(sla_id)
    if agreement is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="SLA agreement not found.")
    return agreement


async def _customer_name(db: AsyncSession, customer_id: str) -> str | None:
    result = await db.execute(select(Customer.name).where(Customer.id == customer_id))
    return result.scalar_one_or_none()


@router.get("", response_model=list[SlaAgreementOut], summary="List SLA agreements, newest first")
async def list_agreements(
    db: Annotated[AsyncSession, Depends(get_session)],
    include_deleted: bool = Query(default=False),
    customer_id: str | None = Query(default=None),
):
    filters = [SlaAgreement.customer_id == customer_id] if customer_id else []
    return await _store(db).list(include_deleted=include_deleted, filters=filters)


@router.get("/{sla_id}", response_model=SlaAgreementOut, summary="Get SLA agreement by ID")
async def get_agreement(
    sla_id: str,
    db: Annotated[AsyncSession, Depends(get_session)],
):
    return await _get_or_404(_store(db), sla_id)


@router.post(
    "",
    response_model=SlaAgreementOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create an SLA agreement with the next SLA identifier",
)
async def create_agreement(
    body: SlaAgreementCreate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    fields = body.model_dump()
    fields["terms"] = json.dumps(fields["terms"])
    if body.customer_id and not body.customer_name:
        fields["customer_name"] = await _customer_name(db, body.customer_id)

    def place_in_folder(agreement: SlaAgreement) -> None:
        agreement.folder_path = f"sla-agreements/{agreement.id}"

    try:
        agreement = await _store(db).create(fields, build=place_in_folder)
    except DuplicateIdentifierError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except IntegrityError:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Unknown customer_id.")

    payload = SlaAgreementOut.model_validate(agreement)
    await log_activity(
        db, "CREATE", "sla", "sla_agreement",
        description=f"Created SLA agreement {agreement.name}",
        entity_id=agreement.id, entity_name=agreement.name,
        actor=current_user, request=request,
        metadata={"service_level": agreement.service_level, "customer_id": agreement.customer_id},
    )
    return payload


@router.put("/{sla_id}", response_model=SlaAgreementOut, summary="Update SLA agreement fields")
async def update_agreement(
    sla_id: str,
    body: SlaAgreementUpdate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    store = _store(db)
    agreement = await _get_or_404(store, sla_id)

    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update.")

    fields = dict(updates)
    if fields.get("terms") is not None:
        fields["terms"] = json.dumps(fields["terms"])
    agreement = await store.update(agreement, fields)
    payload = SlaAgreementOut.model_validate(agreement)
    await log_activity(
        db, "UPDATE", "sla", "sla_agreement",
        description=f"Updated SLA agreement {agreement.name}",
        entity_id=agreement.id, entity_name=agreement.name,
        actor=current_user, request=request, metadata={"fields": sorted(updates)},
    )
    return payload


@router.delete("/{sla_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Soft-delete an SLA agreement")
async def delete_agreement(
    sla_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    store = _store(db)
    agreement = await _get_or_404(store, sla_id)
    await store.delete(agreement)
    await log_activity(
        db, "DELETE", "sla", "sla_agreement",
        description=f"Deleted SLA agreement {agreement.name}",
        entity_id=agreement.id, entity_name=agreement.name,
        actor=current_user, request=request,
    )
