"""Work order API endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import get_optional_user
from app.db.session import get_session
from app.models.work_order import ConsumablePart, WorkOrder
from app.schemas.work_order import WorkOrderCreate, WorkOrderOut, WorkOrderUpdate
from app.services.activity import log_activity
from app.services.entity_store import DuplicateIdentifierError, EntityStore

router = APIRouter()


def _store(db: AsyncSession) -> EntityStore:
    return EntityStore(db, WorkOrder, WorkOrder.ID_PREFIX)


async def _get_or_404(store: EntityStore, work_order_id: str) -> WorkOrder:
    work_order = await store.get(work_order_id)
    if work_order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Work order not found.")
    return work_order


@router.get("", response_model=list[WorkOrderOut], summary="List work orders, newest first")
async def list_work_orders(
    db: Annotated[AsyncSession, Depends(get_session)],
    include_deleted: bool = Query(default=False),
    asset_id: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    priority: str | None = Query(default=None),
):
    filters = []
    if asset_id:
        filters.append(WorkOrder.asset_id == asset_id)
    if status_filter:
        filters.append(WorkOrder.status == status_filter)
    if priority:
        filters.append(WorkOrder.priority == priority)
    return await _store(db).list(include_deleted=include_deleted, filters=filters)


@router.get("/{work_order_id}", response_model=WorkOrderOut, summary="Get work order with consumable parts")
async def get_work_order(
    work_order_id: str,
    db: Annotated[AsyncSession, Depends(get_session)],
):
    return await _get_or_404(_store(db), work_order_id)


@router.post(
    "",
    response_model=WorkOrderOut,
    status_code=status.HTTP_201_CREATED,
    summary="Open a work order with the next WO identifier",
)
async def create_work_order(
    body: WorkOrderCreate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    fields = body.model_dump(exclude={"consumable_parts"})
    if not fields.get("requested_by") and current_user is not None:
        fields["requested_by"] = current_user.name

    def attach_parts(work_order: WorkOrder) -> None:
        work_order.consumable_parts = [ConsumablePart(**p.model_dump()) for p in body.consumable_parts]

    try:
        work_order = await _store(db).create(fields, build=attach_parts)
    except DuplicateIdentifierError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except IntegrityError:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Unknown asset_id.")

    payload = WorkOrderOut.model_validate(work_order)
    await log_activity(
        db, "CREATE", "work-orders", "work_order",
        description=f"Opened work order {work_order.title}",
        entity_id=work_order.id, entity_name=work_order.title,
        actor=current_user, request=request,
        metadata={"priority": work_order.priority, "asset_id": work_order.asset_id},
    )
    return payload


@router.put("/{work_order_id}", response_model=WorkOrderOut, summary="Update work order fields")
async def update_work_order(
    work_order_id: str,
    body: WorkOrderUpdate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    store = _store(db)
    work_order = await _get_or_404(store, work_order_id)

    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update.")
    previous_status = work_order.status

    work_order = await store.update(work_order, updates)
    description = f"Updated work order {work_order.title}"
    if work_order.status != previous_status:
        description = f"Work order {work_order.title} moved from {previous_status} to {work_order.status}"
    payload = WorkOrderOut.model_validate(work_order)
    await log_activity(
        db, "UPDATE", "work-orders", "work_order",
        description=description,
        entity_id=work_order.id, entity_name=work_order.title,
        actor=current_user, request=request, metadata={"fields": sorted(updates)},
    )
    return payload


@router.delete("/{work_order_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Soft-delete a work order")
async def delete_work_order(
    work_order_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    store = _store(db)
    work_order = await _get_or_404(store, work_order_id)
    await store.delete(work_order)
    await log_activity(
        db, "DELETE", "work-orders", "work_order",
        description=f"Deleted work order {work_order.title}",
        entity_id=work_order.id, entity_name=work_order.title,
        actor=current_user, request=request,
    )
