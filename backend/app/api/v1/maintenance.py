"""Maintenance schedule API endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import get_optional_user
from app.db.session import get_session
from app.models.maintenance import MaintenancePart, MaintenanceSchedule
from app.schemas.maintenance import MaintenanceCreate, MaintenanceOut, MaintenanceUpdate
from app.services.activity import log_activity
from app.services.entity_store import DuplicateIdentifierError, EntityStore

router = APIRouter()


def _store(db: AsyncSession) -> EntityStore:
    return EntityStore(db, MaintenanceSchedule, MaintenanceSchedule.ID_PREFIX)


async def _get_or_404(store: EntityStore, schedule_id: str) -> MaintenanceSchedule:
    schedule = await store.get(schedule_id)
    if schedule is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Maintenance schedule not found.")
    return schedule


@router.get("", response_model=list[MaintenanceOut], summary="List maintenance schedules, newest first")
async def list_schedules(
    db: Annotated[AsyncSession, Depends(get_session)],
    include_deleted: bool = Query(default=False),
    asset_id: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
):
    filters = []
    if asset_id:
        filters.append(MaintenanceSchedule.asset_id == asset_id)
    if status_filter:
        filters.append(MaintenanceSchedule.status == status_filter)
    return await _store(db).list(include_deleted=include_deleted, filters=filters)


@router.get("/{schedule_id}", response_model=MaintenanceOut, summary="Get maintenance schedule with parts")
async def get_schedule(
    schedule_id: str,
    db: Annotated[AsyncSession, Depends(get_session)],
):
    return await _get_or_404(_store(db), schedule_id)


@router.post(
    "",
    response_model=MaintenanceOut,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule maintenance with the next MT identifier",
)
async def create_schedule(
    body: MaintenanceCreate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    fields = body.model_dump(exclude={"parts"})

    def attach_parts(schedule: MaintenanceSchedule) -> None:
        schedule.parts = [MaintenancePart(**p.model_dump()) for p in body.parts]

    try:
        schedule = await _store(db).create(fields, build=attach_parts)
    except DuplicateIdentifierError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except IntegrityError:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Unknown asset_id.")

    payload = MaintenanceOut.model_validate(schedule)
    await log_activity(
        db, "CREATE", "maintenance", "maintenance_schedule",
        description=f"Scheduled maintenance {schedule.title}",
        entity_id=schedule.id, entity_name=schedule.title,
        actor=current_user, request=request,
        metadata={"asset_id": schedule.asset_id, "parts": len(body.parts)},
    )
    return payload


@router.put("/{schedule_id}", response_model=MaintenanceOut, summary="Update maintenance schedule fields")
async def update_schedule(
    schedule_id: str,
    body: MaintenanceUpdate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    store = _store(db)
    schedule = await _get_or_404(store, schedule_id)

    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update.")

    schedule = await store.update(schedule, updates)
    payload = MaintenanceOut.model_validate(schedule)
    await log_activity(
        db, "UPDATE", "maintenance", "maintenance_schedule",
        description=f"Updated maintenance {schedule.title}",
        entity_id=schedule.id, entity_name=schedule.title,
        actor=current_user, request=request, metadata={"fields": sorted(updates)},
    )
    return payload


@router.delete("/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Soft-delete a maintenance schedule")
async def delete_schedule(
    schedule_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    store = _store(db)
    schedule = await _get_or_404(store, schedule_id)
    await store.delete(schedule)
    await log_activity(
        db, "DELETE", "maintenance", "maintenance_schedule",
        description=f"Deleted maintenance {schedule.title}",
        entity_id=schedule.id, entity_name=schedule.title,
        actor=current_user, request=request,
    )
