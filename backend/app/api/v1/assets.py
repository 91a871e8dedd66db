"""Asset API endpoints. Serial numbers are unique across all assets."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import get_optional_user
from app.db.session import get_session
from app.models.asset import Asset
from app.schemas.asset import AssetCreate, AssetOut, AssetUpdate
from app.services.activity import log_activity
from app.services.entity_store import DuplicateIdentifierError, EntityStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _store(db: AsyncSession) -> EntityStore:
    return EntityStore(db, Asset, Asset.ID_PREFIX)


def _display_name(asset: Asset) -> str:
    return asset.name or " ".join(p for p in (asset.make, asset.model) if p) or asset.id


async def _get_or_404(store: EntityStore, asset_id: str) -> Asset:
    asset = await store.get(asset_id)
    if asset is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset not found.")
    return asset


async def _ensure_serial_free(db: AsyncSession, serial_number: str, exclude_id: str | None = None) -> None:
    stmt = select(Asset.id).where(Asset.serial_number == serial_number)
    if exclude_id is not None:
        stmt = stmt.where(Asset.id != exclude_id)
    if (await db.execute(stmt)).first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"An asset with serial number '{serial_number}' already exists.",
        )


# ─── List / detail ───

@router.get("", response_model=list[AssetOut], summary="List assets, newest first")
async def list_assets(
    db: Annotated[AsyncSession, Depends(get_session)],
    include_deleted: bool = Query(default=False),
    customer_id: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
):
    filters = []
    if customer_id:
        filters.append(Asset.customer_id == customer_id)
    if status_filter:
        filters.append(Asset.status == status_filter)
    return await _store(db).list(include_deleted=include_deleted, filters=filters)


@router.get("/{asset_id}", response_model=AssetOut, summary="Get asset by ID")
async def get_asset(
    asset_id: str,
    db: Annotated[AsyncSession, Depends(get_session)],
):
    return await _get_or_404(_store(db), asset_id)


# ─── Create ───

@router.post(
    "",
    response_model=AssetOut,
    status_code=status.HTTP_201_CREATED,
    summary="Register an asset with the next AST identifier",
)
async def create_asset(
    body: AssetCreate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    await _ensure_serial_free(db, body.serial_number)

    fields = body.model_dump()
    fields["name"] = fields["name"] or f"{body.make} {body.model}"
    try:
        asset = await _store(db).create(fields)
    except DuplicateIdentifierError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except IntegrityError:
        # Lost a race on the serial number after the pre-check
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"An asset with serial number '{body.serial_number}' already exists.",
        )

    payload = AssetOut.model_validate(asset)
    await log_activity(
        db, "CREATE", "assets", "asset",
        description=f"Registered asset {_display_name(asset)}",
        entity_id=asset.id, entity_name=_display_name(asset),
        actor=current_user, request=request,
        metadata={"serial_number": asset.serial_number, "customer_id": asset.customer_id},
    )
    return payload


# ─── Update ───

@router.put("/{asset_id}", response_model=AssetOut, summary="Update asset fields")
async def update_asset(
    asset_id: str,
    body: AssetUpdate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    store = _store(db)
    asset = await _get_or_404(store, asset_id)

    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update.")
    if updates.get("serial_number") and updates["serial_number"] != asset.serial_number:
        await _ensure_serial_free(db, updates["serial_number"], exclude_id=asset.id)

    try:
        asset = await store.update(asset, updates)
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"An asset with serial number '{updates.get('serial_number')}' already exists.",
        )

    payload = AssetOut.model_validate(asset)
    await log_activity(
        db, "UPDATE", "assets", "asset",
        description=f"Updated asset {_display_name(asset)}",
        entity_id=asset.id, entity_name=_display_name(asset),
        actor=current_user, request=request, metadata={"fields": sorted(updates)},
    )
    return payload


# ─── Delete ───

@router.delete("/{asset_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Soft-delete an asset")
async def delete_asset(
    asset_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    store = _store(db)
    asset = await _get_or_404(store, asset_id)
    await store.delete(asset)
    await log_activity(
        db, "DELETE", "assets", "asset",
        description=f"Deleted asset {_display_name(asset)}",
        entity_id=asset.id, entity_name=_display_name(asset),
        actor=current_user, request=request,
    )
