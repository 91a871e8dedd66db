"""CSV bulk import endpoint shared by every importable entity."""
import enum
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import get_optional_user
from app.db.session import get_session
from app.schemas.imports import ImportResponse
from app.services.activity import log_activity
from app.services.csv_import import (
    ImportValidationError,
    MalformedInputError,
    decode_upload,
    run_import,
)
from app.services.import_specs import IMPORT_SPECS

logger = logging.getLogger(__name__)

router = APIRouter()


class ImportEntity(str, enum.Enum):
    customers = "customers"
    assets = "assets"
    users = "users"
    work_orders = "work-orders"
    maintenance = "maintenance"


def _failure(status_code: int, message: str, errors: list[str]) -> JSONResponse:
    body = ImportResponse(success=False, message=message, errors=errors)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude={"created"}))


# ─── POST /{entity}/import ───

@router.post(
    "/{entity}/import",
    response_model=ImportResponse,
    summary="Bulk create-or-update records from a CSV upload",
    responses={400: {"model": ImportResponse}, 500: {"model": ImportResponse}},
)
async def import_csv(
    entity: ImportEntity,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
    file: UploadFile | None = File(default=None),
):
    if file is None:
        return _failure(status.HTTP_400_BAD_REQUEST, "No file provided", [])

    spec = IMPORT_SPECS[entity.value]
    try:
        text = decode_upload(await file.read())
        outcome = await run_import(db, spec, text)
    except MalformedInputError as exc:
        return _failure(status.HTTP_400_BAD_REQUEST, "Validation failed", [str(exc)])
    except ImportValidationError as exc:
        return _failure(status.HTTP_400_BAD_REQUEST, "Validation failed", exc.errors)
    except Exception as exc:
        logger.error("Import of %s failed: %s", entity.value, exc, exc_info=True)
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Import failed", [str(exc)])

    message = f"{outcome.created} {spec.entity_plural} processed"
    await log_activity(
        db, "IMPORT", entity.value, spec.model.__tablename__,
        description=f"Imported {message} from {file.filename or 'upload'}",
        actor=current_user, request=request,
        metadata={"created": outcome.created, "errors": len(outcome.errors)},
    )
    return ImportResponse(success=True, message=message, created=outcome.created, errors=outcome.errors)
