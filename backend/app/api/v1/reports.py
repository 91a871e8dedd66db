"""Report API endpoints. Reports are hard-deleted; their identifiers are still never reused."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import get_optional_user
from app.db.session import get_session
from app.models.report import REPORT_NAMES, Report
from app.schemas.report import ReportCreate, ReportGenerateRequest, ReportOut, ReportUpdate
from app.services.activity import log_activity
from app.services.entity_store import DuplicateIdentifierError, EntityStore

router = APIRouter()


def _store(db: AsyncSession) -> EntityStore:
    return EntityStore(db, Report, Report.ID_PREFIX)


async def _get_or_404(store: EntityStore, report_id: str) -> Report:
    report = await store.get(report_id)
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found.")
    return report


async def _create(store: EntityStore, fields: dict) -> Report:
    try:
        return await store.create(fields)
    except DuplicateIdentifierError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.get("", response_model=list[ReportOut], summary="List reports, newest first")
async def list_reports(db: Annotated[AsyncSession, Depends(get_session)]):
    return await _store(db).list()


@router.get("/{report_id}", response_model=ReportOut, summary="Get report by ID")
async def get_report(
    report_id: str,
    db: Annotated[AsyncSession, Depends(get_session)],
):
    return await _get_or_404(_store(db), report_id)


@router.post(
    "/generate",
    response_model=ReportOut,
    status_code=status.HTTP_201_CREATED,
    summary="Generate a report of the given type",
)
async def generate_report(
    body: ReportGenerateRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    name = REPORT_NAMES.get(body.type, f"{body.type} Report")
    report = await _create(_store(db), {
        "name": name,
        "type": body.type,
        "format": body.format,
        "status": "completed",
        "generated_by": getattr(current_user, "name", None) or "System",
    })
    payload = ReportOut.model_validate(report)
    await log_activity(
        db, "GENERATE", "reports", "report",
        description=f"Generated {name}",
        entity_id=report.id, entity_name=name,
        actor=current_user, request=request, metadata={"type": body.type, "format": body.format},
    )
    return payload


@router.post(
    "",
    response_model=ReportOut,
    status_code=status.HTTP_201_CREATED,
    summary="Record a report with the next RPT identifier",
)
async def create_report(
    body: ReportCreate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    fields = body.model_dump()
    fields["generated_by"] = body.generated_by or getattr(current_user, "name", None) or "System"
    report = await _create(_store(db), fields)
    payload = ReportOut.model_validate(report)
    await log_activity(
        db, "CREATE", "reports", "report",
        description=f"Created report {report.name}",
        entity_id=report.id, entity_name=report.name,
        actor=current_user, request=request,
    )
    return payload


@router.put("/{report_id}", response_model=ReportOut, summary="Update report fields")
async def update_report(
    report_id: str,
    body: ReportUpdate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    store = _store(db)
    report = await _get_or_404(store, report_id)

    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update.")

    report = await store.update(report, updates)
    payload = ReportOut.model_validate(report)
    await log_activity(
        db, "UPDATE", "reports", "report",
        description=f"Updated report {report.name}",
        entity_id=report.id, entity_name=report.name,
        actor=current_user, request=request, metadata={"fields": sorted(updates)},
    )
    return payload


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a report")
async def delete_report(
    report_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    store = _store(db)
    report = await _get_or_404(store, report_id)
    await store.delete(report)
    await log_activity(
        db, "DELETE", "reports", "report",
        description=f"Deleted report {report.name}",
        entity_id=report.id, entity_name=report.name,
        actor=current_user, request=request,
    )
