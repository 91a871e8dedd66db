"""Contract template API endpoints."""
import json
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import get_optional_user
from app.db.session import get_session
from app.models.contract_template import ContractTemplate
from app.schemas.contract_template import (
    ContractTemplateCreate,
    ContractTemplateOut,
    ContractTemplateUpdate,
)
from app.services.activity import log_activity
from app.services.entity_store import DuplicateIdentifierError, EntityStore

router = APIRouter()

_JSON_FIELDS = ("tags", "elements")


def _store(db: AsyncSession) -> EntityStore:
    return EntityStore(db, ContractTemplate, ContractTemplate.ID_PREFIX)


def _encode_json_fields(fields: dict) -> dict:
    for name in _JSON_FIELDS:
        if name in fields and fields[name] is not None:
            fields[name] = json.dumps(fields[name])
    return fields


async def _get_or_404(store: EntityStore, template_id: str) -> ContractTemplate:
    template = await store.get(template_id)
    if template is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found.")
    return template


@router.get("", response_model=list[ContractTemplateOut], summary="List contract templates, newest first")
async def list_templates(
    db: Annotated[AsyncSession, Depends(get_session)],
    include_deleted: bool = Query(default=False),
):
    return await _store(db).list(include_deleted=include_deleted)


@router.get("/{template_id}", response_model=ContractTemplateOut, summary="Get contract template by ID")
async def get_template(
    template_id: str,
    db: Annotated[AsyncSession, Depends(get_session)],
):
    return await _get_or_404(_store(db), template_id)


@router.post(
    "",
    response_model=ContractTemplateOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a contract template with the next TMP identifier",
)
async def create_template(
    body: ContractTemplateCreate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    fields = _encode_json_fields(body.model_dump())
    fields["author"] = body.author or getattr(current_user, "name", None) or "System"
    fields["version"] = "1.0"

    def place_in_folder(template: ContractTemplate) -> None:
        template.folder_path = f"templates/{template.id}"

    try:
        template = await _store(db).create(fields, build=place_in_folder)
    except DuplicateIdentifierError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))

    payload = ContractTemplateOut.model_validate(template)
    await log_activity(
        db, "CREATE", "templates", "contract_template",
        description=f"Created template {template.name}",
        entity_id=template.id, entity_name=template.name,
        actor=current_user, request=request, metadata={"type": template.type},
    )
    return payload


@router.put("/{template_id}", response_model=ContractTemplateOut, summary="Update contract template fields")
async def update_template(
    template_id: str,
    body: ContractTemplateUpdate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    store = _store(db)
    template = await _get_or_404(store, template_id)

    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update.")

    template = await store.update(template, _encode_json_fields(dict(updates)))
    payload = ContractTemplateOut.model_validate(template)
    await log_activity(
        db, "UPDATE", "templates", "contract_template",
        description=f"Updated template {template.name}",
        entity_id=template.id, entity_name=template.name,
        actor=current_user, request=request, metadata={"fields": sorted(updates)},
    )
    return payload


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Soft-delete a contract template")
async def delete_template(
    template_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    store = _store(db)
    template = await _get_or_404(store, template_id)
    await store.delete(template)
    await log_activity(
        db, "DELETE", "templates", "contract_template",
        description=f"Deleted template {template.name}",
        entity_id=template.id, entity_name=template.name,
        actor=current_user, request=request,
    )
