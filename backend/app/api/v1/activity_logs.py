"""Activity log feed endpoint."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.session import get_session
from app.schemas.activity_log import ActivityLogOut
from app.services.activity import recent_activities

router = APIRouter()


@router.get("", response_model=list[ActivityLogOut], summary="Recent activity entries, newest first")
async def list_activity_logs(
    db: Annotated[AsyncSession, Depends(get_session)],
    user_id: str | None = Query(default=None),
    limit: int = Query(default=settings.ACTIVITY_LOG_DEFAULT_LIMIT, ge=1, le=500),
):
    return await recent_activities(db, user_id=user_id, limit=limit)
