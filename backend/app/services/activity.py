"""Activity log helper: append-only entries behind the dashboard feed."""
import json
import logging
from typing import Any

from fastapi import Request
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)


async def log_activity(
    db: AsyncSession,
    action: str,
    module: str,
    entity_type: str,
    description: str,
    entity_id: str | None = None,
    entity_name: str | None = None,
    actor: Any | None = None,
    request: Request | None = None,
    metadata: Any | None = None,
) -> ActivityLog | None:
    """Write and commit a single activity entry.

    Args:
        db: Async session. The entry is committed on its own, after the
            entity change it describes.
        action: One of ACTIVITY_ACTIONS, e.g. 'CREATE', 'IMPORT'.
        module: UI area, e.g. 'assets', 'leases'.
        entity_type: Model name, e.g. 'asset'.
        description: Human-readable line shown in the feed.
        entity_id: Identifier of the affected record.
        entity_name: Display name of the affected record.
        actor: User who performed the action (None for anonymous/system).
        request: Source of IP address and user agent.
        metadata: JSON-serialisable extra detail.

    A failed write is logged and swallowed: the change it describes has
    already been committed and must still be reported as successful.
    """
    entry = ActivityLog(
        user_id=getattr(actor, "id", None),
        user_name=getattr(actor, "name", None) or "System",
        action=action,
        module=module,
        entity_type=entity_type,
        entity_id=entity_id,
        entity_name=entity_name,
        description=description,
        ip_address=request.client.host if request is not None and request.client else None,
        user_agent=request.headers.get("user-agent") if request is not None else None,
        metadata_json=json.dumps(metadata, default=str) if metadata is not None else None,
    )
    try:
        db.add(entry)
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("Failed to log activity %s %s/%s: %s", action, entity_type, entity_id, exc)
        return None
    logger.debug("Activity: %s %s/%s", action, entity_type, entity_id)
    return entry


async def recent_activities(
    db: AsyncSession, user_id: str | None = None, limit: int = 10
) -> list[ActivityLog]:
    stmt = select(ActivityLog).order_by(ActivityLog.created_at.desc()).limit(limit)
    if user_id:
        stmt = stmt.where(ActivityLog.user_id == user_id)
    return list((await db.execute(stmt)).scalars().all())
