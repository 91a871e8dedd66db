"""Seed the initial administrator account.

Run: python -m app.core.seed (from backend/). Idempotent: skips when the
email is already registered.
"""
import asyncio
import logging
import os

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import hash_password
from app.db.session import AsyncSessionLocal
from app.models.user import User
from app.services.entity_store import EntityStore

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_EMAIL = "admin@example.com"
DEFAULT_ADMIN_NAME = "Administrator"


async def seed_admin_user(db: AsyncSession, email: str, password: str) -> User | None:
    """Create an admin with the next USR identifier unless the email exists."""
    existing = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    if existing.scalars().first() is not None:
        logger.info("Admin user %s already exists, skipping", email)
        return None

    user = await EntityStore(db, User, User.ID_PREFIX).create({
        "email": email.lower(),
        "name": DEFAULT_ADMIN_NAME,
        "password_hash": hash_password(password),
        "role": "admin",
        "status": "active",
    })
    logger.info("Seeded admin user %s as %s", email, user.id)
    return user


async def run_seed() -> None:
    email = os.environ.get("SEED_ADMIN_EMAIL", DEFAULT_ADMIN_EMAIL)
    password = os.environ.get("SEED_ADMIN_PASSWORD", "changeme123")
    async with AsyncSessionLocal() as db:
        await seed_admin_user(db, email, password)
    logger.info("Seeding complete.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(run_seed())
