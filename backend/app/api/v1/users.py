"""User management API endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import get_optional_user
from app.core.security import hash_password
from app.db.session import get_session
from app.models.user import ROLES, User
from app.schemas.user import UserCreate, UserOut, UserUpdate
from app.services.activity import log_activity
from app.services.entity_store import DuplicateIdentifierError, EntityStore

router = APIRouter()


def _store(db: AsyncSession) -> EntityStore:
    return EntityStore(db, User, User.ID_PREFIX)


async def _get_or_404(store: EntityStore, user_id: str) -> User:
    user = await store.get(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return user


def _check_role(role: str | None) -> None:
    if role is not None and role not in ROLES:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid role. Must be one of {', '.join(ROLES)}",
        )


async def _ensure_email_free(db: AsyncSession, email: str, exclude_id: str | None = None) -> None:
    # Soft-deleted users keep their email reserved (unique constraint covers them)
    stmt = select(User.id).where(func.lower(User.email) == email.lower())
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    if (await db.execute(stmt)).first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"A user with email '{email}' already exists.",
        )


@router.get("", response_model=list[UserOut], summary="List users, newest first")
async def list_users(
    db: Annotated[AsyncSession, Depends(get_session)],
    include_deleted: bool = Query(default=False),
    role: str | None = Query(default=None),
):
    filters = [User.role == role] if role else []
    return await _store(db).list(include_deleted=include_deleted, filters=filters)


@router.get("/me", response_model=UserOut, summary="Get current authenticated user info")
async def get_current_user_info(
    current_user: Annotated[User | None, Depends(get_optional_user)],
):
    if current_user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return current_user


@router.get("/{user_id}", response_model=UserOut, summary="Get user by ID")
async def get_user(
    user_id: str,
    db: Annotated[AsyncSession, Depends(get_session)],
):
    return await _get_or_404(_store(db), user_id)


@router.post(
    "",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user with the next USR identifier",
)
async def create_user(
    body: UserCreate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    _check_role(body.role)
    await _ensure_email_free(db, body.email)

    fields = body.model_dump(exclude={"password"})
    fields["email"] = body.email.lower()
    fields["password_hash"] = hash_password(body.password)
    try:
        user = await _store(db).create(fields)
    except DuplicateIdentifierError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except IntegrityError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"A user with email '{body.email}' already exists.",
        )

    payload = UserOut.model_validate(user)
    await log_activity(
        db, "CREATE", "users", "user",
        description=f"Created user {user.name} ({user.role})",
        entity_id=user.id, entity_name=user.name,
        actor=current_user, request=request, metadata={"email": user.email, "role": user.role},
    )
    return payload


@router.put("/{user_id}", response_model=UserOut, summary="Update user fields")
async def update_user(
    user_id: str,
    body: UserUpdate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    store = _store(db)
    user = await _get_or_404(store, user_id)

    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update.")
    _check_role(updates.get("role"))

    fields = dict(updates)
    if fields.get("email"):
        fields["email"] = fields["email"].lower()
        if fields["email"] != user.email:
            await _ensure_email_free(db, fields["email"], exclude_id=user.id)
    password = fields.pop("password", None)
    if password:
        fields["password_hash"] = hash_password(password)

    try:
        user = await store.update(user, fields)
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"A user with email '{fields.get('email')}' already exists.",
        )

    payload = UserOut.model_validate(user)
    # Never echo the password (or its hash) into the activity feed
    await log_activity(
        db, "UPDATE", "users", "user",
        description=f"Updated user {user.name}",
        entity_id=user.id, entity_name=user.name,
        actor=current_user, request=request,
        metadata={"fields": sorted(k for k in updates if k != "password")},
    )
    return payload


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Soft-delete a user")
async def delete_user(
    user_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    current_user: Annotated[object, Depends(get_optional_user)],
):
    store = _store(db)
    user = await _get_or_404(store, user_id)
    await store.delete(user)
    await log_activity(
        db, "DELETE", "users", "user",
        description=f"Deleted user {user.name}",
        entity_id=user.id, entity_name=user.name,
        actor=current_user, request=request,
    )
