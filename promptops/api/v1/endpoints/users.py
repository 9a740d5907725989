"""The API module that contains the endpoints for users."""

from uuid import UUID

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from promptops import crud, schemas
from promptops.api import deps
from promptops.api.context import RequestContext
from promptops.api.router import TrailingSlashRouter
from promptops.core.exceptions import ConflictException, NotFoundException
from promptops.core.organization_service import organization_service

router = TrailingSlashRouter()


@router.post("/", response_model=schemas.User)
async def create_user(
    *,
    db: AsyncSession = Depends(deps.get_db),
    user_in: schemas.UserCreate,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.User:
    """Create a new user.

    Args:
    ----
        db (AsyncSession): The database session.
        user_in (schemas.UserCreate): The user to create.
        ctx (RequestContext): The request context.

    Returns:
    -------
        schemas.User: The created user.

    Raises:
    ------
        ConflictException: If a user with the same email already exists.

    """
    if await crud.user.get_by_email(db, email=user_in.email):
        raise ConflictException(f"User with email {user_in.email} already exists")
    user = await crud.user.create(db, obj_in=user_in)
    ctx.logger.with_context(user_id=str(user.id)).info("Created user")
    return user


@router.get("/by-email", response_model=schemas.User)
async def read_user_by_email(
    *,
    db: AsyncSession = Depends(deps.get_db),
    email: str = Query(...),
) -> schemas.User:
    """Get a user by email."""
    user = await crud.user.get_by_email(db, email=email)
    if not user:
        raise NotFoundException("User not found")
    return user


@router.get("/{user_id}", response_model=schemas.User)
async def read_user(*, db: AsyncSession = Depends(deps.get_db), user_id: UUID) -> schemas.User:
    """Get a user by id."""
    user = await crud.user.get(db, id=user_id)
    if not user:
        raise NotFoundException("User not found")
    return user


@router.patch("/{user_id}", response_model=schemas.User)
async def update_user(
    *,
    db: AsyncSession = Depends(deps.get_db),
    user_id: UUID,
    user_in: schemas.UserUpdate,
) -> schemas.User:
    """Update the name or avatar of a user."""
    user = await crud.user.get(db, id=user_id)
    if not user:
        raise NotFoundException("User not found")
    return await crud.user.update(db, db_obj=user, obj_in=user_in)


@router.post("/{user_id}/login")
async def record_login(*, db: AsyncSession = Depends(deps.get_db), user_id: UUID) -> dict:
    """Record a login. Unknown users are ignored."""
    await crud.user.touch_last_login(db, id=user_id)
    return {"success": True}


@router.get("/{user_id}/organizations", response_model=list[schemas.Organization])
async def read_user_organizations(
    *, db: AsyncSession = Depends(deps.get_db), user_id: UUID
) -> list[schemas.Organization]:
    """List the organizations the user is a member of."""
    return await organization_service.list_organizations_for_user(db, user_id=user_id)
