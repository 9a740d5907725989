"""The API module that contains the endpoints for organizations and memberships."""

from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from promptops import schemas
from promptops.api import deps
from promptops.api.context import RequestContext
from promptops.api.router import TrailingSlashRouter
from promptops.core.exceptions import NotFoundException
from promptops.core.organization_service import organization_service

router = TrailingSlashRouter()


@router.post("/", response_model=schemas.Organization)
async def create_organization(
    *,
    db: AsyncSession = Depends(deps.get_db),
    organization_in: schemas.OrganizationCreate,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.Organization:
    """Create an organization owned by an existing user.

    Args:
    ----
        db (AsyncSession): The database session.
        organization_in (schemas.OrganizationCreate): The organization to create.
        ctx (RequestContext): The request context.

    Returns:
    -------
        schemas.Organization: The created organization.

    """
    return await organization_service.create_organization(
        db, organization_in=organization_in, ctx=ctx
    )


@router.get("/by-slug/{slug}", response_model=schemas.Organization)
async def read_organization_by_slug(
    *, db: AsyncSession = Depends(deps.get_db), slug: str
) -> schemas.Organization:
    """Get an organization by slug."""
    organization = await organization_service.get_organization_by_slug(db, slug=slug)
    if not organization:
        raise NotFoundException("Organization not found")
    return organization


@router.get("/{organization_id}", response_model=schemas.Organization)
async def read_organization(
    *, db: AsyncSession = Depends(deps.get_db), organization_id: UUID
) -> schemas.Organization:
    """Get an organization by id."""
    organization = await organization_service.get_organization(
        db, organization_id=organization_id
    )
    if not organization:
        raise NotFoundException("Organization not found")
    return organization


@router.patch("/{organization_id}", response_model=schemas.Organization)
async def update_organization(
    *,
    db: AsyncSession = Depends(deps.get_db),
    organization_id: UUID,
    organization_in: schemas.OrganizationUpdate,
) -> schemas.Organization:
    """Update an organization."""
    return await organization_service.update_organization(
        db, organization_id=organization_id, organization_in=organization_in
    )


@router.get("/{organization_id}/members", response_model=list[schemas.Membership])
async def read_members(
    *, db: AsyncSession = Depends(deps.get_db), organization_id: UUID
) -> list[schemas.Membership]:
    """List the memberships of an organization."""
    return await organization_service.list_members(db, organization_id=organization_id)


@router.get("/{organization_id}/members/{user_id}", response_model=schemas.Membership)
async def read_user_membership(
    *, db: AsyncSession = Depends(deps.get_db), organization_id: UUID, user_id: UUID
) -> schemas.Membership:
    """Get the membership of a user in an organization."""
    membership = await organization_service.get_user_membership(
        db, user_id=user_id, organization_id=organization_id
    )
    if not membership:
        raise NotFoundException("Membership not found")
    return membership


@router.post("/memberships", response_model=schemas.Membership)
async def create_membership(
    *,
    db: AsyncSession = Depends(deps.get_db),
    membership_in: schemas.MembershipCreate,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.Membership:
    """Add a user to an organization."""
    return await organization_service.add_member(db, membership_in=membership_in, ctx=ctx)


@router.patch("/memberships/{membership_id}", response_model=schemas.Membership)
async def update_membership(
    *,
    db: AsyncSession = Depends(deps.get_db),
    membership_id: UUID,
    membership_in: schemas.MembershipUpdate,
) -> schemas.Membership:
    """Change the role of a member."""
    return await organization_service.update_member_role(
        db, membership_id=membership_id, role=membership_in.role
    )


@router.delete("/memberships/{membership_id}", response_model=schemas.Membership)
async def delete_membership(
    *,
    db: AsyncSession = Depends(deps.get_db),
    membership_id: UUID,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.Membership:
    """Remove a member from an organization."""
    return await organization_service.remove_member(db, membership_id=membership_id, ctx=ctx)
