"""Organization service: organizations and their memberships."""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from promptops import crud, schemas
from promptops.api.context import RequestContext
from promptops.core.exceptions import NotFoundException
from promptops.core.shared_models import MembershipRole
from promptops.db.unit_of_work import UnitOfWork
from promptops.models import Membership, Organization


class OrganizationService:
    """Service for organization management.

    Creating an organization always creates the owner's membership with it, so
    every organization has at least one member from the start.
    """

    async def create_organization(
        self,
        db: AsyncSession,
        *,
        organization_in: schemas.OrganizationCreate,
        ctx: RequestContext,
    ) -> Organization:
        """Create an organization and the owner membership in one transaction.

        Raises:
            NotFoundException: If the owner user does not exist.
        """
        owner = await crud.user.get(db, id=organization_in.owner_user_id)
        if not owner:
            raise NotFoundException("Owner user not found")

        async with UnitOfWork(db) as uow:
            organization = await crud.organization.create(db, obj_in=organization_in, uow=uow)
            await crud.membership.create(
                db,
                obj_in={
                    "organization_id": organization.id,
                    "user_id": owner.id,
                    "role": MembershipRole.OWNER,
                },
                uow=uow,
            )

        await db.refresh(organization)
        ctx.logger.with_context(organization_id=str(organization.id)).info(
            f"Created organization '{organization.slug}' owned by {owner.email}"
        )
        return organization

    async def get_organization(
        self, db: AsyncSession, *, organization_id: UUID
    ) -> Optional[Organization]:
        """Get an organization by id."""
        return await crud.organization.get(db, id=organization_id)

    async def get_organization_by_slug(
        self, db: AsyncSession, *, slug: str
    ) -> Optional[Organization]:
        """Get an organization by slug."""
        return await crud.organization.get_by_slug(db, slug=slug)

    async def update_organization(
        self,
        db: AsyncSession,
        *,
        organization_id: UUID,
        organization_in: schemas.OrganizationUpdate,
    ) -> Organization:
        """Update name, slug or plan of an organization."""
        organization = await crud.organization.get(db, id=organization_id)
        if not organization:
            raise NotFoundException("Organization not found")
        return await crud.organization.update(db, db_obj=organization, obj_in=organization_in)

    async def list_organizations_for_user(
        self, db: AsyncSession, *, user_id: UUID
    ) -> list[Organization]:
        """List the organizations a user is a member of."""
        return await crud.organization.get_multi_for_user(db, user_id=user_id)

    async def add_member(
        self, db: AsyncSession, *, membership_in: schemas.MembershipCreate, ctx: RequestContext
    ) -> Membership:
        """Add a user to an organization.

        A user can only be a member once; a second membership is a conflict.
        """
        if not await crud.organization.get(db, id=membership_in.organization_id):
            raise NotFoundException("Organization not found")
        if not await crud.user.get(db, id=membership_in.user_id):
            raise NotFoundException("User not found")

        membership = await crud.membership.create(db, obj_in=membership_in)
        ctx.logger.with_context(organization_id=str(membership.organization_id)).info(
            f"Added user {membership.user_id} as {membership.role}"
        )
        return membership

    async def update_member_role(
        self, db: AsyncSession, *, membership_id: UUID, role: MembershipRole
    ) -> Membership:
        """Change the role of a membership."""
        membership = await crud.membership.get(db, id=membership_id)
        if not membership:
            raise NotFoundException("Membership not found")
        return await crud.membership.update(db, db_obj=membership, obj_in={"role": role})

    async def list_members(
        self, db: AsyncSession, *, organization_id: UUID
    ) -> list[Membership]:
        """List the memberships of an organization."""
        return await crud.membership.get_multi_by_organization(
            db, organization_id=organization_id
        )

    async def get_user_membership(
        self, db: AsyncSession, *, user_id: UUID, organization_id: UUID
    ) -> Optional[Membership]:
        """Get the membership of a user in an organization."""
        return await crud.membership.get_for_user(
            db, user_id=user_id, organization_id=organization_id
        )

    async def remove_member(
        self, db: AsyncSession, *, membership_id: UUID, ctx: RequestContext
    ) -> Membership:
        """Remove a membership."""
        membership = await crud.membership.get(db, id=membership_id)
        if not membership:
            raise NotFoundException("Membership not found")
        await crud.membership.remove(db, id=membership_id)
        ctx.logger.with_context(organization_id=str(membership.organization_id)).info(
            f"Removed user {membership.user_id}"
        )
        return membership


organization_service = OrganizationService()
