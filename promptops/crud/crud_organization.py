"""CRUD operations for organizations and memberships."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.crud._base import CRUDBase
from promptops.models import Membership, Organization
from promptops.schemas.organization import (
    MembershipCreate,
    MembershipUpdate,
    OrganizationCreate,
    OrganizationUpdate,
)


class CRUDOrganization(CRUDBase[Organization, OrganizationCreate, OrganizationUpdate]):
    """CRUD operations for the organization model."""

    async def get_by_slug(self, db: AsyncSession, *, slug: str) -> Optional[Organization]:
        """Get an organization by its unique slug."""
        result = await db.execute(select(Organization).where(Organization.slug == slug))
        return result.scalar_one_or_none()

    async def get_multi_for_user(self, db: AsyncSession, *, user_id: UUID) -> list[Organization]:
        """Get all organizations a user is a member of.

        Args:
        ----
            db (AsyncSession): The database session.
            user_id (UUID): The user whose organizations to list.

        Returns:
        -------
            list[Organization]: Organizations ordered by creation time.

        """
        query = (
            select(Organization)
            .join(Membership, Membership.organization_id == Organization.id)
            .where(Membership.user_id == user_id)
            .order_by(Organization.created_at)
        )
        result = await db.execute(query)
        return list(result.scalars().all())


class CRUDMembership(CRUDBase[Membership, MembershipCreate, MembershipUpdate]):
    """CRUD operations for the membership model."""

    async def get_multi_by_organization(
        self, db: AsyncSession, *, organization_id: UUID
    ) -> list[Membership]:
        """Get all memberships of an organization."""
        query = (
            select(Membership)
            .where(Membership.organization_id == organization_id)
            .order_by(Membership.created_at)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_for_user(
        self, db: AsyncSession, *, organization_id: UUID, user_id: UUID
    ) -> Optional[Membership]:
        """Get the membership of a user in an organization."""
        query = select(Membership).where(
            Membership.organization_id == organization_id, Membership.user_id == user_id
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()


organization = CRUDOrganization(Organization)
membership = CRUDMembership(Membership)
