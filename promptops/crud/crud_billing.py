"""CRUD operations for billing records."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.crud._base import CRUDBase
from promptops.models.billing import Billing
from promptops.schemas.billing import Billing as BillingSchema


class CRUDBilling(CRUDBase[Billing, BillingSchema, BillingSchema]):
    """CRUD operations for billing."""

    async def get_by_organization(
        self, db: AsyncSession, *, organization_id: UUID
    ) -> Optional[Billing]:
        """Get billing record by organization ID.

        Args:
            db: Database session
            organization_id: Organization ID

        Returns:
            Billing or None
        """
        query = select(Billing).where(Billing.organization_id == organization_id)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_stripe_customer(
        self, db: AsyncSession, *, stripe_customer_id: str
    ) -> Optional[Billing]:
        """Get billing record by Stripe customer ID.

        Args:
            db: Database session
            stripe_customer_id: Stripe customer ID

        Returns:
            Billing or None
        """
        query = select(Billing).where(Billing.stripe_customer_id == stripe_customer_id)
        result = await db.execute(query)
        return result.scalars().first()


billing = CRUDBilling(Billing)
