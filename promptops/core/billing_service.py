"""Billing service for plans, usage quotas and checkout sessions."""

import re
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from promptops import crud, schemas
from promptops.api.context import RequestContext
from promptops.core.config import settings
from promptops.core.datetime_utils import epoch_millis, start_of_month_naive, utc_now_naive
from promptops.core.exceptions import DomainValidationError, NotFoundException
from promptops.core.shared_models import OrganizationPlan
from promptops.db.unit_of_work import UnitOfWork
from promptops.integrations.stripe_client import stripe_client
from promptops.models import Billing

# Seats and metered token quota granted when an organization moves to a plan
PLAN_DEFAULTS: dict[OrganizationPlan, dict[str, int]] = {
    OrganizationPlan.FREE: {"seats": 1, "metered_quota": 1000},
    OrganizationPlan.PRO: {"seats": 5, "metered_quota": 10000},
    OrganizationPlan.ENTERPRISE: {"seats": 20, "metered_quota": 100000},
}

FREE_TIER_QUOTA = PLAN_DEFAULTS[OrganizationPlan.FREE]["metered_quota"]

_MOCK_SESSION_PATTERN = re.compile(r"^cs_test_(\d+)_(.+)$")


def parse_plan(plan: str) -> OrganizationPlan:
    """Parse a plan name.

    Raises:
        DomainValidationError: If the plan is unknown.
    """
    try:
        return OrganizationPlan(plan)
    except ValueError as e:
        raise DomainValidationError("Invalid plan") from e


def usage_percentage(used: int, quota: int) -> int:
    """Share of the quota in use, rounded half up to a whole percent."""
    if quota <= 0:
        return 0
    ratio = Decimal(used) * 100 / Decimal(quota)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class BillingService:
    """Service for managing organization billing."""

    async def update_organization_plan(
        self,
        db: AsyncSession,
        *,
        organization_id: UUID,
        plan: str,
        stripe_customer_id: Optional[str] = None,
        ctx: RequestContext,
    ) -> Billing:
        """Move an organization to a plan.

        The billing row is created or updated with the plan defaults and the plan is
        mirrored onto the organization in the same transaction.

        Args:
            db: Database session
            organization_id: Organization to update
            plan: Target plan name
            stripe_customer_id: Customer id to store, keeps the existing one when None
            ctx: Request context

        Returns:
            The billing row after the change

        Raises:
            NotFoundException: If the organization does not exist
            DomainValidationError: If the plan is unknown
        """
        log = ctx.logger.with_context(organization_id=str(organization_id))

        organization = await crud.organization.get(db, id=organization_id)
        if not organization:
            raise NotFoundException("Organization not found")
        billing_plan = parse_plan(plan)

        defaults = PLAN_DEFAULTS[billing_plan]
        renews_at = (
            None
            if billing_plan == OrganizationPlan.FREE
            else utc_now_naive() + timedelta(days=settings.BILLING_PERIOD_DAYS)
        )
        values = {
            "plan": billing_plan,
            "seats": defaults["seats"],
            "metered_quota": defaults["metered_quota"],
            "renews_at": renews_at,
        }
        if stripe_customer_id is not None:
            values["stripe_customer_id"] = stripe_customer_id

        async with UnitOfWork(db) as uow:
            billing = await crud.billing.get_by_organization(db, organization_id=organization_id)
            if billing:
                billing = await crud.billing.update(db, db_obj=billing, obj_in=values, uow=uow)
            else:
                billing = await crud.billing.create(
                    db, obj_in={"organization_id": organization_id, **values}, uow=uow
                )
            await crud.organization.update(
                db, db_obj=organization, obj_in={"plan": billing_plan}, uow=uow
            )

        await db.refresh(billing)
        log.info(f"Organization moved to plan {billing_plan.value}")
        return billing

    async def get_billing(self, db: AsyncSession, *, organization_id: UUID) -> Optional[Billing]:
        """Get the billing row of an organization."""
        return await crud.billing.get_by_organization(db, organization_id=organization_id)

    async def check_usage_quota(
        self, db: AsyncSession, *, organization_id: UUID
    ) -> schemas.UsageQuota:
        """Compare this month's token usage with the organization's metered quota.

        Usage is the sum of ``tokens_in`` of the runs of the organization's projects
        since the first instant of the current UTC month. Organizations without a
        billing row get the free-tier quota and zero usage, without querying runs.
        """
        billing = await crud.billing.get_by_organization(db, organization_id=organization_id)
        if not billing:
            return schemas.UsageQuota(used=0, quota=FREE_TIER_QUOTA, percentage=0, exceeded=False)

        used = await crud.run.sum_tokens_in_since(
            db, organization_id=organization_id, since=start_of_month_naive()
        )
        quota = billing.metered_quota
        return schemas.UsageQuota(
            used=used,
            quota=quota,
            percentage=usage_percentage(used, quota),
            exceeded=used > quota,
        )

    async def create_checkout_session(
        self,
        db: AsyncSession,
        *,
        organization_id: UUID,
        plan: str,
        success_url: str,
        ctx: RequestContext,
    ) -> schemas.CheckoutSession:
        """Start a checkout for a paid plan.

        Without Stripe configured a deterministic test session is returned whose id
        encodes the organization, so it can be verified later.

        Raises:
            NotFoundException: If the organization does not exist
            DomainValidationError: If the plan is unknown
            ExternalServiceError: If Stripe rejects the request
        """
        organization = await crud.organization.get(db, id=organization_id)
        if not organization:
            raise NotFoundException("Organization not found")
        billing_plan = parse_plan(plan)

        if stripe_client:
            billing = await crud.billing.get_by_organization(db, organization_id=organization_id)
            session = await stripe_client.create_checkout_session(
                plan=billing_plan,
                success_url=success_url,
                metadata={"organization_id": str(organization_id), "plan": billing_plan.value},
                customer_id=billing.stripe_customer_id if billing else None,
            )
            ctx.logger.info(f"Created Stripe checkout session {session.id}")
            return schemas.CheckoutSession(session_id=session.id, url=session.url)

        session_id = f"cs_test_{epoch_millis()}_{organization_id}"
        ctx.logger.info(f"Created test checkout session {session_id}")
        return schemas.CheckoutSession(
            session_id=session_id, url=f"https://checkout.stripe.com/c/pay/{session_id}"
        )

    async def verify_session(
        self, db: AsyncSession, *, session_id: str, ctx: RequestContext
    ) -> schemas.SessionVerification:
        """Check whether a checkout session completed.

        Never raises; any failure is reported as ``success=False``.
        """
        log = ctx.logger.with_context(session_id=session_id)
        try:
            if stripe_client:
                return await self._verify_stripe_session(db, session_id=session_id)
            return await self._verify_test_session(db, session_id=session_id)
        except Exception as e:
            log.error(f"Checkout session verification failed: {e}", exc_info=True)
            return schemas.SessionVerification(success=False)

    async def _verify_test_session(
        self, db: AsyncSession, *, session_id: str
    ) -> schemas.SessionVerification:
        match = _MOCK_SESSION_PATTERN.match(session_id)
        if not match:
            return schemas.SessionVerification(success=False)

        try:
            organization_id = UUID(match.group(2))
        except ValueError:
            return schemas.SessionVerification(success=False)

        organization = await crud.organization.get(db, id=organization_id)
        if not organization:
            return schemas.SessionVerification(success=False)

        return schemas.SessionVerification(
            success=True, organization_id=organization.id, plan=OrganizationPlan.PRO
        )

    async def _verify_stripe_session(
        self, db: AsyncSession, *, session_id: str
    ) -> schemas.SessionVerification:
        session = await stripe_client.retrieve_checkout_session(session_id)
        if session.status != "complete":
            return schemas.SessionVerification(success=False)

        metadata = session.metadata or {}
        organization = await crud.organization.get(db, id=UUID(metadata["organization_id"]))
        if not organization:
            return schemas.SessionVerification(success=False)

        return schemas.SessionVerification(
            success=True,
            organization_id=organization.id,
            plan=parse_plan(metadata.get("plan", OrganizationPlan.PRO.value)),
        )

    async def create_portal_session(
        self,
        db: AsyncSession,
        *,
        organization_id: UUID,
        return_url: str,
        ctx: RequestContext,
    ) -> schemas.PortalSession:
        """Open the customer billing portal.

        Raises:
            NotFoundException: If the organization has no billing customer
        """
        billing = await crud.billing.get_by_organization(db, organization_id=organization_id)
        if not billing or not billing.stripe_customer_id:
            raise NotFoundException("No billing information found for organization")

        if stripe_client:
            session = await stripe_client.create_portal_session(
                customer_id=billing.stripe_customer_id, return_url=return_url
            )
            return schemas.PortalSession(url=session.url)

        ctx.logger.info(f"Created test portal session for {billing.stripe_customer_id}")
        return schemas.PortalSession(
            url=f"https://billing.stripe.com/p/session_{billing.stripe_customer_id}"
        )


# Singleton instance
billing_service = BillingService()
