"""Webhook handler for processing Stripe events."""

from datetime import timedelta
from typing import Any, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from promptops import crud
from promptops.api.context import RequestContext
from promptops.core.billing_service import billing_service
from promptops.core.config import settings
from promptops.core.datetime_utils import utc_now_naive
from promptops.core.exceptions import DomainValidationError
from promptops.core.logging import ContextualLogger
from promptops.core.shared_models import OrganizationPlan


class StripeWebhookHandler:
    """Apply Stripe subscription events to the billing state.

    Events are plain dicts shaped like Stripe's: ``{"type": ..., "data": {"object":
    {...}}}``. The organization is taken from ``metadata.organization_id`` of the
    event object, or looked up through its ``customer`` id.
    """

    def __init__(self, db: AsyncSession, ctx: RequestContext):
        """Initialize webhook handler with database session.

        Args:
            db: Database session for processing events
            ctx: Request context of the webhook call
        """
        self.db = db
        self.ctx = ctx

        self.event_handlers = {
            "invoice.payment_succeeded": self._handle_payment_succeeded,
            "invoice.payment_failed": self._handle_payment_failed,
            "customer.subscription.updated": self._handle_subscription_updated,
            "customer.subscription.deleted": self._handle_subscription_deleted,
        }

    async def handle_event(self, event: Optional[dict[str, Any]]) -> None:
        """Route an event to its handler.

        Raises:
            DomainValidationError: If the event is missing or has no type.
        """
        if not isinstance(event, dict) or not event.get("type"):
            raise DomainValidationError("Invalid webhook event")

        event_type = event["type"]
        log = self.ctx.logger.with_context(event_type=event_type)

        handler = self.event_handlers.get(event_type)
        if not handler:
            log.info(f"Ignoring unhandled webhook event type: {event_type}")
            return

        event_object = (event.get("data") or {}).get("object") or {}
        organization_id = await self._resolve_organization_id(event_object)
        if not organization_id:
            log.warning("Webhook event does not reference a known organization")
            return

        log = log.with_context(organization_id=str(organization_id))
        await handler(organization_id, event_object, log)

    async def _resolve_organization_id(self, event_object: dict[str, Any]) -> Optional[UUID]:
        org_id_str = (event_object.get("metadata") or {}).get("organization_id")
        if org_id_str:
            try:
                return UUID(str(org_id_str))
            except ValueError:
                return None

        customer_id = event_object.get("customer")
        if customer_id:
            billing = await crud.billing.get_by_stripe_customer(
                self.db, stripe_customer_id=customer_id
            )
            if billing:
                return billing.organization_id
        return None

    async def _handle_payment_succeeded(
        self, organization_id: UUID, event_object: dict[str, Any], log: ContextualLogger
    ) -> None:
        """Extend the billing period of a paid plan."""
        billing = await crud.billing.get_by_organization(self.db, organization_id=organization_id)
        if not billing or billing.plan == OrganizationPlan.FREE.value:
            log.info("Payment succeeded for an organization without a paid plan")
            return

        renews_at = utc_now_naive() + timedelta(days=settings.BILLING_PERIOD_DAYS)
        await crud.billing.update(self.db, db_obj=billing, obj_in={"renews_at": renews_at})
        log.info(f"Payment succeeded, plan renews at {renews_at.isoformat()}")

    async def _handle_payment_failed(
        self, organization_id: UUID, event_object: dict[str, Any], log: ContextualLogger
    ) -> None:
        """Record a failed payment. The plan stays until the subscription is deleted."""
        log.warning(f"Payment failed for invoice {event_object.get('id')}")

    async def _handle_subscription_updated(
        self, organization_id: UUID, event_object: dict[str, Any], log: ContextualLogger
    ) -> None:
        """Apply the plan named in the subscription metadata."""
        plan = (event_object.get("metadata") or {}).get("plan")
        if plan not in {p.value for p in OrganizationPlan}:
            log.info(f"Subscription updated without a valid plan in metadata: {plan}")
            return

        await billing_service.update_organization_plan(
            self.db,
            organization_id=organization_id,
            plan=plan,
            stripe_customer_id=event_object.get("customer"),
            ctx=self.ctx,
        )
        log.info(f"Subscription updated to plan {plan}")

    async def _handle_subscription_deleted(
        self, organization_id: UUID, event_object: dict[str, Any], log: ContextualLogger
    ) -> None:
        """Downgrade the organization to the free plan."""
        await billing_service.update_organization_plan(
            self.db,
            organization_id=organization_id,
            plan=OrganizationPlan.FREE.value,
            ctx=self.ctx,
        )
        log.info("Subscription deleted, organization downgraded to free")
