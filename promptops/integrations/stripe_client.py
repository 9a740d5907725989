"""Stripe API client for billing operations.

This module only wraps direct Stripe calls. The billing service decides whether a
real client is available; without one it falls back to deterministic test sessions.
"""

from typing import Dict, Optional

import stripe

from promptops.core.config import settings
from promptops.core.exceptions import ExternalServiceError
from promptops.core.shared_models import OrganizationPlan


class StripeClient:
    """Client for Stripe API operations."""

    def __init__(self):
        """Initialize Stripe client."""
        if not settings.STRIPE_ENABLED:
            raise ValueError("Stripe is not enabled in settings")

        stripe.api_key = settings.STRIPE_SECRET_KEY
        self.webhook_secret = settings.STRIPE_WEBHOOK_SECRET

        self.price_ids = {
            OrganizationPlan.PRO: settings.STRIPE_PRO_PRICE_ID,
            OrganizationPlan.ENTERPRISE: settings.STRIPE_ENTERPRISE_PRICE_ID,
        }

    def get_price_for_plan(self, plan: OrganizationPlan) -> Optional[str]:
        """Get Stripe price ID for a billing plan."""
        return self.price_ids.get(plan)

    @staticmethod
    def _clean_metadata(metadata: Optional[Dict[str, str]]) -> Dict[str, str]:
        """Stripe metadata values must be ASCII strings."""
        if not metadata:
            return {}
        return {
            str(key).encode("ascii", "replace").decode("ascii"): str(value)
            .encode("ascii", "replace")
            .decode("ascii")
            for key, value in metadata.items()
        }

    async def create_checkout_session(
        self,
        plan: OrganizationPlan,
        success_url: str,
        metadata: Optional[Dict[str, str]] = None,
        customer_id: Optional[str] = None,
    ) -> stripe.checkout.Session:
        """Create a subscription checkout session for a plan."""
        price_id = self.get_price_for_plan(plan)
        if not price_id:
            raise ExternalServiceError(
                service_name="Stripe",
                message=f"No price configured for plan {plan.value}",
            )

        clean_metadata = self._clean_metadata(metadata)
        params = {
            "line_items": [{"price": price_id, "quantity": 1}],
            "mode": "subscription",
            "success_url": success_url,
            "cancel_url": success_url,
            "metadata": clean_metadata,
            "subscription_data": {"metadata": clean_metadata},
        }
        if customer_id:
            params["customer"] = customer_id

        try:
            return await stripe.checkout.Session.create_async(**params)
        except stripe.StripeError as e:
            raise ExternalServiceError(
                service_name="Stripe",
                message=f"Failed to create checkout session: {str(e)}",
            ) from e

    async def retrieve_checkout_session(self, session_id: str) -> stripe.checkout.Session:
        """Retrieve a checkout session."""
        try:
            return await stripe.checkout.Session.retrieve_async(session_id)
        except stripe.StripeError as e:
            raise ExternalServiceError(
                service_name="Stripe",
                message=f"Failed to retrieve checkout session: {str(e)}",
            ) from e

    async def create_portal_session(
        self, customer_id: str, return_url: str
    ) -> stripe.billing_portal.Session:
        """Create a customer portal session."""
        try:
            return await stripe.billing_portal.Session.create_async(
                customer=customer_id,
                return_url=return_url,
            )
        except stripe.StripeError as e:
            raise ExternalServiceError(
                service_name="Stripe",
                message=f"Failed to create portal session: {str(e)}",
            ) from e


def verify_webhook_signature(payload: bytes, signature: str, secret: str) -> stripe.Event:
    """Verify and construct a webhook event.

    Raises:
        ValueError: If the payload cannot be parsed or the signature does not match.
    """
    try:
        return stripe.Webhook.construct_event(payload, signature, secret)
    except ValueError as e:
        raise ValueError(f"Invalid webhook payload: {e}") from e
    except stripe.SignatureVerificationError as e:
        raise ValueError(f"Invalid webhook signature: {e}") from e


stripe_client = StripeClient() if settings.STRIPE_ENABLED else None
