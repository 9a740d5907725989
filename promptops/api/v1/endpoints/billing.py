"""The API module that contains the endpoints for billing."""

import json
from typing import Optional
from uuid import UUID

from fastapi import Depends, Header, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from promptops import schemas
from promptops.api import deps
from promptops.api.context import RequestContext
from promptops.api.router import TrailingSlashRouter
from promptops.core.billing_service import billing_service
from promptops.core.config import settings
from promptops.core.exceptions import NotFoundException
from promptops.core.stripe_webhook_handler import StripeWebhookHandler
from promptops.integrations.stripe_client import verify_webhook_signature

router = TrailingSlashRouter()


@router.get("/{organization_id}", response_model=schemas.Billing)
async def read_billing(
    *, db: AsyncSession = Depends(deps.get_db), organization_id: UUID
) -> schemas.Billing:
    """Get the billing state of an organization."""
    billing = await billing_service.get_billing(db, organization_id=organization_id)
    if not billing:
        raise NotFoundException("No billing information found for organization")
    return billing


@router.put("/{organization_id}/plan", response_model=schemas.Billing)
async def update_plan(
    *,
    db: AsyncSession = Depends(deps.get_db),
    organization_id: UUID,
    plan_in: schemas.PlanUpdate,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.Billing:
    """Move an organization to a plan.

    Args:
    ----
        db (AsyncSession): The database session.
        organization_id (UUID): The organization.
        plan_in (schemas.PlanUpdate): The plan and optionally the Stripe customer id.
        ctx (RequestContext): The request context.

    Returns:
    -------
        schemas.Billing: The billing state after the change.

    """
    return await billing_service.update_organization_plan(
        db,
        organization_id=organization_id,
        plan=plan_in.plan,
        stripe_customer_id=plan_in.stripe_customer_id,
        ctx=ctx,
    )


@router.get("/{organization_id}/usage", response_model=schemas.UsageQuota)
async def read_usage_quota(
    *, db: AsyncSession = Depends(deps.get_db), organization_id: UUID
) -> schemas.UsageQuota:
    """Get this month's token usage against the metered quota."""
    return await billing_service.check_usage_quota(db, organization_id=organization_id)


@router.post("/{organization_id}/checkout-session", response_model=schemas.CheckoutSession)
async def create_checkout_session(
    *,
    db: AsyncSession = Depends(deps.get_db),
    organization_id: UUID,
    checkout_in: schemas.CheckoutSessionCreate,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.CheckoutSession:
    """Start a checkout for a paid plan."""
    return await billing_service.create_checkout_session(
        db,
        organization_id=organization_id,
        plan=checkout_in.plan,
        success_url=checkout_in.success_url,
        ctx=ctx,
    )


@router.post("/verify-session", response_model=schemas.SessionVerification)
async def verify_checkout_session(
    *,
    db: AsyncSession = Depends(deps.get_db),
    verification_in: schemas.SessionVerificationRequest,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.SessionVerification:
    """Check whether a checkout session completed."""
    return await billing_service.verify_session(
        db, session_id=verification_in.session_id, ctx=ctx
    )


@router.post("/{organization_id}/portal-session", response_model=schemas.PortalSession)
async def create_portal_session(
    *,
    db: AsyncSession = Depends(deps.get_db),
    organization_id: UUID,
    portal_in: schemas.PortalSessionCreate,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.PortalSession:
    """Open the customer billing portal."""
    return await billing_service.create_portal_session(
        db, organization_id=organization_id, return_url=portal_in.return_url, ctx=ctx
    )


@router.post("/webhook", include_in_schema=False)
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None),
    db: AsyncSession = Depends(deps.get_db),
    ctx: RequestContext = Depends(deps.get_context),
) -> Response:
    """Handle Stripe webhook events.

    When a webhook secret is configured the ``Stripe-Signature`` header is verified
    before the event is processed.

    Returns:
        200 OK on success, 400 for payloads that are not valid signed events
    """
    payload = await request.body()

    if settings.STRIPE_WEBHOOK_SECRET:
        if not stripe_signature:
            return Response(status_code=400)
        try:
            verify_webhook_signature(payload, stripe_signature, settings.STRIPE_WEBHOOK_SECRET)
        except ValueError as e:
            ctx.logger.warning(f"Rejected webhook: {e}")
            return Response(status_code=400)

    try:
        event = json.loads(payload) if payload else None
    except json.JSONDecodeError:
        return Response(status_code=400)

    await StripeWebhookHandler(db, ctx).handle_event(event)
    return Response(status_code=200)
