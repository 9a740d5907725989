"""Billing schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from promptops.core.shared_models import OrganizationPlan


class Billing(BaseModel):
    """Billing schema."""

    model_config = {"from_attributes": True}

    organization_id: UUID
    stripe_customer_id: Optional[str] = None
    plan: OrganizationPlan
    seats: int
    metered_quota: int
    renews_at: Optional[datetime] = None


class PlanUpdate(BaseModel):
    """Plan change request.

    ``plan`` is a plain string so unknown plans reach the billing service and are
    reported as a domain error.
    """

    plan: str
    stripe_customer_id: Optional[str] = None


class CheckoutSessionCreate(BaseModel):
    """Checkout session request."""

    plan: str
    success_url: str


class CheckoutSession(BaseModel):
    """Created checkout session."""

    session_id: str
    url: str


class SessionVerificationRequest(BaseModel):
    """Checkout session verification request."""

    session_id: str


class SessionVerification(BaseModel):
    """Result of verifying a checkout session."""

    success: bool
    organization_id: Optional[UUID] = None
    plan: Optional[OrganizationPlan] = None


class PortalSessionCreate(BaseModel):
    """Customer portal request."""

    return_url: str


class PortalSession(BaseModel):
    """Customer portal session."""

    url: str


class UsageQuota(BaseModel):
    """Usage of the current month against the organization's metered quota."""

    used: int
    quota: int
    percentage: int
    exceeded: bool
