"""Unit tests for the billing service and the Stripe webhook handler."""

from datetime import timedelta
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from promptops import crud
from promptops.core.billing_service import (
    FREE_TIER_QUOTA,
    billing_service,
    parse_plan,
    usage_percentage,
)
from promptops.core.datetime_utils import utc_now_naive
from promptops.core.exceptions import DomainValidationError, NotFoundException
from promptops.core.shared_models import OrganizationPlan
from promptops.core.stripe_webhook_handler import StripeWebhookHandler


async def _record_run(db, project, prompt, version, tokens_in, created_at=None):
    obj_in = {
        "project_id": project.id,
        "prompt_id": prompt.id,
        "version_id": version.id,
        "model": "gpt-4o",
        "tokens_in": tokens_in,
        "tokens_out": 10,
        "cost_usd": 0.01,
        "latency_ms": 120,
        "success": True,
    }
    if created_at is not None:
        obj_in["created_at"] = created_at
    return await crud.run.create(db, obj_in=obj_in)


class TestPlanHelpers:
    """Tests for the plan parsing and percentage helpers."""

    def test_parse_plan(self):
        """Known plan names parse to the enum."""
        assert parse_plan("enterprise") is OrganizationPlan.ENTERPRISE

    def test_parse_plan_rejects_unknown(self):
        """Unknown plans are a domain error."""
        with pytest.raises(DomainValidationError, match="Invalid plan"):
            parse_plan("platinum")

    @pytest.mark.parametrize(
        "used, quota, expected",
        [(0, 1000, 0), (150, 100, 150), (5, 1000, 1), (4, 1000, 0), (1, 0, 0)],
    )
    def test_usage_percentage_rounds_half_up(self, used, quota, expected):
        """Percentages are rounded half up and a zero quota reads as 0%."""
        assert usage_percentage(used, quota) == expected


@pytest.mark.asyncio
class TestUsageQuota:
    """Tests for check_usage_quota."""

    async def test_without_billing_row(
        self, db_session, test_organization, test_project, test_prompt, test_version
    ):
        """Organizations without billing get the free tier and no usage, whatever they ran."""
        await _record_run(db_session, test_project, test_prompt, test_version, 5000)

        with patch.object(
            crud.run, "sum_tokens_in_since", wraps=crud.run.sum_tokens_in_since
        ) as sum_tokens:
            quota = await billing_service.check_usage_quota(
                db_session, organization_id=test_organization.id
            )

        sum_tokens.assert_not_called()
        assert quota.used == 0
        assert quota.quota == FREE_TIER_QUOTA
        assert quota.percentage == 0
        assert quota.exceeded is False

    async def test_exceeded(
        self, db_session, test_organization, test_project, test_prompt, test_version
    ):
        """Usage above the metered quota is reported as exceeded."""
        await crud.billing.create(
            db_session,
            obj_in={"organization_id": test_organization.id, "plan": "free", "metered_quota": 100},
        )
        await _record_run(db_session, test_project, test_prompt, test_version, 150)

        quota = await billing_service.check_usage_quota(
            db_session, organization_id=test_organization.id
        )

        assert quota.used == 150
        assert quota.quota == 100
        assert quota.percentage == 150
        assert quota.exceeded is True

    async def test_only_counts_current_month(
        self, db_session, test_organization, test_project, test_prompt, test_version
    ):
        """Runs from before the start of the month are not counted."""
        await crud.billing.create(
            db_session, obj_in={"organization_id": test_organization.id, "metered_quota": 1000}
        )
        await _record_run(
            db_session,
            test_project,
            test_prompt,
            test_version,
            500,
            created_at=utc_now_naive() - timedelta(days=40),
        )
        await _record_run(db_session, test_project, test_prompt, test_version, 100)

        quota = await billing_service.check_usage_quota(
            db_session, organization_id=test_organization.id
        )

        assert quota.used == 100
        assert quota.percentage == 10
        assert quota.exceeded is False


@pytest.mark.asyncio
class TestUpdateOrganizationPlan:
    """Tests for update_organization_plan."""

    async def test_upgrade_to_pro(self, db_session, test_organization, ctx):
        """Moving to pro applies the plan defaults and mirrors the plan on the org."""
        billing = await billing_service.update_organization_plan(
            db_session,
            organization_id=test_organization.id,
            plan="pro",
            stripe_customer_id="cus_123",
            ctx=ctx,
        )

        assert billing.plan == "pro"
        assert billing.seats == 5
        assert billing.metered_quota == 10000
        assert billing.stripe_customer_id == "cus_123"
        expected_renewal = utc_now_naive() + timedelta(days=30)
        assert abs(billing.renews_at - expected_renewal) < timedelta(minutes=1)

        organization = await crud.organization.get(db_session, id=test_organization.id)
        await db_session.refresh(organization)
        assert organization.plan == "pro"

    async def test_downgrade_keeps_customer(self, db_session, test_organization, ctx):
        """Updating an existing row keeps the customer id when none is given."""
        await billing_service.update_organization_plan(
            db_session,
            organization_id=test_organization.id,
            plan="enterprise",
            stripe_customer_id="cus_abc",
            ctx=ctx,
        )

        billing = await billing_service.update_organization_plan(
            db_session, organization_id=test_organization.id, plan="free", ctx=ctx
        )

        assert billing.plan == "free"
        assert billing.seats == 1
        assert billing.metered_quota == 1000
        assert billing.renews_at is None
        assert billing.stripe_customer_id == "cus_abc"

    async def test_invalid_plan(self, db_session, test_organization, ctx):
        """Unknown plans are rejected without writing anything."""
        with pytest.raises(DomainValidationError):
            await billing_service.update_organization_plan(
                db_session, organization_id=test_organization.id, plan="gold", ctx=ctx
            )

        assert await billing_service.get_billing(
            db_session, organization_id=test_organization.id
        ) is None

    async def test_unknown_organization(self, db_session, ctx):
        """Unknown organizations are reported as not found."""
        with pytest.raises(NotFoundException, match="Organization not found"):
            await billing_service.update_organization_plan(
                db_session, organization_id=uuid4(), plan="pro", ctx=ctx
            )


@pytest.mark.asyncio
class TestCheckoutAndPortal:
    """Tests for the checkout and portal sessions without Stripe configured."""

    async def test_checkout_then_verify(self, db_session, test_organization, ctx):
        """A test checkout session verifies as a pro upgrade of its organization."""
        session = await billing_service.create_checkout_session(
            db_session,
            organization_id=test_organization.id,
            plan="pro",
            success_url="https://app.example.com/billing",
            ctx=ctx,
        )

        assert session.session_id.startswith("cs_test_")
        assert session.session_id.endswith(str(test_organization.id))
        assert session.url == f"https://checkout.stripe.com/c/pay/{session.session_id}"

        verification = await billing_service.verify_session(
            db_session, session_id=session.session_id, ctx=ctx
        )

        assert verification.success is True
        assert verification.organization_id == test_organization.id
        assert verification.plan == OrganizationPlan.PRO

    @pytest.mark.parametrize(
        "session_id",
        ["garbage", "cs_test_123_not-a-uuid", f"cs_test_123_{uuid4()}"],
    )
    async def test_verify_failures(self, db_session, ctx, session_id):
        """Malformed ids and unknown organizations verify as unsuccessful."""
        verification = await billing_service.verify_session(
            db_session, session_id=session_id, ctx=ctx
        )

        assert verification.success is False
        assert verification.organization_id is None

    async def test_verify_never_raises(self, ctx):
        """Unexpected errors while verifying are reported as unsuccessful."""
        with patch.object(
            billing_service, "_verify_test_session", AsyncMock(side_effect=RuntimeError("db"))
        ):
            verification = await billing_service.verify_session(
                AsyncMock(), session_id="cs_test_1_x", ctx=ctx
            )

        assert verification.success is False

    async def test_portal_without_billing(self, db_session, test_organization, ctx):
        """Organizations without a billing customer cannot open the portal."""
        with pytest.raises(NotFoundException, match="No billing information found"):
            await billing_service.create_portal_session(
                db_session,
                organization_id=test_organization.id,
                return_url="https://app.example.com",
                ctx=ctx,
            )

    async def test_portal_with_customer(self, db_session, test_organization, ctx):
        """A test portal URL is built from the customer id."""
        await billing_service.update_organization_plan(
            db_session,
            organization_id=test_organization.id,
            plan="pro",
            stripe_customer_id="cus_portal",
            ctx=ctx,
        )

        portal = await billing_service.create_portal_session(
            db_session,
            organization_id=test_organization.id,
            return_url="https://app.example.com",
            ctx=ctx,
        )

        assert portal.url == "https://billing.stripe.com/p/session_cus_portal"


@pytest.mark.asyncio
class TestStripeWebhookHandler:
    """Tests for the Stripe webhook handler."""

    async def test_invalid_event(self, db_session, ctx):
        """Events without a type are rejected."""
        handler = StripeWebhookHandler(db_session, ctx)

        with pytest.raises(DomainValidationError):
            await handler.handle_event({"data": {}})
        with pytest.raises(DomainValidationError):
            await handler.handle_event(None)

    async def test_unhandled_event_is_ignored(self, db_session, ctx):
        """Unknown event types are acknowledged without changes."""
        handler = StripeWebhookHandler(db_session, ctx)

        await handler.handle_event({"type": "charge.refunded", "data": {"object": {}}})

    async def test_subscription_updated_by_metadata(self, db_session, test_organization, ctx):
        """The plan in the subscription metadata is applied."""
        handler = StripeWebhookHandler(db_session, ctx)

        await handler.handle_event(
            {
                "type": "customer.subscription.updated",
                "data": {
                    "object": {
                        "customer": "cus_hook",
                        "metadata": {
                            "organization_id": str(test_organization.id),
                            "plan": "enterprise",
                        },
                    }
                },
            }
        )

        billing = await billing_service.get_billing(
            db_session, organization_id=test_organization.id
        )
        assert billing.plan == "enterprise"
        assert billing.seats == 20
        assert billing.stripe_customer_id == "cus_hook"

    async def test_subscription_deleted_by_customer(self, db_session, test_organization, ctx):
        """Deleting a subscription found through the customer id downgrades to free."""
        await billing_service.update_organization_plan(
            db_session,
            organization_id=test_organization.id,
            plan="pro",
            stripe_customer_id="cus_gone",
            ctx=ctx,
        )
        handler = StripeWebhookHandler(db_session, ctx)

        await handler.handle_event(
            {"type": "customer.subscription.deleted", "data": {"object": {"customer": "cus_gone"}}}
        )

        billing = await billing_service.get_billing(
            db_session, organization_id=test_organization.id
        )
        assert billing.plan == "free"
        assert billing.metered_quota == 1000
