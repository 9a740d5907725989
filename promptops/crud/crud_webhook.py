"""CRUD operations for webhooks."""

from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.crud._base import CRUDBase
from promptops.models.webhook import Webhook
from promptops.schemas.webhook import WebhookCreate


class CRUDWebhook(CRUDBase[Webhook, WebhookCreate, WebhookCreate]):
    """CRUD operations for the webhook model."""

    async def get_multi_by_organization(
        self, db: AsyncSession, *, organization_id: UUID
    ) -> list[Webhook]:
        """Get all webhooks of an organization, newest first."""
        query = (
            select(Webhook)
            .where(Webhook.organization_id == organization_id)
            .order_by(desc(Webhook.created_at))
        )
        result = await db.execute(query)
        return list(result.scalars().all())


webhook = CRUDWebhook(Webhook)
