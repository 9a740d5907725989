"""The API module that contains the endpoints for outgoing webhooks."""

from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from promptops import schemas
from promptops.api import deps
from promptops.api.router import TrailingSlashRouter
from promptops.core.api_key_service import api_key_service

router = TrailingSlashRouter()


@router.post("/organization/{organization_id}", response_model=schemas.Webhook)
async def create_webhook(
    *,
    db: AsyncSession = Depends(deps.get_db),
    organization_id: UUID,
    webhook_in: schemas.WebhookCreate,
) -> schemas.Webhook:
    """Register a webhook. The signing secret is generated by the server."""
    return await api_key_service.create_webhook(
        db, organization_id=organization_id, webhook_in=webhook_in
    )


@router.get("/organization/{organization_id}", response_model=list[schemas.Webhook])
async def read_webhooks(
    *, db: AsyncSession = Depends(deps.get_db), organization_id: UUID
) -> list[schemas.Webhook]:
    """List the webhooks of an organization."""
    return await api_key_service.list_webhooks(db, organization_id=organization_id)


@router.delete("/{webhook_id}", response_model=schemas.Webhook)
async def delete_webhook(
    *, db: AsyncSession = Depends(deps.get_db), webhook_id: UUID
) -> schemas.Webhook:
    """Delete a webhook."""
    return await api_key_service.delete_webhook(db, webhook_id=webhook_id)
