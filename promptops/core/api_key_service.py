"""API key and webhook service for organizations."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from promptops import crud, schemas
from promptops.api.context import RequestContext
from promptops.core.exceptions import NotFoundException
from promptops.core.identifiers import generate_api_key, generate_webhook_secret, hash_token
from promptops.models import APIKey, Webhook


class APIKeyService:
    """Service for organization API keys and outgoing webhooks."""

    async def _ensure_organization(self, db: AsyncSession, organization_id: UUID) -> None:
        if not await crud.organization.get(db, id=organization_id):
            raise NotFoundException("Organization not found")

    async def create_api_key(
        self,
        db: AsyncSession,
        *,
        organization_id: UUID,
        key_in: schemas.APIKeyCreate,
        ctx: RequestContext,
    ) -> schemas.APIKeyWithToken:
        """Create an API key.

        Only the sha256 hash of the token is stored, so the returned token cannot be
        shown again.
        """
        await self._ensure_organization(db, organization_id)

        token = generate_api_key()
        api_key = await crud.api_key.create(
            db,
            obj_in={
                "organization_id": organization_id,
                "label": key_in.label,
                "scopes": key_in.scopes,
                "token_hash": hash_token(token),
            },
        )
        ctx.logger.with_context(organization_id=str(organization_id)).info(
            f"Created API key '{api_key.label}'"
        )
        return schemas.APIKeyWithToken(
            **schemas.APIKey.model_validate(api_key).model_dump(), token=token
        )

    async def list_api_keys(self, db: AsyncSession, *, organization_id: UUID) -> list[APIKey]:
        """List the API keys of an organization."""
        return await crud.api_key.get_multi_by_organization(db, organization_id=organization_id)

    async def revoke_api_key(
        self, db: AsyncSession, *, api_key_id: UUID, ctx: RequestContext
    ) -> APIKey:
        """Delete an API key. Calls using its token fail from now on."""
        api_key = await crud.api_key.get(db, id=api_key_id)
        if not api_key:
            raise NotFoundException("API key not found")
        await crud.api_key.remove(db, id=api_key_id)
        ctx.logger.with_context(organization_id=str(api_key.organization_id)).info(
            f"Revoked API key '{api_key.label}'"
        )
        return api_key

    async def create_webhook(
        self,
        db: AsyncSession,
        *,
        organization_id: UUID,
        webhook_in: schemas.WebhookCreate,
    ) -> Webhook:
        """Register a webhook with a freshly generated signing secret."""
        await self._ensure_organization(db, organization_id)
        return await crud.webhook.create(
            db,
            obj_in={
                "organization_id": organization_id,
                "url": str(webhook_in.url),
                "events": webhook_in.events,
                "secret": generate_webhook_secret(),
            },
        )

    async def list_webhooks(self, db: AsyncSession, *, organization_id: UUID) -> list[Webhook]:
        """List the webhooks of an organization."""
        return await crud.webhook.get_multi_by_organization(db, organization_id=organization_id)

    async def delete_webhook(self, db: AsyncSession, *, webhook_id: UUID) -> Webhook:
        """Delete a webhook."""
        webhook = await crud.webhook.get(db, id=webhook_id)
        if not webhook:
            raise NotFoundException("Webhook not found")
        return await crud.webhook.remove(db, id=webhook_id)


api_key_service = APIKeyService()
