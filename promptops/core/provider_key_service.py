"""Provider key service: encrypted storage of AI provider credentials."""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from promptops import crud, schemas
from promptops.api.context import RequestContext
from promptops.core import credentials
from promptops.core.exceptions import NotFoundException
from promptops.integrations import model_provider
from promptops.models import ProviderKey


class ProviderKeyService:
    """Service for provider keys. Plaintext keys never leave this module."""

    async def create_provider_key(
        self, db: AsyncSession, *, key_in: schemas.ProviderKeyCreate, ctx: RequestContext
    ) -> ProviderKey:
        """Encrypt and store a provider key."""
        if not await crud.organization.get(db, id=key_in.organization_id):
            raise NotFoundException("Organization not found")

        provider_key = await crud.provider_key.create(
            db,
            obj_in={
                "organization_id": key_in.organization_id,
                "provider": key_in.provider,
                "label": key_in.label,
                "encrypted_api_key": credentials.encrypt(key_in.api_key),
            },
        )
        ctx.logger.with_context(organization_id=str(key_in.organization_id)).info(
            f"Stored {key_in.provider.value} key '{key_in.label}'"
        )
        return provider_key

    async def list_provider_keys(
        self, db: AsyncSession, *, organization_id: UUID
    ) -> list[ProviderKey]:
        """List the provider keys of an organization."""
        return await crud.provider_key.get_multi_by_organization(
            db, organization_id=organization_id
        )

    async def get_provider_key(
        self, db: AsyncSession, *, organization_id: UUID, provider: str
    ) -> Optional[ProviderKey]:
        """Get the key of one provider for an organization."""
        return await crud.provider_key.get_by_provider(
            db, organization_id=organization_id, provider=provider
        )

    def decrypt_api_key(self, provider_key: ProviderKey) -> str:
        """Return the plaintext key for a call to the provider."""
        return credentials.decrypt(provider_key.encrypted_api_key)

    async def delete_provider_key(self, db: AsyncSession, *, key_id: UUID) -> ProviderKey:
        """Delete a provider key."""
        provider_key = await crud.provider_key.get(db, id=key_id)
        if not provider_key:
            raise NotFoundException("Provider key not found")
        return await crud.provider_key.remove(db, id=key_id)

    def test_provider_key(self, provider: str, api_key: str) -> schemas.ProviderKeyTestResult:
        """Check a key against its provider without storing it."""
        valid, error = model_provider.check_key(provider, api_key)
        return schemas.ProviderKeyTestResult(valid=valid, error=error)


provider_key_service = ProviderKeyService()
