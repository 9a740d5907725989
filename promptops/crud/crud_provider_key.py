"""CRUD operations for provider keys."""

from typing import Optional
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.crud._base import CRUDBase
from promptops.models.provider_key import ProviderKey
from promptops.schemas.provider_key import ProviderKeyCreate


class CRUDProviderKey(CRUDBase[ProviderKey, ProviderKeyCreate, ProviderKeyCreate]):
    """CRUD operations for provider keys.

    Callers pass already-encrypted keys; this layer never sees plaintext.
    """

    async def get_multi_by_organization(
        self, db: AsyncSession, *, organization_id: UUID
    ) -> list[ProviderKey]:
        """Get all provider keys of an organization."""
        query = (
            select(ProviderKey)
            .where(ProviderKey.organization_id == organization_id)
            .order_by(desc(ProviderKey.created_at))
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_by_provider(
        self, db: AsyncSession, *, organization_id: UUID, provider: str
    ) -> Optional[ProviderKey]:
        """Get the most recently added key of a provider for an organization."""
        query = (
            select(ProviderKey)
            .where(ProviderKey.organization_id == organization_id, ProviderKey.provider == provider)
            .order_by(desc(ProviderKey.created_at))
        )
        result = await db.execute(query)
        return result.scalars().first()


provider_key = CRUDProviderKey(ProviderKey)
