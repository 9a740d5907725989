"""CRUD operations for the APIKey model."""

from typing import Optional
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.core.datetime_utils import utc_now_naive
from promptops.core.identifiers import hash_token
from promptops.crud._base import CRUDBase
from promptops.models.api_key import APIKey
from promptops.schemas.api_key import APIKeyCreate


class CRUDAPIKey(CRUDBase[APIKey, APIKeyCreate, APIKeyCreate]):
    """CRUD operations for the APIKey model."""

    async def get_by_token(self, db: AsyncSession, *, token: str) -> Optional[APIKey]:
        """Look up an API key by its plaintext token.

        Args:
        ----
            db (AsyncSession): The database session.
            token (str): The plaintext token presented by the caller.

        Returns:
        -------
            Optional[APIKey]: The matching key, None if the token is unknown.

        """
        result = await db.execute(select(APIKey).where(APIKey.token_hash == hash_token(token)))
        return result.scalar_one_or_none()

    async def mark_used(self, db: AsyncSession, *, db_obj: APIKey) -> APIKey:
        """Stamp the last use of a key."""
        db_obj.last_used_at = utc_now_naive()
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def get_multi_by_organization(
        self, db: AsyncSession, *, organization_id: UUID
    ) -> list[APIKey]:
        """Get all API keys of an organization, newest first."""
        query = (
            select(APIKey)
            .where(APIKey.organization_id == organization_id)
            .order_by(desc(APIKey.created_at))
        )
        result = await db.execute(query)
        return list(result.scalars().all())


api_key = CRUDAPIKey(APIKey)
