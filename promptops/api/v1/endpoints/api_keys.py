"""The API module that contains the endpoints for organization API keys."""

from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from promptops import schemas
from promptops.api import deps
from promptops.api.context import RequestContext
from promptops.api.router import TrailingSlashRouter
from promptops.core.api_key_service import api_key_service

router = TrailingSlashRouter()


@router.post("/organization/{organization_id}", response_model=schemas.APIKeyWithToken)
async def create_api_key(
    *,
    db: AsyncSession = Depends(deps.get_db),
    organization_id: UUID,
    key_in: schemas.APIKeyCreate,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.APIKeyWithToken:
    """Create an API key.

    The plaintext token is only part of this response.

    Args:
    ----
        db (AsyncSession): The database session.
        organization_id (UUID): The organization the key acts for.
        key_in (schemas.APIKeyCreate): Label and scopes of the key.
        ctx (RequestContext): The request context.

    Returns:
    -------
        schemas.APIKeyWithToken: The key including its token.

    """
    return await api_key_service.create_api_key(
        db, organization_id=organization_id, key_in=key_in, ctx=ctx
    )


@router.get("/organization/{organization_id}", response_model=list[schemas.APIKey])
async def read_api_keys(
    *, db: AsyncSession = Depends(deps.get_db), organization_id: UUID
) -> list[schemas.APIKey]:
    """List the API keys of an organization."""
    return await api_key_service.list_api_keys(db, organization_id=organization_id)


@router.delete("/{api_key_id}", response_model=schemas.APIKey)
async def revoke_api_key(
    *,
    db: AsyncSession = Depends(deps.get_db),
    api_key_id: UUID,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.APIKey:
    """Revoke an API key."""
    return await api_key_service.revoke_api_key(db, api_key_id=api_key_id, ctx=ctx)
