"""The API module that contains the endpoints for AI provider keys."""

from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from promptops import schemas
from promptops.api import deps
from promptops.api.context import RequestContext
from promptops.api.router import TrailingSlashRouter
from promptops.core.exceptions import NotFoundException
from promptops.core.provider_key_service import provider_key_service

router = TrailingSlashRouter()


@router.post("/", response_model=schemas.ProviderKey)
async def create_provider_key(
    *,
    db: AsyncSession = Depends(deps.get_db),
    key_in: schemas.ProviderKeyCreate,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.ProviderKey:
    """Store a provider key. The response never contains the key itself."""
    return await provider_key_service.create_provider_key(db, key_in=key_in, ctx=ctx)


@router.post("/test", response_model=schemas.ProviderKeyTestResult)
async def test_provider_key(key_in: schemas.ProviderKeyTest) -> schemas.ProviderKeyTestResult:
    """Check a provider key without storing it."""
    return provider_key_service.test_provider_key(key_in.provider, key_in.api_key)


@router.get("/organization/{organization_id}", response_model=list[schemas.ProviderKey])
async def read_organization_provider_keys(
    *, db: AsyncSession = Depends(deps.get_db), organization_id: UUID
) -> list[schemas.ProviderKey]:
    """List the provider keys of an organization."""
    return await provider_key_service.list_provider_keys(db, organization_id=organization_id)


@router.get("/organization/{organization_id}/{provider}", response_model=schemas.ProviderKey)
async def read_provider_key(
    *, db: AsyncSession = Depends(deps.get_db), organization_id: UUID, provider: str
) -> schemas.ProviderKey:
    """Get the key of one provider for an organization."""
    provider_key = await provider_key_service.get_provider_key(
        db, organization_id=organization_id, provider=provider
    )
    if not provider_key:
        raise NotFoundException("Provider key not found")
    return provider_key


@router.delete("/{key_id}", response_model=schemas.ProviderKey)
async def delete_provider_key(
    *, db: AsyncSession = Depends(deps.get_db), key_id: UUID
) -> schemas.ProviderKey:
    """Delete a provider key."""
    return await provider_key_service.delete_provider_key(db, key_id=key_id)
