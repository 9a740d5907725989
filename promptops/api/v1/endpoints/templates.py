"""The API module that contains the endpoints for prompt templates."""

from typing import Optional
from uuid import UUID

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from promptops import schemas
from promptops.api import deps
from promptops.api.context import RequestContext
from promptops.api.router import TrailingSlashRouter
from promptops.core.exceptions import NotFoundException
from promptops.core.template_service import template_service

router = TrailingSlashRouter()


@router.get("/", response_model=list[schemas.Template])
async def read_templates(
    *,
    db: AsyncSession = Depends(deps.get_db),
    category: Optional[str] = Query(None),
) -> list[schemas.Template]:
    """List the public templates, or every template of a category."""
    if category:
        return await template_service.list_by_category(db, category=category)
    return await template_service.list_public(db)


@router.post("/organization/{organization_id}", response_model=schemas.Template)
async def create_organization_template(
    *,
    db: AsyncSession = Depends(deps.get_db),
    organization_id: UUID,
    template_in: schemas.TemplateCreate,
) -> schemas.Template:
    """Create a private template for an organization."""
    return await template_service.create_for_organization(
        db, organization_id=organization_id, template_in=template_in
    )


@router.get("/organization/{organization_id}", response_model=list[schemas.Template])
async def read_organization_templates(
    *, db: AsyncSession = Depends(deps.get_db), organization_id: UUID
) -> list[schemas.Template]:
    """List the private templates of an organization."""
    return await template_service.list_for_organization(db, organization_id=organization_id)


@router.get("/{template_id}", response_model=schemas.Template)
async def read_template(
    *, db: AsyncSession = Depends(deps.get_db), template_id: UUID
) -> schemas.Template:
    """Get a template by id."""
    template = await template_service.get_template(db, template_id=template_id)
    if not template:
        raise NotFoundException("Template not found")
    return template


@router.post("/{template_id}/install", response_model=schemas.TemplateInstallResult)
async def install_template(
    *,
    db: AsyncSession = Depends(deps.get_db),
    template_id: UUID,
    install_in: schemas.TemplateInstall,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.TemplateInstallResult:
    """Install a template into a project as a new prompt with version 1.0.0."""
    return await template_service.install(
        db, template_id=template_id, install_in=install_in, ctx=ctx
    )
