"""Template service: browsing templates and installing them into projects."""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from promptops import crud, schemas
from promptops.api.context import RequestContext
from promptops.core.exceptions import NotFoundException
from promptops.db.unit_of_work import UnitOfWork
from promptops.models import Template

INSTALLED_VERSION = "1.0.0"


class TemplateService:
    """Service for prompt templates."""

    async def list_public(self, db: AsyncSession) -> list[Template]:
        """List the templates shared with every organization."""
        return await crud.template.get_public(db)

    async def list_by_category(self, db: AsyncSession, *, category: str) -> list[Template]:
        """List the templates of a category."""
        return await crud.template.get_multi_by_category(db, category=category)

    async def get_template(self, db: AsyncSession, *, template_id: UUID) -> Optional[Template]:
        """Get a template by id."""
        return await crud.template.get(db, id=template_id)

    async def create_for_organization(
        self,
        db: AsyncSession,
        *,
        organization_id: UUID,
        template_in: schemas.TemplateCreate,
    ) -> Template:
        """Create a private template for an organization."""
        if not await crud.organization.get(db, id=organization_id):
            raise NotFoundException("Organization not found")
        return await crud.template.create(
            db, obj_in={**template_in.model_dump(), "organization_id": organization_id}
        )

    async def list_for_organization(
        self, db: AsyncSession, *, organization_id: UUID
    ) -> list[Template]:
        """List the private templates of an organization."""
        return await crud.template.get_multi_by_organization(
            db, organization_id=organization_id
        )

    async def install(
        self,
        db: AsyncSession,
        *,
        template_id: UUID,
        install_in: schemas.TemplateInstall,
        ctx: RequestContext,
    ) -> schemas.TemplateInstallResult:
        """Install a template into a project as a new prompt.

        The prompt, its first version and the pointer from the prompt to that version
        are written in one transaction.

        Args:
            db: Database session
            template_id: Template to install
            install_in: Target project and optional author
            ctx: Request context

        Returns:
            The ids of the created prompt and version

        Raises:
            NotFoundException: If the template or the project does not exist
        """
        template = await crud.template.get(db, id=template_id)
        if not template:
            raise NotFoundException("Template not found")
        if not await crud.project.get(db, id=install_in.project_id):
            raise NotFoundException("Project not found")

        content = template.content or {}
        async with UnitOfWork(db) as uow:
            prompt = await crud.prompt.create(
                db,
                obj_in={
                    "project_id": install_in.project_id,
                    "name": content.get("name") or template.name,
                    "description": content.get("description")
                    or f"Installed from {template.name} template",
                },
                uow=uow,
            )
            version = await crud.prompt_version.create(
                db,
                obj_in={
                    "prompt_id": prompt.id,
                    "version": INSTALLED_VERSION,
                    "content": content.get("content") or "",
                    "variables": content.get("variables") or {},
                    "test_inputs": content.get("test_inputs") or {},
                    "commit_message": f"Installed from template: {template.name}",
                    "created_by": install_in.created_by,
                },
                uow=uow,
            )
            await crud.prompt.update(
                db, db_obj=prompt, obj_in={"current_version_id": version.id}, uow=uow
            )

        ctx.logger.with_context(template_id=str(template.id), prompt_id=str(prompt.id)).info(
            f"Installed template into project {install_in.project_id}"
        )
        return schemas.TemplateInstallResult(prompt_id=prompt.id, version_id=version.id)


template_service = TemplateService()
