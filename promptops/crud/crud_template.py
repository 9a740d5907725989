"""CRUD operations for templates."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.crud._base import CRUDBase
from promptops.models.template import Template
from promptops.schemas.template import TemplateCreate


class CRUDTemplate(CRUDBase[Template, TemplateCreate, TemplateCreate]):
    """CRUD operations for the template model."""

    async def get_public(self, db: AsyncSession) -> list[Template]:
        """Get all templates that do not belong to an organization."""
        query = select(Template).where(Template.organization_id.is_(None)).order_by(Template.name)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_multi_by_category(self, db: AsyncSession, *, category: str) -> list[Template]:
        """Get all templates of a category."""
        query = select(Template).where(Template.category == category).order_by(Template.name)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_multi_by_organization(
        self, db: AsyncSession, *, organization_id: UUID
    ) -> list[Template]:
        """Get the private templates of an organization."""
        query = (
            select(Template)
            .where(Template.organization_id == organization_id)
            .order_by(Template.name)
        )
        result = await db.execute(query)
        return list(result.scalars().all())


template = CRUDTemplate(Template)
