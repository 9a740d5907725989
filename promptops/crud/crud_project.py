"""CRUD operations for projects."""

from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.crud._base import CRUDBase
from promptops.models.project import Project
from promptops.schemas.project import ProjectCreate, ProjectUpdate


class CRUDProject(CRUDBase[Project, ProjectCreate, ProjectUpdate]):
    """CRUD operations for the project model."""

    async def get_multi_by_organization(
        self, db: AsyncSession, *, organization_id: UUID
    ) -> list[Project]:
        """Get all projects of an organization, newest first."""
        query = (
            select(Project)
            .where(Project.organization_id == organization_id)
            .order_by(desc(Project.created_at))
        )
        result = await db.execute(query)
        return list(result.scalars().all())


project = CRUDProject(Project)
