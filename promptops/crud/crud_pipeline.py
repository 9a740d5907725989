"""CRUD operations for pipelines."""

from typing import Optional
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.core.shared_models import PipelineStatus
from promptops.crud._base import CRUDBase
from promptops.models import Pipeline, Project
from promptops.schemas.pipeline import PipelineCreate, PipelineUpdate


class CRUDPipeline(CRUDBase[Pipeline, PipelineCreate, PipelineUpdate]):
    """CRUD operations for the pipeline model."""

    async def get_multi_by_project(self, db: AsyncSession, *, project_id: UUID) -> list[Pipeline]:
        """Get all pipelines of a project, newest first."""
        query = (
            select(Pipeline)
            .where(Pipeline.project_id == project_id)
            .order_by(desc(Pipeline.created_at))
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_published_by_slug(
        self, db: AsyncSession, *, slug: str, organization_id: UUID
    ) -> Optional[Pipeline]:
        """Get a published pipeline by endpoint slug within one organization.

        Draft pipelines and pipelines of other organizations are not returned.
        """
        query = (
            select(Pipeline)
            .join(Project, Project.id == Pipeline.project_id)
            .where(
                Pipeline.endpoint_slug == slug,
                Pipeline.status == PipelineStatus.PUBLISHED.value,
                Project.organization_id == organization_id,
            )
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()


pipeline = CRUDPipeline(Pipeline)
