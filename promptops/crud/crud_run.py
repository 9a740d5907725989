"""CRUD operations for runs, including the aggregates used by billing and analytics."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.core.datetime_utils import to_utc_naive
from promptops.crud._base import CRUDBase
from promptops.models import Project, Run
from promptops.schemas.run import AnalyticsQuery, RunCreate


class CRUDRun(CRUDBase[Run, RunCreate, RunCreate]):
    """CRUD operations for the run model. Runs are append-only."""

    async def get_multi_by_project(
        self, db: AsyncSession, *, project_id: UUID, limit: int = 100
    ) -> list[Run]:
        """Get the most recent runs of a project."""
        query = (
            select(Run)
            .where(Run.project_id == project_id)
            .order_by(desc(Run.created_at))
            .limit(limit)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    def _filtered(self, query: AnalyticsQuery) -> Select:
        """Select the runs of an organization matching the analytics filters."""
        statement = (
            select(Run)
            .join(Project, Project.id == Run.project_id)
            .where(Project.organization_id == query.organization_id)
        )
        if query.project_id:
            statement = statement.where(Run.project_id == query.project_id)
        if query.start_date:
            statement = statement.where(Run.created_at >= to_utc_naive(query.start_date))
        if query.end_date:
            statement = statement.where(Run.created_at <= to_utc_naive(query.end_date))
        if query.model:
            statement = statement.where(Run.model == query.model)
        return statement

    async def get_multi_filtered(self, db: AsyncSession, *, query: AnalyticsQuery) -> list[Run]:
        """Get all runs matching the analytics filters, oldest first."""
        result = await db.execute(self._filtered(query).order_by(Run.created_at))
        return list(result.scalars().all())

    async def sum_tokens_in_since(
        self, db: AsyncSession, *, organization_id: UUID, since: datetime
    ) -> int:
        """Sum the input tokens of all runs of an organization created since ``since``.

        Args:
        ----
            db (AsyncSession): The database session.
            organization_id (UUID): The organization whose projects are counted.
            since (datetime): Inclusive lower bound on the run creation time (naive UTC).

        Returns:
        -------
            int: Total input tokens, 0 when there are no runs.

        """
        query = (
            select(func.coalesce(func.sum(Run.tokens_in), 0))
            .join(Project, Project.id == Run.project_id)
            .where(Project.organization_id == organization_id, Run.created_at >= since)
        )
        result = await db.execute(query)
        return int(result.scalar_one())


run = CRUDRun(Run)
