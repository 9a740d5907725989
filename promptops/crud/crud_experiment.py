"""CRUD operations for experiments."""

from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.crud._base import CRUDBase
from promptops.models.experiment import Experiment
from promptops.schemas.experiment import ExperimentCreate


class CRUDExperiment(CRUDBase[Experiment, ExperimentCreate, ExperimentCreate]):
    """CRUD operations for the experiment model."""

    async def get_multi_by_prompt(self, db: AsyncSession, *, prompt_id: UUID) -> list[Experiment]:
        """Get all experiments of a prompt, newest first."""
        query = (
            select(Experiment)
            .where(Experiment.prompt_id == prompt_id)
            .order_by(desc(Experiment.created_at))
        )
        result = await db.execute(query)
        return list(result.scalars().all())


experiment = CRUDExperiment(Experiment)
