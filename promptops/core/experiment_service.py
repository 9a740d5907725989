"""Experiment service: A/B tests between prompt variants."""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from promptops import crud, schemas
from promptops.api.context import RequestContext
from promptops.core.exceptions import DomainValidationError, InvalidStateError, NotFoundException
from promptops.core.shared_models import ExperimentStatus
from promptops.integrations import model_provider
from promptops.models import Experiment


class ExperimentService:
    """Service for experiments."""

    async def create_experiment(
        self, db: AsyncSession, *, experiment_in: schemas.ExperimentCreate, ctx: RequestContext
    ) -> Experiment:
        """Create a draft experiment on a prompt."""
        if not await crud.prompt.get(db, id=experiment_in.prompt_id):
            raise NotFoundException(f"Prompt with ID {experiment_in.prompt_id} not found")

        experiment = await crud.experiment.create(
            db, obj_in={**experiment_in.model_dump(), "status": ExperimentStatus.DRAFT}
        )
        ctx.logger.with_context(experiment_id=str(experiment.id)).info("Created experiment")
        return experiment

    async def get_experiment(
        self, db: AsyncSession, *, experiment_id: UUID
    ) -> Optional[Experiment]:
        """Get an experiment by id."""
        return await crud.experiment.get(db, id=experiment_id)

    async def list_experiments_for_prompt(
        self, db: AsyncSession, *, prompt_id: UUID
    ) -> list[Experiment]:
        """List the experiments of a prompt."""
        return await crud.experiment.get_multi_by_prompt(db, prompt_id=prompt_id)

    async def _set_status(
        self,
        db: AsyncSession,
        experiment_id: UUID,
        status: ExperimentStatus,
        ctx: RequestContext,
    ) -> Experiment:
        experiment = await crud.experiment.get(db, id=experiment_id)
        if not experiment:
            raise NotFoundException(f"Experiment with ID {experiment_id} not found")

        experiment = await crud.experiment.update(db, db_obj=experiment, obj_in={"status": status})
        ctx.logger.with_context(experiment_id=str(experiment_id)).info(
            f"Experiment is now {status.value}"
        )
        return experiment

    async def start_experiment(
        self, db: AsyncSession, *, experiment_id: UUID, ctx: RequestContext
    ) -> Experiment:
        """Mark an experiment as running."""
        return await self._set_status(db, experiment_id, ExperimentStatus.RUNNING, ctx)

    async def stop_experiment(
        self, db: AsyncSession, *, experiment_id: UUID, ctx: RequestContext
    ) -> Experiment:
        """Mark an experiment as completed."""
        return await self._set_status(db, experiment_id, ExperimentStatus.COMPLETED, ctx)

    async def run_comparison(
        self,
        db: AsyncSession,
        *,
        experiment_id: UUID,
        input_data: dict,
        ctx: RequestContext,
    ) -> schemas.ExperimentComparison:
        """Run the first two variants of a running experiment on the same input.

        Raises:
            NotFoundException: If the experiment does not exist.
            InvalidStateError: If the experiment is not running.
            DomainValidationError: If the experiment has fewer than two variants.
        """
        experiment = await crud.experiment.get(db, id=experiment_id)
        if not experiment:
            raise NotFoundException(f"Experiment with ID {experiment_id} not found")
        if experiment.status != ExperimentStatus.RUNNING.value:
            raise InvalidStateError(f"Experiment {experiment_id} is not running")

        variants = experiment.variants or {}
        keys = list(variants)
        if len(keys) < 2:
            raise DomainValidationError("Experiment must have at least 2 variants for comparison")

        results = [
            model_provider.run_variant(key, variants[key], input_data) for key in keys[:2]
        ]
        ctx.logger.with_context(experiment_id=str(experiment_id)).info(
            f"Compared variants {keys[0]} and {keys[1]}"
        )
        return schemas.ExperimentComparison(
            variant_a=schemas.VariantResult(**vars(results[0])),
            variant_b=schemas.VariantResult(**vars(results[1])),
        )


experiment_service = ExperimentService()
