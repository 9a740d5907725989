"""The API module that contains the endpoints for experiments."""

from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from promptops import schemas
from promptops.api import deps
from promptops.api.context import RequestContext
from promptops.api.router import TrailingSlashRouter
from promptops.core.exceptions import NotFoundException
from promptops.core.experiment_service import experiment_service

router = TrailingSlashRouter()


@router.post("/", response_model=schemas.Experiment)
async def create_experiment(
    *,
    db: AsyncSession = Depends(deps.get_db),
    experiment_in: schemas.ExperimentCreate,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.Experiment:
    """Create a draft experiment."""
    return await experiment_service.create_experiment(db, experiment_in=experiment_in, ctx=ctx)


@router.get("/prompt/{prompt_id}", response_model=list[schemas.Experiment])
async def read_prompt_experiments(
    *, db: AsyncSession = Depends(deps.get_db), prompt_id: UUID
) -> list[schemas.Experiment]:
    """List the experiments of a prompt."""
    return await experiment_service.list_experiments_for_prompt(db, prompt_id=prompt_id)


@router.get("/{experiment_id}", response_model=schemas.Experiment)
async def read_experiment(
    *, db: AsyncSession = Depends(deps.get_db), experiment_id: UUID
) -> schemas.Experiment:
    """Get an experiment by id."""
    experiment = await experiment_service.get_experiment(db, experiment_id=experiment_id)
    if not experiment:
        raise NotFoundException(f"Experiment with ID {experiment_id} not found")
    return experiment


@router.post("/{experiment_id}/start", response_model=schemas.Experiment)
async def start_experiment(
    *,
    db: AsyncSession = Depends(deps.get_db),
    experiment_id: UUID,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.Experiment:
    """Start an experiment."""
    return await experiment_service.start_experiment(db, experiment_id=experiment_id, ctx=ctx)


@router.post("/{experiment_id}/stop", response_model=schemas.Experiment)
async def stop_experiment(
    *,
    db: AsyncSession = Depends(deps.get_db),
    experiment_id: UUID,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.Experiment:
    """Stop an experiment."""
    return await experiment_service.stop_experiment(db, experiment_id=experiment_id, ctx=ctx)


@router.post("/{experiment_id}/compare", response_model=schemas.ExperimentComparison)
async def run_experiment_comparison(
    *,
    db: AsyncSession = Depends(deps.get_db),
    experiment_id: UUID,
    comparison_in: schemas.ExperimentComparisonRequest,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.ExperimentComparison:
    """Run the first two variants of a running experiment on one input."""
    return await experiment_service.run_comparison(
        db, experiment_id=experiment_id, input_data=comparison_in.input, ctx=ctx
    )
