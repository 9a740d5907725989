"""The API module that contains the endpoints for pipelines."""

from typing import Any
from uuid import UUID

from fastapi import Body, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from promptops import schemas
from promptops.api import deps
from promptops.api.context import RequestContext
from promptops.api.router import TrailingSlashRouter
from promptops.core.exceptions import NotFoundException
from promptops.core.pipeline_service import pipeline_service

router = TrailingSlashRouter()


@router.post("/", response_model=schemas.Pipeline)
async def create_pipeline(
    *,
    db: AsyncSession = Depends(deps.get_db),
    pipeline_in: schemas.PipelineCreate,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.Pipeline:
    """Create a draft pipeline."""
    return await pipeline_service.create_pipeline(db, pipeline_in=pipeline_in, ctx=ctx)


@router.post("/validate", response_model=schemas.GraphValidation)
async def validate_pipeline_graph(graph: Any = Body(...)) -> schemas.GraphValidation:
    """Validate a pipeline graph without storing it.

    Args:
    ----
        graph (Any): The graph document, normally ``{"nodes": [...], "edges": [...]}``.

    Returns:
    -------
        schemas.GraphValidation: Whether the graph is valid and every problem found.

    """
    return schemas.GraphValidation(**pipeline_service.validate_graph(graph).to_dict())


@router.post("/execute/{slug}", response_model=schemas.PipelineExecutionResult)
async def execute_pipeline(
    *,
    db: AsyncSession = Depends(deps.get_db),
    slug: str,
    execute_in: schemas.PipelineExecuteRequest,
    x_api_key: str = Header("", alias="X-API-Key"),
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.PipelineExecutionResult:
    """Execute a published pipeline with an organization API key.

    Rejected calls are answered with ``success: false`` and the reason in
    ``output.error``, not with an error status.
    """
    return await pipeline_service.execute_pipeline(
        db, slug=slug, input_data=execute_in.input, api_key=x_api_key, ctx=ctx
    )


@router.get("/project/{project_id}", response_model=list[schemas.Pipeline])
async def read_project_pipelines(
    *, db: AsyncSession = Depends(deps.get_db), project_id: UUID
) -> list[schemas.Pipeline]:
    """List the pipelines of a project."""
    return await pipeline_service.list_pipelines_for_project(db, project_id=project_id)


@router.get("/{pipeline_id}", response_model=schemas.Pipeline)
async def read_pipeline(
    *, db: AsyncSession = Depends(deps.get_db), pipeline_id: UUID
) -> schemas.Pipeline:
    """Get a pipeline by id."""
    pipeline = await pipeline_service.get_pipeline(db, pipeline_id=pipeline_id)
    if not pipeline:
        raise NotFoundException("Pipeline not found")
    return pipeline


@router.patch("/{pipeline_id}", response_model=schemas.Pipeline)
async def update_pipeline(
    *,
    db: AsyncSession = Depends(deps.get_db),
    pipeline_id: UUID,
    pipeline_in: schemas.PipelineUpdate,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.Pipeline:
    """Update a pipeline."""
    return await pipeline_service.update_pipeline(
        db, pipeline_id=pipeline_id, pipeline_in=pipeline_in, ctx=ctx
    )


@router.post("/{pipeline_id}/publish", response_model=schemas.Pipeline)
async def publish_pipeline(
    *,
    db: AsyncSession = Depends(deps.get_db),
    pipeline_id: UUID,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.Pipeline:
    """Publish a pipeline and assign its endpoint slug."""
    return await pipeline_service.publish_pipeline(db, pipeline_id=pipeline_id, ctx=ctx)
