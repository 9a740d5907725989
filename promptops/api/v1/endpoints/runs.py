"""The API module that contains the endpoints for runs and analytics."""

from uuid import UUID

from fastapi import Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from promptops import schemas
from promptops.api import deps
from promptops.api.context import RequestContext
from promptops.api.router import TrailingSlashRouter
from promptops.core.exceptions import NotFoundException
from promptops.core.run_service import run_service
from promptops.core.shared_models import ExportFormat

router = TrailingSlashRouter()

_EXPORT_MEDIA_TYPES = {ExportFormat.CSV: "text/csv", ExportFormat.JSON: "application/json"}


@router.post("/", response_model=schemas.Run)
async def create_run(
    *,
    db: AsyncSession = Depends(deps.get_db),
    run_in: schemas.RunCreate,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.Run:
    """Record a run."""
    return await run_service.create_run(db, run_in=run_in, ctx=ctx)


@router.post("/analytics", response_model=schemas.Analytics)
async def read_analytics(
    *, db: AsyncSession = Depends(deps.get_db), query: schemas.AnalyticsQuery
) -> schemas.Analytics:
    """Aggregate the runs of an organization.

    Args:
    ----
        db (AsyncSession): The database session.
        query (schemas.AnalyticsQuery): Organization plus optional project, date range
            and model filters.

    Returns:
    -------
        schemas.Analytics: Totals, success rate, runs per model and cost per day.

    """
    return await run_service.get_analytics(db, query=query)


@router.post("/export")
async def export_runs(
    *, db: AsyncSession = Depends(deps.get_db), export_in: schemas.RunExportRequest
) -> Response:
    """Export the matching runs as a CSV or JSON download."""
    content = await run_service.export_runs(
        db, query=export_in.query, export_format=export_in.format
    )
    return Response(
        content=content,
        media_type=_EXPORT_MEDIA_TYPES[export_in.format],
        headers={"Content-Disposition": f'attachment; filename="runs.{export_in.format.value}"'},
    )


@router.get("/project/{project_id}", response_model=list[schemas.Run])
async def read_project_runs(
    *,
    db: AsyncSession = Depends(deps.get_db),
    project_id: UUID,
    limit: int = Query(100, ge=1, le=1000),
) -> list[schemas.Run]:
    """List the most recent runs of a project."""
    return await run_service.list_runs_for_project(db, project_id=project_id, limit=limit)


@router.get("/{run_id}", response_model=schemas.Run)
async def read_run(*, db: AsyncSession = Depends(deps.get_db), run_id: UUID) -> schemas.Run:
    """Get a run by id."""
    run = await run_service.get_run(db, run_id=run_id)
    if not run:
        raise NotFoundException("Run not found")
    return run
