"""The API module that contains the endpoints for projects."""

from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from promptops import crud, schemas
from promptops.api import deps
from promptops.api.context import RequestContext
from promptops.api.router import TrailingSlashRouter
from promptops.core.exceptions import NotFoundException

router = TrailingSlashRouter()


@router.post("/", response_model=schemas.Project)
async def create_project(
    *,
    db: AsyncSession = Depends(deps.get_db),
    project_in: schemas.ProjectCreate,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.Project:
    """Create a project in an organization.

    Args:
    ----
        db (AsyncSession): The database session.
        project_in (schemas.ProjectCreate): The project to create.
        ctx (RequestContext): The request context.

    Returns:
    -------
        schemas.Project: The created project.

    """
    if not await crud.organization.get(db, id=project_in.organization_id):
        raise NotFoundException("Organization not found")
    project = await crud.project.create(db, obj_in=project_in)
    ctx.logger.with_context(project_id=str(project.id)).info("Created project")
    return project


@router.get("/organization/{organization_id}", response_model=list[schemas.Project])
async def read_organization_projects(
    *, db: AsyncSession = Depends(deps.get_db), organization_id: UUID
) -> list[schemas.Project]:
    """List the projects of an organization."""
    return await crud.project.get_multi_by_organization(db, organization_id=organization_id)


@router.get("/{project_id}", response_model=schemas.Project)
async def read_project(
    *, db: AsyncSession = Depends(deps.get_db), project_id: UUID
) -> schemas.Project:
    """Get a project by id."""
    project = await crud.project.get(db, id=project_id)
    if not project:
        raise NotFoundException("Project not found")
    return project


@router.patch("/{project_id}", response_model=schemas.Project)
async def update_project(
    *,
    db: AsyncSession = Depends(deps.get_db),
    project_id: UUID,
    project_in: schemas.ProjectUpdate,
) -> schemas.Project:
    """Update a project."""
    project = await crud.project.get(db, id=project_id)
    if not project:
        raise NotFoundException("Project not found")
    return await crud.project.update(db, db_obj=project, obj_in=project_in)


@router.delete("/{project_id}", response_model=schemas.Project)
async def delete_project(
    *,
    db: AsyncSession = Depends(deps.get_db),
    project_id: UUID,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.Project:
    """Delete a project with everything inside it."""
    project = await crud.project.get(db, id=project_id)
    if not project:
        raise NotFoundException("Project not found")
    await crud.project.remove(db, id=project_id)
    ctx.logger.with_context(project_id=str(project_id)).info("Deleted project")
    return project
