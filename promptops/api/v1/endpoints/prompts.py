"""The API module that contains the endpoints for prompts and prompt versions."""

from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from promptops import schemas
from promptops.api import deps
from promptops.api.context import RequestContext
from promptops.api.router import TrailingSlashRouter
from promptops.core.exceptions import NotFoundException
from promptops.core.prompt_service import prompt_service

router = TrailingSlashRouter()


@router.post("/", response_model=schemas.Prompt)
async def create_prompt(
    *,
    db: AsyncSession = Depends(deps.get_db),
    prompt_in: schemas.PromptCreate,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.Prompt:
    """Create a prompt in a project."""
    return await prompt_service.create_prompt(db, prompt_in=prompt_in, ctx=ctx)


@router.get("/project/{project_id}", response_model=list[schemas.Prompt])
async def read_project_prompts(
    *, db: AsyncSession = Depends(deps.get_db), project_id: UUID
) -> list[schemas.Prompt]:
    """List the prompts of a project."""
    return await prompt_service.list_prompts_for_project(db, project_id=project_id)


@router.post("/versions", response_model=schemas.PromptVersion)
async def create_prompt_version(
    *,
    db: AsyncSession = Depends(deps.get_db),
    version_in: schemas.PromptVersionCreate,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.PromptVersion:
    """Add a version to a prompt."""
    return await prompt_service.create_version(db, version_in=version_in, ctx=ctx)


@router.get("/versions/compare", response_model=schemas.PromptVersionComparison)
async def compare_prompt_versions(
    *,
    db: AsyncSession = Depends(deps.get_db),
    version1_id: UUID,
    version2_id: UUID,
) -> schemas.PromptVersionComparison:
    """Compare two versions of the same prompt.

    Args:
    ----
        db (AsyncSession): The database session.
        version1_id (UUID): The base version.
        version2_id (UUID): The version compared against the base.

    Returns:
    -------
        schemas.PromptVersionComparison: Both versions and the unified diff of their content.

    """
    return await prompt_service.compare_versions(
        db, version1_id=version1_id, version2_id=version2_id
    )


@router.get("/versions/{version_id}", response_model=schemas.PromptVersion)
async def read_prompt_version(
    *, db: AsyncSession = Depends(deps.get_db), version_id: UUID
) -> schemas.PromptVersion:
    """Get a prompt version by id."""
    version = await prompt_service.get_version(db, version_id=version_id)
    if not version:
        raise NotFoundException("Version not found")
    return version


@router.get("/{prompt_id}", response_model=schemas.Prompt)
async def read_prompt(
    *, db: AsyncSession = Depends(deps.get_db), prompt_id: UUID
) -> schemas.Prompt:
    """Get a prompt by id."""
    prompt = await prompt_service.get_prompt(db, prompt_id=prompt_id)
    if not prompt:
        raise NotFoundException("Prompt not found")
    return prompt


@router.patch("/{prompt_id}", response_model=schemas.Prompt)
async def update_prompt(
    *,
    db: AsyncSession = Depends(deps.get_db),
    prompt_id: UUID,
    prompt_in: schemas.PromptUpdate,
) -> schemas.Prompt:
    """Update a prompt."""
    return await prompt_service.update_prompt(db, prompt_id=prompt_id, prompt_in=prompt_in)


@router.get("/{prompt_id}/versions", response_model=list[schemas.PromptVersion])
async def read_prompt_versions(
    *, db: AsyncSession = Depends(deps.get_db), prompt_id: UUID
) -> list[schemas.PromptVersion]:
    """List the versions of a prompt, newest first."""
    return await prompt_service.list_versions(db, prompt_id=prompt_id)


@router.post("/{prompt_id}/promote", response_model=schemas.Prompt)
async def promote_prompt_version(
    *,
    db: AsyncSession = Depends(deps.get_db),
    prompt_id: UUID,
    promote_in: schemas.PromptVersionPromote,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.Prompt:
    """Make a version the current version of the prompt."""
    return await prompt_service.promote_version(
        db, prompt_id=prompt_id, version_id=promote_in.version_id, ctx=ctx
    )
