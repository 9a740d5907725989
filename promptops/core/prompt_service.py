"""Prompt service: prompts, their versions and version promotion."""

import difflib
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from promptops import crud, schemas
from promptops.api.context import RequestContext
from promptops.core.exceptions import DomainValidationError, NotFoundException
from promptops.models import Prompt, PromptVersion


def content_diff(old: PromptVersion, new: PromptVersion) -> str:
    """Unified diff between the contents of two versions."""
    return "".join(
        difflib.unified_diff(
            old.content.splitlines(keepends=True),
            new.content.splitlines(keepends=True),
            fromfile=old.version,
            tofile=new.version,
        )
    )


class PromptService:
    """Service for prompts and prompt versions."""

    async def create_prompt(
        self, db: AsyncSession, *, prompt_in: schemas.PromptCreate, ctx: RequestContext
    ) -> Prompt:
        """Create a prompt in a project."""
        if not await crud.project.get(db, id=prompt_in.project_id):
            raise NotFoundException("Project not found")
        prompt = await crud.prompt.create(db, obj_in=prompt_in)
        ctx.logger.with_context(prompt_id=str(prompt.id)).info("Created prompt")
        return prompt

    async def get_prompt(self, db: AsyncSession, *, prompt_id: UUID) -> Optional[Prompt]:
        """Get a prompt by id."""
        return await crud.prompt.get(db, id=prompt_id)

    async def list_prompts_for_project(
        self, db: AsyncSession, *, project_id: UUID
    ) -> list[Prompt]:
        """List the prompts of a project."""
        return await crud.prompt.get_multi_by_project(db, project_id=project_id)

    async def update_prompt(
        self, db: AsyncSession, *, prompt_id: UUID, prompt_in: schemas.PromptUpdate
    ) -> Prompt:
        """Update the name or description of a prompt."""
        prompt = await crud.prompt.get(db, id=prompt_id)
        if not prompt:
            raise NotFoundException("Prompt not found")
        return await crud.prompt.update(db, db_obj=prompt, obj_in=prompt_in)

    async def create_version(
        self, db: AsyncSession, *, version_in: schemas.PromptVersionCreate, ctx: RequestContext
    ) -> PromptVersion:
        """Add a version to a prompt. The current version is not changed."""
        if not await crud.prompt.get(db, id=version_in.prompt_id):
            raise NotFoundException("Prompt not found")
        if version_in.created_by and not await crud.user.get(db, id=version_in.created_by):
            raise NotFoundException("User not found")

        version = await crud.prompt_version.create(db, obj_in=version_in)
        ctx.logger.with_context(prompt_id=str(version.prompt_id)).info(
            f"Created prompt version {version.version}"
        )
        return version

    async def get_version(
        self, db: AsyncSession, *, version_id: UUID
    ) -> Optional[PromptVersion]:
        """Get a prompt version by id."""
        return await crud.prompt_version.get(db, id=version_id)

    async def list_versions(self, db: AsyncSession, *, prompt_id: UUID) -> list[PromptVersion]:
        """List the versions of a prompt, newest first."""
        return await crud.prompt_version.get_multi_by_prompt(db, prompt_id=prompt_id)

    async def promote_version(
        self, db: AsyncSession, *, prompt_id: UUID, version_id: UUID, ctx: RequestContext
    ) -> Prompt:
        """Make a version the current version of its prompt.

        Raises:
            NotFoundException: If the prompt or the version does not exist.
            DomainValidationError: If the version belongs to another prompt.
        """
        prompt = await crud.prompt.get(db, id=prompt_id)
        if not prompt:
            raise NotFoundException("Prompt not found")
        version = await crud.prompt_version.get(db, id=version_id)
        if not version:
            raise NotFoundException("Version not found")
        if version.prompt_id != prompt.id:
            raise DomainValidationError("Version does not belong to prompt")

        prompt = await crud.prompt.update(
            db, db_obj=prompt, obj_in={"current_version_id": version.id}
        )
        ctx.logger.with_context(prompt_id=str(prompt.id)).info(
            f"Promoted version {version.version}"
        )
        return prompt

    async def compare_versions(
        self, db: AsyncSession, *, version1_id: UUID, version2_id: UUID
    ) -> schemas.PromptVersionComparison:
        """Return two versions of the same prompt and the diff of their contents."""
        version1 = await crud.prompt_version.get(db, id=version1_id)
        if not version1:
            raise NotFoundException("Version 1 not found")
        version2 = await crud.prompt_version.get(db, id=version2_id)
        if not version2:
            raise NotFoundException("Version 2 not found")
        if version1.prompt_id != version2.prompt_id:
            raise DomainValidationError("Versions must belong to the same prompt")

        return schemas.PromptVersionComparison(
            version1=schemas.PromptVersion.model_validate(version1),
            version2=schemas.PromptVersion.model_validate(version2),
            diff=content_diff(version1, version2),
        )


prompt_service = PromptService()
