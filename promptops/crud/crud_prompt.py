"""CRUD operations for prompts and prompt versions."""

from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.crud._base import CRUDBase
from promptops.models import Prompt, PromptVersion
from promptops.schemas.prompt import PromptCreate, PromptUpdate, PromptVersionCreate


class CRUDPrompt(CRUDBase[Prompt, PromptCreate, PromptUpdate]):
    """CRUD operations for the prompt model."""

    async def get_multi_by_project(self, db: AsyncSession, *, project_id: UUID) -> list[Prompt]:
        """Get all prompts of a project, newest first."""
        query = (
            select(Prompt).where(Prompt.project_id == project_id).order_by(desc(Prompt.created_at))
        )
        result = await db.execute(query)
        return list(result.scalars().all())


class CRUDPromptVersion(CRUDBase[PromptVersion, PromptVersionCreate, PromptVersionCreate]):
    """CRUD operations for prompt versions. Versions are never updated."""

    async def get_multi_by_prompt(
        self, db: AsyncSession, *, prompt_id: UUID
    ) -> list[PromptVersion]:
        """Get all versions of a prompt, newest first."""
        query = (
            select(PromptVersion)
            .where(PromptVersion.prompt_id == prompt_id)
            .order_by(desc(PromptVersion.created_at))
        )
        result = await db.execute(query)
        return list(result.scalars().all())


prompt = CRUDPrompt(Prompt)
prompt_version = CRUDPromptVersion(PromptVersion)
