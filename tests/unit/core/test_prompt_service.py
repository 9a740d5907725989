"""Unit tests for the prompt service."""

from uuid import uuid4

import pytest

from promptops import crud, schemas
from promptops.core.exceptions import DomainValidationError, NotFoundException
from promptops.core.prompt_service import prompt_service


async def _new_version(db, prompt, version, content, ctx):
    return await prompt_service.create_version(
        db,
        version_in=schemas.PromptVersionCreate(
            prompt_id=prompt.id, version=version, content=content
        ),
        ctx=ctx,
    )


@pytest.mark.asyncio
class TestPrompts:
    """Tests for prompt management."""

    async def test_create_and_list(self, db_session, test_project, ctx):
        """Prompts are created in a project without a current version."""
        prompt = await prompt_service.create_prompt(
            db_session,
            prompt_in=schemas.PromptCreate(project_id=test_project.id, name="Summarize"),
            ctx=ctx,
        )

        assert prompt.current_version_id is None
        prompts = await prompt_service.list_prompts_for_project(
            db_session, project_id=test_project.id
        )
        assert [p.id for p in prompts] == [prompt.id]

    async def test_create_in_unknown_project(self, db_session, ctx):
        """Prompts need an existing project."""
        with pytest.raises(NotFoundException, match="Project not found"):
            await prompt_service.create_prompt(
                db_session,
                prompt_in=schemas.PromptCreate(project_id=uuid4(), name="Lost"),
                ctx=ctx,
            )

    async def test_update_prompt(self, db_session, test_prompt):
        """Only the given fields are updated."""
        prompt = await prompt_service.update_prompt(
            db_session,
            prompt_id=test_prompt.id,
            prompt_in=schemas.PromptUpdate(description="New description"),
        )

        assert prompt.name == "Greeting"
        assert prompt.description == "New description"


@pytest.mark.asyncio
class TestVersions:
    """Tests for versions, promotion and comparison."""

    async def test_create_version_keeps_current(self, db_session, test_prompt, ctx):
        """Adding a version does not change the current version."""
        await _new_version(db_session, test_prompt, "1.0.0", "Hello", ctx)

        prompt = await crud.prompt.get(db_session, id=test_prompt.id)
        assert prompt.current_version_id is None

    async def test_create_version_unknown_author(self, db_session, test_prompt, ctx):
        """The author must be an existing user."""
        with pytest.raises(NotFoundException, match="User not found"):
            await prompt_service.create_version(
                db_session,
                version_in=schemas.PromptVersionCreate(
                    prompt_id=test_prompt.id, version="2.0.0", content="x", created_by=uuid4()
                ),
                ctx=ctx,
            )

    async def test_promote(self, db_session, test_prompt, test_version, ctx):
        """Promoting points the prompt at the version."""
        prompt = await prompt_service.promote_version(
            db_session, prompt_id=test_prompt.id, version_id=test_version.id, ctx=ctx
        )

        assert prompt.current_version_id == test_version.id

    async def test_promote_version_of_other_prompt(
        self, db_session, test_project, test_prompt, ctx
    ):
        """A version can only be promoted on its own prompt."""
        other = await crud.prompt.create(
            db_session, obj_in={"project_id": test_project.id, "name": "Other"}
        )
        foreign = await _new_version(db_session, other, "1.0.0", "Other", ctx)

        with pytest.raises(DomainValidationError, match="Version does not belong to prompt"):
            await prompt_service.promote_version(
                db_session, prompt_id=test_prompt.id, version_id=foreign.id, ctx=ctx
            )

    async def test_promote_unknown_version(self, db_session, test_prompt, ctx):
        """Unknown versions are reported as not found."""
        with pytest.raises(NotFoundException, match="Version not found"):
            await prompt_service.promote_version(
                db_session, prompt_id=test_prompt.id, version_id=uuid4(), ctx=ctx
            )

    async def test_compare(self, db_session, test_prompt, test_version, ctx):
        """Comparing returns both versions and a unified diff of their contents."""
        newer = await _new_version(
            db_session, test_prompt, "1.1.0", "Hello {{name}}\nWhat do you need?\n", ctx
        )

        comparison = await prompt_service.compare_versions(
            db_session, version1_id=test_version.id, version2_id=newer.id
        )

        assert comparison.version1.id == test_version.id
        assert comparison.version2.id == newer.id
        assert "--- 1.0.0" in comparison.diff
        assert "+++ 1.1.0" in comparison.diff
        assert "-How can I help?" in comparison.diff
        assert "+What do you need?" in comparison.diff

    async def test_list_versions(self, db_session, test_prompt, test_version, ctx):
        """All versions of a prompt are listed."""
        newer = await _new_version(db_session, test_prompt, "2.0.0", "Hi", ctx)

        versions = await prompt_service.list_versions(db_session, prompt_id=test_prompt.id)

        assert {v.id for v in versions} == {test_version.id, newer.id}
