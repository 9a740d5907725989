"""Unit tests for the pipeline service."""

from unittest.mock import patch
from uuid import uuid4

import pytest

from promptops import crud, schemas
from promptops.core.api_key_service import api_key_service
from promptops.core.exceptions import NotFoundException
from promptops.core.organization_service import organization_service
from promptops.core.pipeline_service import DEFAULT_RESULT, pipeline_service

GRAPH = {
    "nodes": [{"id": "input", "type": "input"}, {"id": "llm", "type": "llm"}],
    "edges": [{"source": "input", "target": "llm"}],
}


async def _create_pipeline(db, project, ctx, name="Support Flow", graph=None):
    return await pipeline_service.create_pipeline(
        db,
        pipeline_in=schemas.PipelineCreate(
            project_id=project.id, name=name, graph=graph if graph is not None else GRAPH
        ),
        ctx=ctx,
    )


@pytest.mark.asyncio
class TestPipelineLifecycle:
    """Tests for creating, updating and publishing pipelines."""

    async def test_create_is_draft(self, db_session, test_project, ctx):
        """New pipelines start as drafts without a slug."""
        pipeline = await _create_pipeline(db_session, test_project, ctx)

        assert pipeline.status == "draft"
        assert pipeline.endpoint_slug is None
        assert pipeline.graph == GRAPH

    async def test_create_in_unknown_project(self, db_session, ctx):
        """Pipelines need an existing project."""
        with pytest.raises(NotFoundException, match="Project not found"):
            await pipeline_service.create_pipeline(
                db_session,
                pipeline_in=schemas.PipelineCreate(project_id=uuid4(), name="Orphan"),
                ctx=ctx,
            )

    async def test_publish_generates_slug_once(self, db_session, test_project, ctx):
        """Publishing sets a slug from the name and keeps it on republish."""
        pipeline = await _create_pipeline(db_session, test_project, ctx, name="My Flow!")

        with patch("promptops.core.identifiers.epoch_millis", return_value=1700000000000):
            published = await pipeline_service.publish_pipeline(
                db_session, pipeline_id=pipeline.id, ctx=ctx
            )

        assert published.status == "published"
        assert published.endpoint_slug == "my-flow--1700000000000"

        republished = await pipeline_service.publish_pipeline(
            db_session, pipeline_id=pipeline.id, ctx=ctx
        )
        assert republished.endpoint_slug == "my-flow--1700000000000"

    async def test_update_partial(self, db_session, test_project, ctx):
        """Only the provided fields change."""
        pipeline = await _create_pipeline(db_session, test_project, ctx)

        updated = await pipeline_service.update_pipeline(
            db_session,
            pipeline_id=pipeline.id,
            pipeline_in=schemas.PipelineUpdate(name="Renamed"),
            ctx=ctx,
        )

        assert updated.name == "Renamed"
        assert updated.graph == GRAPH

    async def test_update_and_publish_unknown(self, db_session, ctx):
        """Unknown pipelines are reported as not found."""
        with pytest.raises(NotFoundException, match="Pipeline not found"):
            await pipeline_service.update_pipeline(
                db_session, pipeline_id=uuid4(), pipeline_in=schemas.PipelineUpdate(), ctx=ctx
            )
        with pytest.raises(NotFoundException, match="Pipeline not found"):
            await pipeline_service.publish_pipeline(db_session, pipeline_id=uuid4(), ctx=ctx)

    async def test_list_for_project(self, db_session, test_project, ctx):
        """Pipelines are listed per project."""
        await _create_pipeline(db_session, test_project, ctx, name="One")
        await _create_pipeline(db_session, test_project, ctx, name="Two")

        pipelines = await pipeline_service.list_pipelines_for_project(
            db_session, project_id=test_project.id
        )

        assert {p.name for p in pipelines} == {"One", "Two"}


@pytest.mark.asyncio
class TestExecutePipeline:
    """Tests for execute_pipeline."""

    async def test_invalid_api_key(self, db_session, ctx):
        """Unknown keys are rejected in the result, not raised."""
        result = await pipeline_service.execute_pipeline(
            db_session, slug="anything", input_data={}, api_key="po_nope", ctx=ctx
        )

        assert result.success is False
        assert result.output == {"error": "invalid API key"}
        assert result.execution_time == 0
        assert result.node_results == []

    async def test_draft_pipeline_not_found(self, db_session, test_project, test_api_key, ctx):
        """A draft pipeline cannot be executed even with its slug."""
        pipeline = await _create_pipeline(db_session, test_project, ctx)
        await crud.pipeline.update(db_session, db_obj=pipeline, obj_in={"endpoint_slug": "draft"})

        result = await pipeline_service.execute_pipeline(
            db_session, slug="draft", input_data={}, api_key=test_api_key.token, ctx=ctx
        )

        assert result.success is False
        assert result.output == {"error": "pipeline not found"}

    async def test_other_organization_not_found(
        self, db_session, test_user, test_project, ctx
    ):
        """A key of another organization does not see the pipeline."""
        pipeline = await _create_pipeline(db_session, test_project, ctx)
        pipeline = await pipeline_service.publish_pipeline(
            db_session, pipeline_id=pipeline.id, ctx=ctx
        )
        other = await organization_service.create_organization(
            db_session,
            organization_in=schemas.OrganizationCreate(
                name="Other", slug="other", owner_user_id=test_user.id
            ),
            ctx=ctx,
        )
        other_key = await api_key_service.create_api_key(
            db_session,
            organization_id=other.id,
            key_in=schemas.APIKeyCreate(label="other"),
            ctx=ctx,
        )

        result = await pipeline_service.execute_pipeline(
            db_session,
            slug=pipeline.endpoint_slug,
            input_data={},
            api_key=other_key.token,
            ctx=ctx,
        )

        assert result.output == {"error": "pipeline not found"}

    async def test_published_pipeline(self, db_session, test_project, test_api_key, ctx):
        """Every node produces a labelled result and the last one is the output."""
        pipeline = await _create_pipeline(db_session, test_project, ctx)
        pipeline = await pipeline_service.publish_pipeline(
            db_session, pipeline_id=pipeline.id, ctx=ctx
        )

        result = await pipeline_service.execute_pipeline(
            db_session,
            slug=pipeline.endpoint_slug,
            input_data={"q": "hi"},
            api_key=test_api_key.token,
            ctx=ctx,
        )

        assert result.success is True
        assert [r.node_id for r in result.node_results] == ["input", "llm"]
        assert result.node_results[1].output == {
            "node_id": "llm",
            "type": "llm",
            "result": 'Processed llm with input: {"q": "hi"}',
        }
        assert result.output["pipeline_id"] == str(pipeline.id)
        assert result.output["processed_nodes"] == 2
        assert result.output["result"] == result.node_results[-1].output
        assert result.execution_time >= 0

        key = await crud.api_key.get(db_session, id=test_api_key.id)
        assert key.last_used_at is not None

    async def test_pipeline_without_nodes(self, db_session, test_project, test_api_key, ctx):
        """A graph without nodes returns the default result."""
        pipeline = await _create_pipeline(
            db_session, test_project, ctx, graph={"nodes": [], "edges": []}
        )
        pipeline = await pipeline_service.publish_pipeline(
            db_session, pipeline_id=pipeline.id, ctx=ctx
        )

        result = await pipeline_service.execute_pipeline(
            db_session,
            slug=pipeline.endpoint_slug,
            input_data={},
            api_key=test_api_key.token,
            ctx=ctx,
        )

        assert result.success is True
        assert result.output["result"] == DEFAULT_RESULT
        assert result.output["processed_nodes"] == 0

    @pytest.mark.parametrize(
        "graph",
        [
            {"nodes": 5, "edges": []},
            {"nodes": [None], "edges": []},
            {"nodes": [{"id": "a", "type": "input"}, "b"], "edges": []},
        ],
    )
    async def test_malformed_stored_graph(
        self, db_session, test_project, test_api_key, ctx, graph
    ):
        """A published graph with malformed nodes is rejected without raising."""
        pipeline = await _create_pipeline(db_session, test_project, ctx, graph=graph)
        pipeline = await pipeline_service.publish_pipeline(
            db_session, pipeline_id=pipeline.id, ctx=ctx
        )

        result = await pipeline_service.execute_pipeline(
            db_session,
            slug=pipeline.endpoint_slug,
            input_data={},
            api_key=test_api_key.token,
            ctx=ctx,
        )

        assert result.success is False
        assert result.output == {"error": "pipeline graph is malformed"}
        assert result.execution_time == 0
        assert result.node_results == []
