"""Pipeline service: lifecycle of pipelines and their simulated execution."""

import json
import time
from collections.abc import Mapping
from typing import Any, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from promptops import crud, schemas
from promptops.api.context import RequestContext
from promptops.core.exceptions import NotFoundException
from promptops.core.identifiers import generate_endpoint_slug
from promptops.core.pipeline_graph import GraphValidationResult, validate_graph
from promptops.core.shared_models import PipelineStatus
from promptops.models import Pipeline

DEFAULT_RESULT = {"message": "Pipeline executed successfully"}


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _soft_failure(error: str) -> schemas.PipelineExecutionResult:
    return schemas.PipelineExecutionResult(
        success=False, output={"error": error}, execution_time=0, node_results=[]
    )


class PipelineService:
    """Service for managing and executing pipelines."""

    async def create_pipeline(
        self, db: AsyncSession, *, pipeline_in: schemas.PipelineCreate, ctx: RequestContext
    ) -> Pipeline:
        """Create a draft pipeline in an existing project.

        Raises:
            NotFoundException: If the project does not exist.
        """
        project = await crud.project.get(db, id=pipeline_in.project_id)
        if not project:
            raise NotFoundException("Project not found")

        data = pipeline_in.model_dump()
        data["status"] = PipelineStatus.DRAFT
        pipeline = await crud.pipeline.create(db, obj_in=data)
        ctx.logger.with_context(pipeline_id=str(pipeline.id)).info(
            f"Created pipeline '{pipeline.name}' in project {project.id}"
        )
        return pipeline

    async def get_pipeline(self, db: AsyncSession, *, pipeline_id: UUID) -> Optional[Pipeline]:
        """Get a pipeline by id."""
        return await crud.pipeline.get(db, id=pipeline_id)

    async def list_pipelines_for_project(
        self, db: AsyncSession, *, project_id: UUID
    ) -> list[Pipeline]:
        """List the pipelines of a project, newest first."""
        return await crud.pipeline.get_multi_by_project(db, project_id=project_id)

    async def update_pipeline(
        self,
        db: AsyncSession,
        *,
        pipeline_id: UUID,
        pipeline_in: schemas.PipelineUpdate,
        ctx: RequestContext,
    ) -> Pipeline:
        """Apply a partial update to a pipeline.

        Raises:
            NotFoundException: If the pipeline does not exist.
        """
        pipeline = await crud.pipeline.get(db, id=pipeline_id)
        if not pipeline:
            raise NotFoundException("Pipeline not found")

        pipeline = await crud.pipeline.update(db, db_obj=pipeline, obj_in=pipeline_in)
        ctx.logger.with_context(pipeline_id=str(pipeline.id)).info("Updated pipeline")
        return pipeline

    async def publish_pipeline(
        self, db: AsyncSession, *, pipeline_id: UUID, ctx: RequestContext
    ) -> Pipeline:
        """Publish a pipeline, generating its endpoint slug if it has none.

        Publishing twice keeps the first slug.

        Raises:
            NotFoundException: If the pipeline does not exist.
        """
        pipeline = await crud.pipeline.get(db, id=pipeline_id)
        if not pipeline:
            raise NotFoundException("Pipeline not found")

        update: dict[str, Any] = {"status": PipelineStatus.PUBLISHED}
        if not pipeline.endpoint_slug:
            update["endpoint_slug"] = generate_endpoint_slug(pipeline.name)

        pipeline = await crud.pipeline.update(db, db_obj=pipeline, obj_in=update)
        ctx.logger.with_context(pipeline_id=str(pipeline.id)).info(
            f"Published pipeline at slug {pipeline.endpoint_slug}"
        )
        return pipeline

    def validate_graph(self, graph: Any) -> GraphValidationResult:
        """Validate a pipeline graph document."""
        return validate_graph(graph)

    async def execute_pipeline(
        self,
        db: AsyncSession,
        *,
        slug: str,
        input_data: dict[str, Any],
        api_key: str,
        ctx: RequestContext,
    ) -> schemas.PipelineExecutionResult:
        """Execute a published pipeline on behalf of an API key holder.

        Nodes are walked in document order and each produces a label describing what
        it would have done. Nothing is called. Unknown keys and pipelines that are
        missing, unpublished, owned by another organization or stored with malformed
        nodes are reported in the result instead of raised.

        Args:
            db: Database session
            slug: Endpoint slug of the pipeline
            input_data: Input passed to every node
            api_key: Plaintext organization API key
            ctx: Request context

        Returns:
            The execution result; ``success`` is False for every rejected call.
        """
        log = ctx.logger.with_context(pipeline_slug=slug)

        key = await crud.api_key.get_by_token(db, token=api_key)
        if not key:
            log.warning("Pipeline execution rejected: unknown API key")
            return _soft_failure("invalid API key")
        await crud.api_key.mark_used(db, db_obj=key)

        pipeline = await crud.pipeline.get_published_by_slug(
            db, slug=slug, organization_id=key.organization_id
        )
        if not pipeline:
            log.warning(
                f"Pipeline execution rejected: no published pipeline for organization "
                f"{key.organization_id}"
            )
            return _soft_failure("pipeline not found")

        nodes = pipeline.graph.get("nodes")
        if nodes is None:
            nodes = []
        if not isinstance(nodes, list) or not all(isinstance(n, Mapping) for n in nodes):
            log.with_context(pipeline_id=str(pipeline.id)).warning(
                "Pipeline execution rejected: stored graph has malformed nodes"
            )
            return _soft_failure("pipeline graph is malformed")

        started = time.perf_counter()
        serialized_input = json.dumps(input_data)
        node_results: list[schemas.NodeResult] = []
        for node in nodes:
            node_started = time.perf_counter()
            node_id = node.get("id")
            node_type = node.get("type")
            output = {
                "node_id": node_id,
                "type": node_type,
                "result": f"Processed {node_type} with input: {serialized_input}",
            }
            node_results.append(
                schemas.NodeResult(
                    node_id=str(node_id), output=output, duration=_elapsed_ms(node_started)
                )
            )

        result = node_results[-1].output if node_results else DEFAULT_RESULT
        execution_time = _elapsed_ms(started)
        log.with_context(pipeline_id=str(pipeline.id)).info(
            f"Executed pipeline with {len(node_results)} nodes in {execution_time}ms"
        )
        return schemas.PipelineExecutionResult(
            success=True,
            output={
                "pipeline_id": str(pipeline.id),
                "result": result,
                "processed_nodes": len(node_results),
            },
            execution_time=execution_time,
            node_results=node_results,
        )


pipeline_service = PipelineService()
