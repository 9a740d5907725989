"""Run service: recording runs and aggregating them for analytics and export."""

import csv
import io
import json
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from promptops import crud, schemas
from promptops.api.context import RequestContext
from promptops.core.exceptions import NotFoundException
from promptops.core.shared_models import ExportFormat
from promptops.models import Run

CSV_COLUMNS = ["id", "model", "tokens_in", "tokens_out", "cost_usd", "latency_ms", "created_at"]


def _half_up(value: Decimal, places: int = 0) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


class RunService:
    """Service for runs."""

    async def create_run(
        self, db: AsyncSession, *, run_in: schemas.RunCreate, ctx: RequestContext
    ) -> Run:
        """Record a run after checking every referenced object exists."""
        if not await crud.project.get(db, id=run_in.project_id):
            raise NotFoundException(f"Project with id {run_in.project_id} not found")
        if not await crud.prompt.get(db, id=run_in.prompt_id):
            raise NotFoundException(f"Prompt with id {run_in.prompt_id} not found")
        if not await crud.prompt_version.get(db, id=run_in.version_id):
            raise NotFoundException(f"Version with id {run_in.version_id} not found")
        if run_in.experiment_id and not await crud.experiment.get(db, id=run_in.experiment_id):
            raise NotFoundException(f"Experiment with id {run_in.experiment_id} not found")

        data = run_in.model_dump()
        data["cost_usd"] = Decimal(str(run_in.cost_usd))
        run = await crud.run.create(db, obj_in=data)
        ctx.logger.with_context(run_id=str(run.id), project_id=str(run.project_id)).info(
            f"Recorded run on {run.model}"
        )
        return run

    async def get_run(self, db: AsyncSession, *, run_id: UUID) -> Optional[Run]:
        """Get a run by id."""
        return await crud.run.get(db, id=run_id)

    async def list_runs_for_project(
        self, db: AsyncSession, *, project_id: UUID, limit: int = 100
    ) -> list[Run]:
        """List the most recent runs of a project."""
        return await crud.run.get_multi_by_project(db, project_id=project_id, limit=limit)

    async def get_analytics(
        self, db: AsyncSession, *, query: schemas.AnalyticsQuery
    ) -> schemas.Analytics:
        """Aggregate the runs matching the query.

        Totals are computed from the matching rows; ``cost_by_day`` is keyed by the
        UTC date of each run and sorted ascending.
        """
        runs = await crud.run.get_multi_filtered(db, query=query)
        total_runs = len(runs)

        total_tokens = 0
        total_cost = Decimal(0)
        total_latency = 0
        successes = 0
        runs_by_model: dict[str, int] = defaultdict(int)
        cost_by_day: dict[str, Decimal] = defaultdict(Decimal)

        for run in runs:
            cost = Decimal(run.cost_usd)
            total_tokens += run.tokens_in + run.tokens_out
            total_cost += cost
            total_latency += run.latency_ms
            successes += 1 if run.success else 0
            runs_by_model[run.model] += 1
            cost_by_day[run.created_at.date().isoformat()] += cost

        if total_runs:
            avg_latency = int(_half_up(Decimal(total_latency) / total_runs))
            success_rate = float(_half_up(Decimal(successes) * 100 / total_runs, 2))
        else:
            avg_latency = 0
            success_rate = 0.0

        return schemas.Analytics(
            total_runs=total_runs,
            total_tokens=total_tokens,
            total_cost=float(_half_up(total_cost, 6)),
            avg_latency=avg_latency,
            success_rate=success_rate,
            runs_by_model=dict(runs_by_model),
            cost_by_day=[
                schemas.CostByDay(date=day, cost=float(_half_up(cost, 6)))
                for day, cost in sorted(cost_by_day.items())
            ],
        )

    async def export_runs(
        self, db: AsyncSession, *, query: schemas.AnalyticsQuery, export_format: ExportFormat
    ) -> str:
        """Export the runs matching the query as CSV or as a JSON array."""
        runs = await crud.run.get_multi_filtered(db, query=query)

        if export_format == ExportFormat.JSON:
            return json.dumps(
                [schemas.Run.model_validate(run).model_dump(mode="json") for run in runs]
            )

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_COLUMNS)
        for run in runs:
            writer.writerow(
                [
                    run.id,
                    run.model,
                    run.tokens_in,
                    run.tokens_out,
                    run.cost_usd,
                    run.latency_ms,
                    run.created_at.isoformat(),
                ]
            )
        return buffer.getvalue()


run_service = RunService()
