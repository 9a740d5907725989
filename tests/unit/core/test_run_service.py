"""Unit tests for the run service: recording, analytics and export."""

import json
from datetime import datetime, timezone
from uuid import uuid4

import pytest

from promptops import crud, schemas
from promptops.core.exceptions import NotFoundException
from promptops.core.run_service import CSV_COLUMNS, run_service
from promptops.core.shared_models import ExportFormat


async def _seed_run(db, project, prompt, version, **overrides):
    obj_in = {
        "project_id": project.id,
        "prompt_id": prompt.id,
        "version_id": version.id,
        "model": "gpt-4o",
        "input": {"q": "hi"},
        "output": {"text": "hello"},
        "tokens_in": 100,
        "tokens_out": 50,
        "cost_usd": 0.002,
        "latency_ms": 200,
        "success": True,
    }
    obj_in.update(overrides)
    return await crud.run.create(db, obj_in=obj_in)


@pytest.fixture
async def seeded_runs(db_session, test_project, test_prompt, test_version):
    """Three runs on two days and two models."""
    return [
        await _seed_run(
            db_session,
            test_project,
            test_prompt,
            test_version,
            created_at=datetime(2024, 3, 1, 10, 0),
        ),
        await _seed_run(
            db_session,
            test_project,
            test_prompt,
            test_version,
            model="claude-3",
            tokens_in=10,
            tokens_out=5,
            cost_usd=0.001,
            latency_ms=101,
            success=False,
            created_at=datetime(2024, 3, 1, 23, 59),
        ),
        await _seed_run(
            db_session,
            test_project,
            test_prompt,
            test_version,
            latency_ms=300,
            created_at=datetime(2024, 3, 2, 8, 30),
        ),
    ]


@pytest.mark.asyncio
class TestCreateRun:
    """Tests for create_run."""

    async def test_create_run(self, db_session, test_project, test_prompt, test_version, ctx):
        """Runs are stored with their cost."""
        run = await run_service.create_run(
            db_session,
            run_in=schemas.RunCreate(
                project_id=test_project.id,
                prompt_id=test_prompt.id,
                version_id=test_version.id,
                model="gpt-4o",
                tokens_in=12,
                tokens_out=34,
                cost_usd=0.000123,
                latency_ms=450,
                success=True,
            ),
            ctx=ctx,
        )

        assert run.tokens_in == 12
        assert float(run.cost_usd) == pytest.approx(0.000123)

        runs = await run_service.list_runs_for_project(db_session, project_id=test_project.id)
        assert [r.id for r in runs] == [run.id]

    async def test_unknown_version(self, db_session, test_project, test_prompt, ctx):
        """Every referenced object must exist."""
        version_id = uuid4()
        with pytest.raises(NotFoundException, match=f"Version with id {version_id} not found"):
            await run_service.create_run(
                db_session,
                run_in=schemas.RunCreate(
                    project_id=test_project.id,
                    prompt_id=test_prompt.id,
                    version_id=version_id,
                    model="gpt-4o",
                    tokens_in=1,
                    tokens_out=1,
                    cost_usd=0,
                    latency_ms=1,
                    success=True,
                ),
                ctx=ctx,
            )


@pytest.mark.asyncio
class TestAnalytics:
    """Tests for get_analytics."""

    async def test_aggregates(self, db_session, test_organization, seeded_runs):
        """Totals, averages and the per-day breakdown are computed over all matches."""
        analytics = await run_service.get_analytics(
            db_session, query=schemas.AnalyticsQuery(organization_id=test_organization.id)
        )

        assert analytics.total_runs == 3
        assert analytics.total_tokens == 150 + 15 + 150
        assert analytics.total_cost == pytest.approx(0.005)
        assert analytics.avg_latency == 200
        assert analytics.success_rate == pytest.approx(66.67)
        assert analytics.runs_by_model == {"gpt-4o": 2, "claude-3": 1}
        assert [(d.date, d.cost) for d in analytics.cost_by_day] == [
            ("2024-03-01", pytest.approx(0.003)),
            ("2024-03-02", pytest.approx(0.002)),
        ]

    async def test_filters(self, db_session, test_organization, seeded_runs):
        """Model and date filters narrow the matched runs."""
        analytics = await run_service.get_analytics(
            db_session,
            query=schemas.AnalyticsQuery(
                organization_id=test_organization.id,
                model="gpt-4o",
                start_date=datetime(2024, 3, 2, tzinfo=timezone.utc),
            ),
        )

        assert analytics.total_runs == 1
        assert analytics.avg_latency == 300

    async def test_empty(self, db_session, test_organization):
        """No runs yields zeros, not a division error."""
        analytics = await run_service.get_analytics(
            db_session, query=schemas.AnalyticsQuery(organization_id=test_organization.id)
        )

        assert analytics.total_runs == 0
        assert analytics.avg_latency == 0
        assert analytics.success_rate == 0.0
        assert analytics.cost_by_day == []

    async def test_other_organization_sees_nothing(self, db_session, seeded_runs):
        """Runs are scoped to the organization owning their project."""
        analytics = await run_service.get_analytics(
            db_session, query=schemas.AnalyticsQuery(organization_id=uuid4())
        )

        assert analytics.total_runs == 0


@pytest.mark.asyncio
class TestExport:
    """Tests for export_runs."""

    async def test_csv(self, db_session, test_organization, seeded_runs):
        """The CSV export has a header and one line per run, oldest first."""
        content = await run_service.export_runs(
            db_session,
            query=schemas.AnalyticsQuery(organization_id=test_organization.id),
            export_format=ExportFormat.CSV,
        )

        lines = content.strip().split("\n")
        assert lines[0] == ",".join(CSV_COLUMNS)
        assert len(lines) == 4
        assert lines[1].startswith(f"{seeded_runs[0].id},gpt-4o,100,50,")
        assert lines[1].endswith(",200,2024-03-01T10:00:00")

    async def test_json(self, db_session, test_organization, seeded_runs):
        """The JSON export is an array of full run records."""
        content = await run_service.export_runs(
            db_session,
            query=schemas.AnalyticsQuery(organization_id=test_organization.id),
            export_format=ExportFormat.JSON,
        )

        records = json.loads(content)
        assert [r["id"] for r in records] == [str(run.id) for run in seeded_runs]
        assert records[1]["model"] == "claude-3"
        assert records[1]["success"] is False
