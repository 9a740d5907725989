"""Unit tests for the experiment service."""

from uuid import uuid4

import pytest

from promptops import schemas
from promptops.core.exceptions import DomainValidationError, InvalidStateError, NotFoundException
from promptops.core.experiment_service import experiment_service


async def _experiment(db, prompt, ctx, variants):
    return await experiment_service.create_experiment(
        db,
        experiment_in=schemas.ExperimentCreate(
            prompt_id=prompt.id, name="Tone test", variants=variants
        ),
        ctx=ctx,
    )


VARIANTS = {
    "formal": {"temperature": 0.2},
    "casual": {"temperature": 0.9},
    "pirate": {"temperature": 1.0},
}


@pytest.mark.asyncio
class TestExperimentLifecycle:
    """Tests for the experiment status transitions."""

    async def test_create_is_draft(self, db_session, test_prompt, ctx):
        """New experiments start as drafts."""
        experiment = await _experiment(db_session, test_prompt, ctx, VARIANTS)

        assert experiment.status == "draft"
        assert experiment.variants == VARIANTS

    async def test_unknown_prompt(self, db_session, ctx):
        """Experiments need an existing prompt."""
        prompt_id = uuid4()
        with pytest.raises(NotFoundException, match=f"Prompt with ID {prompt_id} not found"):
            await experiment_service.create_experiment(
                db_session,
                experiment_in=schemas.ExperimentCreate(prompt_id=prompt_id, name="x"),
                ctx=ctx,
            )

    async def test_start_and_stop(self, db_session, test_prompt, ctx):
        """Starting runs the experiment and stopping completes it."""
        experiment = await _experiment(db_session, test_prompt, ctx, VARIANTS)

        started = await experiment_service.start_experiment(
            db_session, experiment_id=experiment.id, ctx=ctx
        )
        assert started.status == "running"

        stopped = await experiment_service.stop_experiment(
            db_session, experiment_id=experiment.id, ctx=ctx
        )
        assert stopped.status == "completed"

        listed = await experiment_service.list_experiments_for_prompt(
            db_session, prompt_id=test_prompt.id
        )
        assert [e.id for e in listed] == [experiment.id]


@pytest.mark.asyncio
class TestRunComparison:
    """Tests for run_comparison."""

    async def test_compares_first_two_variants(self, db_session, test_prompt, ctx):
        """Only the first two variants, in insertion order, are run."""
        experiment = await _experiment(db_session, test_prompt, ctx, VARIANTS)
        await experiment_service.start_experiment(db_session, experiment_id=experiment.id, ctx=ctx)

        comparison = await experiment_service.run_comparison(
            db_session, experiment_id=experiment.id, input_data={"topic": "weather"}, ctx=ctx
        )

        assert comparison.variant_a.variant == "formal"
        assert comparison.variant_b.variant == "casual"
        assert comparison.variant_a.content == (
            'Response from formal with input: {"topic": "weather"}'
        )
        assert comparison.variant_a.variant_config == {"temperature": 0.2}
        assert 50 <= comparison.variant_b.tokens < 150
        assert 300 <= comparison.variant_b.latency < 500

    async def test_not_running(self, db_session, test_prompt, ctx):
        """Draft experiments cannot be compared."""
        experiment = await _experiment(db_session, test_prompt, ctx, VARIANTS)

        with pytest.raises(InvalidStateError, match="is not running"):
            await experiment_service.run_comparison(
                db_session, experiment_id=experiment.id, input_data={}, ctx=ctx
            )

    async def test_single_variant(self, db_session, test_prompt, ctx):
        """At least two variants are needed."""
        experiment = await _experiment(db_session, test_prompt, ctx, {"only": {}})
        await experiment_service.start_experiment(db_session, experiment_id=experiment.id, ctx=ctx)

        with pytest.raises(DomainValidationError, match="at least 2 variants"):
            await experiment_service.run_comparison(
                db_session, experiment_id=experiment.id, input_data={}, ctx=ctx
            )
