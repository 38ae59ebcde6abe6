"""
Unit tests for domain/samples.py

The canned scenarios double as end-to-end checks: running each one through
the batch use case must produce the outcome the scenario declares.
"""

import pytest

from application.use_cases import BatchMigrationOptions
from domain.detection import detect_workout_format
from domain.models import WorkoutFormat
from domain.samples import (
    SAMPLE_GENERATORS,
    migration_scenarios,
    sample_strength_workout,
    sample_unified_workout,
)


@pytest.mark.unit
class TestSampleGenerators:
    """Tests for the sample record factories."""

    @pytest.mark.parametrize("kind", list(SAMPLE_GENERATORS))
    def test_generator_matches_its_format(self, kind):
        assert detect_workout_format(SAMPLE_GENERATORS[kind]()) == WorkoutFormat(kind)

    def test_overrides_replace_top_level_keys(self):
        record = sample_strength_workout(id="strength-42", name="Custom")
        assert record["id"] == "strength-42"
        assert record["name"] == "Custom"

    def test_each_call_returns_a_fresh_record(self):
        first = sample_strength_workout()
        first["exercises"].clear()
        assert len(sample_strength_workout()["exercises"]) == 2

    def test_unified_sample(self):
        record = sample_unified_workout("conditioning")
        assert record["type"] == "conditioning"
        assert record["metadata"]["category"] == "conditioning"
        assert detect_workout_format(record) == WorkoutFormat.UNIFIED


@pytest.mark.unit
class TestMigrationScenarios:
    """Scenario expectations agree with what the batch use case does."""

    def test_scenario_names(self):
        assert [s.name for s in migration_scenarios()] == [
            "All Valid Data",
            "Mixed Valid and Invalid",
            "Malformed Strength Data",
            "Large Dataset",
            "Already Migrated",
        ]

    def test_large_dataset_cycles_formats(self):
        large = next(s for s in migration_scenarios() if s.name == "Large Dataset")
        assert len(large.workouts) == 100
        formats = [detect_workout_format(w) for w in large.workouts[:4]]
        assert formats == WorkoutFormat.legacy()
        assert len({w["id"] for w in large.workouts}) == 100

    @pytest.mark.asyncio
    @pytest.mark.parametrize("scenario", migration_scenarios(), ids=lambda s: s.name)
    async def test_scenario_outcome(self, batch_use_case, scenario):
        result = await batch_use_case.execute(
            scenario.workouts, BatchMigrationOptions(batch_size=25)
        )
        summary = result.summary

        assert round(summary.successful / summary.total * 100) == scenario.expected_success_rate
        assert summary.failed == scenario.expected_errors
        assert summary.warnings == scenario.expected_warnings
