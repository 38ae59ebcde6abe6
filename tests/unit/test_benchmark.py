"""
Unit tests for backend/benchmark.py
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from application.use_cases import BatchMigrationOptions
from backend.benchmark import (
    BenchmarkOptions,
    PerformanceTestResult,
    ValidationTestResult,
    generate_test_report,
    run_migration_benchmark,
    run_performance_test,
    run_quick_migration_test,
    run_validation_tests,
)
from domain.samples import migration_scenarios


def _scenario(name):
    return next(s for s in migration_scenarios() if s.name == name)


def _perf(throughput=100.0, memory_usage=0, success=True):
    return PerformanceTestResult(
        scenario="s",
        total_workouts=10,
        duration_ms=100,
        throughput=throughput,
        average_time_per_workout=10,
        memory_usage=memory_usage,
        success=success,
    )


@pytest.mark.unit
class TestRunValidationTests:
    """Tests for per-record validation runs."""

    def test_valid_records(self):
        results = run_validation_tests(_scenario("All Valid Data").workouts)

        assert len(results) == 4
        assert all(r.is_valid for r in results)
        assert [r.original_format for r in results] == [
            "strength",
            "conditioning",
            "hybrid",
            "agility",
        ]
        assert results[0].workout_id == "strength-1"
        assert results[0].migration_result.success

    def test_invalid_records(self):
        results = run_validation_tests(_scenario("Mixed Valid and Invalid").workouts)

        assert [r.is_valid for r in results] == [True, False, True, False, True, False]
        assert results[3].workout_id == "workout-3"
        assert results[3].errors == ["Unknown format: unknown"]
        assert results[3].migration_result is None

    def test_warnings_collected(self):
        hybrid = _scenario("All Valid Data").workouts[2]
        hybrid["blocks"].append({"type": "yoga"})
        result = run_validation_tests([hybrid])[0]

        assert result.is_valid
        assert result.warnings == ["Unknown block type: yoga"]


@pytest.mark.unit
class TestRunPerformanceTest:
    """Tests for single-scenario timing."""

    @pytest.mark.asyncio
    async def test_success(self, batch_use_case):
        result = await run_performance_test(
            _scenario("All Valid Data"), BatchMigrationOptions(), batch_use_case
        )

        assert result.success
        assert result.scenario == "All Valid Data"
        assert result.total_workouts == 4
        assert result.duration_ms >= 0
        assert result.memory_usage >= 0

    @pytest.mark.asyncio
    async def test_failure(self):
        use_case = MagicMock()
        use_case.execute = AsyncMock(side_effect=RuntimeError("exploded"))

        result = await run_performance_test(
            _scenario("All Valid Data"), BatchMigrationOptions(), use_case
        )

        assert not result.success
        assert result.errors == ["exploded"]
        assert result.throughput == 0


@pytest.mark.unit
class TestRunMigrationBenchmark:
    """Tests for the batch-size sweep."""

    @pytest.mark.asyncio
    async def test_one_result_per_iteration(self, batch_use_case):
        workouts = _scenario("Large Dataset").workouts[:12]
        options = BenchmarkOptions(iterations=2, warmup_runs=1, batch_sizes=[5, 10])

        results = await run_migration_benchmark(workouts, options, batch_use_case)

        assert list(results) == [5, 10]
        assert [r.scenario for r in results[5]] == [
            "Batch Size 5 - Run 1",
            "Batch Size 5 - Run 2",
        ]
        assert all(r.success and r.total_workouts == 12 for r in results[10])

    @pytest.mark.asyncio
    async def test_warmup_runs_are_not_reported(self):
        use_case = MagicMock()
        use_case.execute = AsyncMock()
        workouts = _scenario("Large Dataset").workouts[:20]
        options = BenchmarkOptions(iterations=1, warmup_runs=2, batch_sizes=[10])

        results = await run_migration_benchmark(workouts, options, use_case)

        assert use_case.execute.await_count == 3
        warmup_records = use_case.execute.await_args_list[0].args[0]
        assert len(warmup_records) == 10
        assert len(results[10]) == 1


@pytest.mark.unit
class TestGenerateTestReport:
    """Tests for report aggregation and recommendations."""

    def test_all_good(self):
        report = generate_test_report([_perf(), _perf()], [])

        assert report.total_scenarios == 2
        assert report.passed_scenarios == 2
        assert report.total_workouts == 20
        assert report.total_duration_ms == 200
        assert report.average_throughput == pytest.approx(100)
        assert report.recommendations == [
            "All tests passed - migration system is performing optimally"
        ]

    def test_recommendations(self):
        validation = [
            ValidationTestResult(workout_id="a", original_format="unknown", is_valid=False),
            ValidationTestResult(workout_id="b", original_format="strength", is_valid=True),
        ]
        report = generate_test_report(
            [_perf(throughput=5), _perf(memory_usage=60 * 1024 * 1024, success=False)],
            validation,
        )

        assert report.failed_scenarios == 1
        assert report.recommendations == [
            "1 workouts failed validation - review data quality",
            "Performance is below optimal - consider increasing batch size",
            "High memory usage detected - consider smaller batch sizes",
        ]

    def test_empty(self):
        report = generate_test_report([], [])
        assert report.average_throughput == 0
        assert report.total_scenarios == 0


@pytest.mark.unit
class TestRunQuickMigrationTest:
    """Tests for the quick self-check."""

    @pytest.mark.asyncio
    async def test_runs_first_three_scenarios(self, batch_use_case):
        report = await run_quick_migration_test(batch_use_case)

        assert report.total_scenarios == 3
        assert report.passed_scenarios == 3
        assert [r.scenario for r in report.scenario_results] == [
            "All Valid Data",
            "Mixed Valid and Invalid",
            "Malformed Strength Data",
        ]
        assert len(report.validation_results) == 13
        assert report.recommendations[0] == "5 workouts failed validation - review data quality"

    @pytest.mark.asyncio
    async def test_to_dict(self, batch_use_case):
        payload = (await run_quick_migration_test(batch_use_case)).to_dict()

        assert set(payload) == {"summary", "scenarioResults", "validationResults", "recommendations"}
        assert payload["summary"]["totalScenarios"] == 3
        assert payload["validationResults"][0]["workoutId"] == "strength-1"
