"""
Benchmark and validation harness for the migration engine.

Runs the canned scenarios from ``domain.samples`` through the batch use case,
measures throughput and memory, validates every record individually, and
turns the numbers into a short list of recommendations.

Usage:
    import asyncio
    from backend.benchmark import run_quick_migration_test

    report = asyncio.run(run_quick_migration_test())
    print(report.recommendations)
"""

import logging
import time
import tracemalloc
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from application.use_cases import BatchMigrateUseCase, BatchMigrationOptions
from domain.converters import CONVERTERS
from domain.detection import detect_workout_format
from domain.models import MigrationResult
from domain.samples import MigrationScenario, migration_scenarios

logger = logging.getLogger(__name__)

# Below this many workouts per second a run counts as slow
SLOW_THROUGHPUT = 10
HIGH_MEMORY_BYTES = 50 * 1024 * 1024


@dataclass
class PerformanceTestResult:
    scenario: str
    total_workouts: int
    duration_ms: float
    throughput: float  # workouts per second
    average_time_per_workout: float
    memory_usage: int  # bytes
    success: bool
    errors: List[str] = field(default_factory=list)


@dataclass
class ValidationTestResult:
    workout_id: str
    original_format: str
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    migration_result: Optional[MigrationResult] = None


@dataclass
class BenchmarkOptions:
    iterations: int = 3
    warmup_runs: int = 1
    batch_sizes: List[int] = field(default_factory=lambda: [10, 25, 50])


@dataclass
class BenchmarkReport:
    """Summary, raw results and recommendations of a benchmark session."""

    total_scenarios: int
    passed_scenarios: int
    failed_scenarios: int
    total_workouts: int
    total_duration_ms: float
    average_throughput: float
    scenario_results: List[PerformanceTestResult] = field(default_factory=list)
    validation_results: List[ValidationTestResult] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": {
                "totalScenarios": self.total_scenarios,
                "passedScenarios": self.passed_scenarios,
                "failedScenarios": self.failed_scenarios,
                "totalWorkouts": self.total_workouts,
                "totalDuration": self.total_duration_ms,
                "averageThroughput": self.average_throughput,
            },
            "scenarioResults": [
                {
                    "scenario": r.scenario,
                    "totalWorkouts": r.total_workouts,
                    "duration": r.duration_ms,
                    "throughput": r.throughput,
                    "averageTimePerWorkout": r.average_time_per_workout,
                    "memoryUsage": r.memory_usage,
                    "success": r.success,
                    "errors": r.errors,
                }
                for r in self.scenario_results
            ],
            "validationResults": [
                {
                    "workoutId": r.workout_id,
                    "originalFormat": r.original_format,
                    "isValid": r.is_valid,
                    "errors": r.errors,
                    "warnings": r.warnings,
                }
                for r in self.validation_results
            ],
            "recommendations": self.recommendations,
        }


def _timed_result(
    name: str, total: int, duration_ms: float, memory_usage: int = 0
) -> PerformanceTestResult:
    return PerformanceTestResult(
        scenario=name,
        total_workouts=total,
        duration_ms=duration_ms,
        throughput=total / duration_ms * 1000 if duration_ms > 0 else 0,
        average_time_per_workout=duration_ms / total if total else 0,
        memory_usage=memory_usage,
        success=True,
    )


async def run_performance_test(
    scenario: MigrationScenario,
    options: BatchMigrationOptions,
    use_case: Optional[BatchMigrateUseCase] = None,
) -> PerformanceTestResult:
    """Migrate one scenario and measure wall time and peak traced memory."""
    use_case = use_case or BatchMigrateUseCase()
    started_tracing = not tracemalloc.is_tracing()
    if started_tracing:
        tracemalloc.start()
    tracemalloc.reset_peak()
    baseline, _ = tracemalloc.get_traced_memory()
    start = time.perf_counter()

    try:
        await use_case.execute(scenario.workouts, options)
    except Exception as e:
        logger.error(f"Scenario '{scenario.name}' failed: {e}")
        return PerformanceTestResult(
            scenario=scenario.name,
            total_workouts=len(scenario.workouts),
            duration_ms=(time.perf_counter() - start) * 1000,
            throughput=0,
            average_time_per_workout=0,
            memory_usage=0,
            success=False,
            errors=[str(e)],
        )
    finally:
        _, peak = tracemalloc.get_traced_memory()
        if started_tracing:
            tracemalloc.stop()

    duration_ms = (time.perf_counter() - start) * 1000
    return _timed_result(scenario.name, len(scenario.workouts), duration_ms, max(peak - baseline, 0))


def run_validation_tests(workouts: Sequence[Any]) -> List[ValidationTestResult]:
    """Detect and migrate each record on its own, collecting messages."""
    results = []
    for index, workout in enumerate(workouts):
        workout_id = workout.get("id") if isinstance(workout, Mapping) else None
        fmt = detect_workout_format(workout)
        errors: List[str] = []
        warnings: List[str] = []
        migration_result = None

        convert = CONVERTERS.get(fmt)
        if convert is None:
            errors.append(f"Unknown format: {fmt.value}")
        else:
            migration_result = convert(workout)
            errors.extend(e.message for e in migration_result.errors)
            warnings.extend(w.message for w in migration_result.warnings)

        results.append(
            ValidationTestResult(
                workout_id=str(workout_id or f"workout-{index}"),
                original_format=fmt.value,
                is_valid=not errors,
                errors=errors,
                warnings=warnings,
                migration_result=migration_result,
            )
        )
    return results


async def run_migration_benchmark(
    workouts: Sequence[Any],
    options: Optional[BenchmarkOptions] = None,
    use_case: Optional[BatchMigrateUseCase] = None,
) -> Dict[int, List[PerformanceTestResult]]:
    """
    Time full migrations of ``workouts`` for each batch size.

    Returns a mapping of batch size to one result per timed iteration.
    Warmup runs migrate only the first ten records and are not reported.
    """
    options = options or BenchmarkOptions()
    use_case = use_case or BatchMigrateUseCase()
    results: Dict[int, List[PerformanceTestResult]] = {}

    for batch_size in options.batch_sizes:
        batch_options = BatchMigrationOptions(
            batch_size=batch_size,
            validate_before_migration=False,
            stop_on_error=False,
            preserve_original=False,
            dry_run=True,
        )
        for _ in range(options.warmup_runs):
            await use_case.execute(workouts[:10], batch_options)

        runs = []
        for iteration in range(1, options.iterations + 1):
            name = f"Batch Size {batch_size} - Run {iteration}"
            start = time.perf_counter()
            try:
                await use_case.execute(workouts, batch_options)
            except Exception as e:
                logger.error(f"{name} failed: {e}")
                runs.append(
                    PerformanceTestResult(
                        scenario=name,
                        total_workouts=len(workouts),
                        duration_ms=0,
                        throughput=0,
                        average_time_per_workout=0,
                        memory_usage=0,
                        success=False,
                        errors=[str(e)],
                    )
                )
                continue
            runs.append(_timed_result(name, len(workouts), (time.perf_counter() - start) * 1000))

        results[batch_size] = runs
    return results


def generate_test_report(
    performance_results: List[PerformanceTestResult],
    validation_results: List[ValidationTestResult],
) -> BenchmarkReport:
    """Aggregate results and derive recommendations."""
    total_duration = sum(r.duration_ms for r in performance_results)
    total_workouts = sum(r.total_workouts for r in performance_results)
    average_throughput = (
        total_workouts / total_duration * 1000 if total_workouts and total_duration > 0 else 0
    )

    recommendations = []
    failed_validations = sum(1 for r in validation_results if not r.is_valid)
    if failed_validations:
        recommendations.append(
            f"{failed_validations} workouts failed validation - review data quality"
        )
    if any(r.throughput < SLOW_THROUGHPUT for r in performance_results):
        recommendations.append("Performance is below optimal - consider increasing batch size")
    if any(r.memory_usage > HIGH_MEMORY_BYTES for r in performance_results):
        recommendations.append("High memory usage detected - consider smaller batch sizes")
    if not recommendations:
        recommendations.append("All tests passed - migration system is performing optimally")

    return BenchmarkReport(
        total_scenarios=len(performance_results),
        passed_scenarios=sum(1 for r in performance_results if r.success),
        failed_scenarios=sum(1 for r in performance_results if not r.success),
        total_workouts=total_workouts,
        total_duration_ms=total_duration,
        average_throughput=average_throughput,
        scenario_results=list(performance_results),
        validation_results=list(validation_results),
        recommendations=recommendations,
    )


async def run_quick_migration_test(
    use_case: Optional[BatchMigrateUseCase] = None,
) -> BenchmarkReport:
    """Run the first three canned scenarios and report on them."""
    logger.info("Running quick migration test")
    options = BatchMigrationOptions(
        batch_size=25,
        validate_before_migration=True,
        stop_on_error=False,
        preserve_original=True,
        dry_run=True,
    )

    performance_results = []
    validation_results = []
    for scenario in migration_scenarios()[:3]:
        logger.info(f"Testing scenario: {scenario.name}")
        performance_results.append(await run_performance_test(scenario, options, use_case))
        validation_results.extend(run_validation_tests(scenario.workouts))

    report = generate_test_report(performance_results, validation_results)
    logger.info(
        f"Quick test completed: {report.passed_scenarios}/{report.total_scenarios} scenarios passed"
    )
    return report
