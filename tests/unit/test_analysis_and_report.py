"""
Unit tests for pre-migration analysis and migration reporting.

Tests for:
- analyze_workouts
- build_migration_report
- summarize_progress / format_remaining
- group_errors_by_code
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from application.use_cases import (
    BatchMigrationProgress,
    analyze_workouts,
    build_migration_report,
    format_remaining,
    group_errors_by_code,
    summarize_progress,
)
from domain.converters import migrate_hybrid_workout, migrate_strength_workout
from domain.models import ErrorCode, MigrationError, WorkoutFormat
from domain.samples import (
    sample_hybrid_workout,
    sample_strength_workout,
    sample_unified_workout,
)

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


# =============================================================================
# analyze_workouts
# =============================================================================


@pytest.mark.unit
class TestAnalyzeWorkouts:
    """Tests for analyze_workouts."""

    def test_counts(self):
        records = [
            sample_strength_workout(),
            sample_unified_workout("strength"),
            {"foo": 1},
            sample_hybrid_workout(),
        ]
        analysis = analyze_workouts(records)

        assert analysis.total_workouts == 4
        assert analysis.by_format == {"strength": 1, "unified": 1, "unknown": 1, "hybrid": 1}
        assert analysis.migration_needed == 2
        assert analysis.already_migrated == 1
        assert analysis.invalid_data == 1
        assert analysis.estimated_duration_ms == 200
        assert analysis.potential_issues == ["Workout 3: Unknown format"]

    def test_validation_messages(self):
        with patch(
            "application.use_cases.analyze_workouts.detect_workout_format",
            return_value=WorkoutFormat.CONDITIONING,
        ):
            analysis = analyze_workouts([{"intervals": "x"}])

        assert analysis.potential_issues == [
            "Workout 1 (conditioning): Intervals array is required, Equipment is required"
        ]
        assert analysis.migration_needed == 1

    def test_issue_list_is_capped(self):
        analysis = analyze_workouts([{"foo": i} for i in range(25)])

        assert analysis.invalid_data == 25
        assert len(analysis.potential_issues) == 20
        assert analysis.potential_issues[-1] == "Workout 20: Unknown format"

    def test_empty(self):
        analysis = analyze_workouts([])
        assert analysis.total_workouts == 0
        assert analysis.by_format == {}
        assert analysis.estimated_duration_ms == 0

    def test_to_dict(self):
        payload = analyze_workouts([sample_strength_workout()]).to_dict()
        assert payload == {
            "totalWorkouts": 1,
            "byFormat": {"strength": 1},
            "migrationNeeded": 1,
            "alreadyMigrated": 0,
            "invalidData": 0,
            "estimatedDuration": 50,
            "potentialIssues": [],
        }


# =============================================================================
# build_migration_report
# =============================================================================


def _results():
    hybrid = sample_hybrid_workout()
    hybrid["blocks"].append({"type": "yoga"})
    return [
        migrate_strength_workout(sample_strength_workout()),
        migrate_strength_workout(sample_strength_workout(exercises="not-an-array")),
        migrate_hybrid_workout(hybrid),
    ]


@pytest.mark.unit
class TestBuildMigrationReport:
    """Tests for build_migration_report."""

    def test_summary(self):
        report = build_migration_report(_results(), START, START + timedelta(seconds=2))

        assert report.summary.total_processed == 3
        assert report.summary.successful == 2
        assert report.summary.failed == 1
        assert report.summary.warnings == 1
        assert report.summary.duration_ms == 2000

    def test_breakdown_errors_and_warnings(self):
        report = build_migration_report(_results(), START, START + timedelta(seconds=2))

        assert report.format_breakdown == {"strength": 2, "hybrid": 1}
        assert [e.code for e in report.errors] == [ErrorCode.INVALID_EXERCISES]
        assert [w.field for w in report.warnings] == ["blocks[2]"]

    def test_performance_metrics(self):
        report = build_migration_report(_results(), START, START + timedelta(seconds=2))

        assert report.performance_metrics.throughput == pytest.approx(1.5)
        assert report.performance_metrics.average_time_per_item == pytest.approx(2000 / 3)

    def test_without_timestamps(self):
        report = build_migration_report(_results())

        assert report.summary.duration_ms == 0
        assert report.performance_metrics.throughput == 0

    def test_to_dict(self):
        payload = build_migration_report(_results(), START, START + timedelta(seconds=2)).to_dict()

        assert payload["summary"]["startTime"] == "2024-01-01T00:00:00+00:00"
        assert payload["summary"]["duration"] == 2000
        assert payload["formatBreakdown"] == {"strength": 2, "hybrid": 1}
        assert payload["errors"][0]["code"] == "INVALID_EXERCISES"
        assert payload["performanceMetrics"]["throughput"] == pytest.approx(1.5)


# =============================================================================
# Progress summaries
# =============================================================================


@pytest.mark.unit
class TestSummarizeProgress:
    """Tests for summarize_progress and format_remaining."""

    def test_rates(self):
        progress = BatchMigrationProgress(
            total=10,
            processed=4,
            successful=3,
            failed=1,
            warnings=2,
            estimated_time_remaining=125_000,
        )
        summary = summarize_progress(progress)

        assert summary.percentage == 40
        assert summary.processed_count == 4
        assert summary.remaining_count == 6
        assert summary.success_rate == 75
        assert summary.error_rate == 25
        assert summary.warning_rate == 50
        assert summary.estimated_time_remaining == "2m 5s"
        assert summary.average_time_per_item == 0

    def test_average_time_per_item(self):
        progress = BatchMigrationProgress(total=10, processed=4, successful=4)
        summary = summarize_progress(progress, START, START + timedelta(seconds=8))
        assert summary.average_time_per_item == pytest.approx(2000)

    def test_nothing_processed(self):
        summary = summarize_progress(BatchMigrationProgress(total=5))
        assert summary.percentage == 0
        assert summary.success_rate == 0
        assert summary.error_rate == 0

    def test_empty_run_is_complete(self):
        assert summarize_progress(BatchMigrationProgress(total=0)).percentage == 100

    @pytest.mark.parametrize(
        "milliseconds,expected",
        [
            (0, "0m 0s"),
            (999, "0m 0s"),
            (59_999, "0m 59s"),
            (60_000, "1m 0s"),
            (125_000, "2m 5s"),
            (3_600_000, "60m 0s"),
        ],
    )
    def test_format_remaining(self, milliseconds, expected):
        assert format_remaining(milliseconds) == expected


@pytest.mark.unit
class TestGroupErrorsByCode:
    """Tests for group_errors_by_code."""

    def test_groups_in_first_seen_order(self):
        errors = [
            MigrationError(field="a", message="1", code=ErrorCode.UNKNOWN_FORMAT),
            MigrationError(field="b", message="2", code=ErrorCode.VALIDATION_ERROR),
            MigrationError(field="c", message="3", code=ErrorCode.UNKNOWN_FORMAT),
        ]
        grouped = group_errors_by_code(errors)

        assert list(grouped) == ["UNKNOWN_FORMAT", "VALIDATION_ERROR"]
        assert [e.field for e in grouped["UNKNOWN_FORMAT"]] == ["a", "c"]

    def test_empty(self):
        assert group_errors_by_code([]) == {}
