"""
Reporting helpers for finished and in-flight migrations.

- build_migration_report: summary, per-format breakdown, flattened errors and
  warnings, throughput
- summarize_progress: human-friendly view of a progress snapshot
- group_errors_by_code: bucket errors by ``ErrorCode``
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

from application.use_cases.batch_migrate import BatchMigrationProgress
from domain.models import MigrationError, MigrationResult, MigrationWarning


@dataclass
class ReportSummary:
    start_time: datetime
    end_time: datetime
    duration_ms: int
    total_processed: int
    successful: int
    failed: int
    warnings: int


@dataclass
class PerformanceMetrics:
    average_time_per_item: float  # milliseconds
    throughput: float  # items per second
    peak_memory_usage: int = 0


@dataclass
class MigrationReport:
    """Exportable account of a migration run."""

    summary: ReportSummary
    format_breakdown: Dict[str, int] = field(default_factory=dict)
    errors: List[MigrationError] = field(default_factory=list)
    warnings: List[MigrationWarning] = field(default_factory=list)
    performance_metrics: Optional[PerformanceMetrics] = None

    def to_dict(self) -> Dict[str, Any]:
        summary = self.summary
        metrics = self.performance_metrics
        return {
            "summary": {
                "startTime": summary.start_time.isoformat(),
                "endTime": summary.end_time.isoformat(),
                "duration": summary.duration_ms,
                "totalProcessed": summary.total_processed,
                "successful": summary.successful,
                "failed": summary.failed,
                "warnings": summary.warnings,
            },
            "formatBreakdown": dict(self.format_breakdown),
            "errors": [e.to_wire() for e in self.errors],
            "warnings": [w.to_wire() for w in self.warnings],
            "performanceMetrics": {
                "averageTimePerItem": metrics.average_time_per_item if metrics else 0,
                "peakMemoryUsage": metrics.peak_memory_usage if metrics else 0,
                "throughput": metrics.throughput if metrics else 0,
            },
        }


def _now() -> datetime:
    return datetime.now(timezone.utc)


def build_migration_report(
    results: Sequence[MigrationResult],
    started_at: Optional[datetime] = None,
    ended_at: Optional[datetime] = None,
) -> MigrationReport:
    """
    Summarise a list of migration results.

    ``format_breakdown`` counts results by ``metadata.source_type``. Without
    both timestamps the duration, and with it the throughput, is 0.
    """
    duration_ms = 0
    if started_at is not None and ended_at is not None:
        duration_ms = round((ended_at - started_at).total_seconds() * 1000)

    breakdown: Dict[str, int] = {}
    errors: List[MigrationError] = []
    warnings: List[MigrationWarning] = []
    for result in results:
        source = result.metadata.source_type.value
        breakdown[source] = breakdown.get(source, 0) + 1
        errors.extend(result.errors)
        warnings.extend(result.warnings)

    total = len(results)
    successful = sum(1 for r in results if r.success)

    return MigrationReport(
        summary=ReportSummary(
            start_time=started_at or _now(),
            end_time=ended_at or _now(),
            duration_ms=duration_ms,
            total_processed=total,
            successful=successful,
            failed=total - successful,
            warnings=len(warnings),
        ),
        format_breakdown=breakdown,
        errors=errors,
        warnings=warnings,
        performance_metrics=PerformanceMetrics(
            average_time_per_item=duration_ms / total if total else 0,
            throughput=total / duration_ms * 1000 if duration_ms > 0 else 0,
        ),
    )


@dataclass
class MigrationProgressSummary:
    percentage: int
    processed_count: int
    remaining_count: int
    success_rate: int
    error_rate: int
    warning_rate: int
    estimated_time_remaining: str
    average_time_per_item: float


def format_remaining(milliseconds: int) -> str:
    """
    Format milliseconds as ``<m>m <s>s``.

    Examples:
        >>> format_remaining(125_000)
        '2m 5s'
    """
    minutes = milliseconds // 60000
    seconds = (milliseconds % 60000) // 1000
    return f"{minutes}m {seconds}s"


def _rate(part: int, processed: int) -> int:
    return round(part / processed * 100) if processed > 0 else 0


def summarize_progress(
    progress: BatchMigrationProgress,
    started_at: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> MigrationProgressSummary:
    """Turn a progress snapshot into percentages and a readable ETA."""
    processed = progress.processed
    average = 0.0
    if started_at is not None and processed > 0:
        elapsed_ms = ((now or _now()) - started_at).total_seconds() * 1000
        average = elapsed_ms / processed

    return MigrationProgressSummary(
        percentage=round(processed / progress.total * 100) if progress.total else 100,
        processed_count=processed,
        remaining_count=progress.total - processed,
        success_rate=_rate(progress.successful, processed),
        error_rate=_rate(progress.failed, processed),
        warning_rate=_rate(progress.warnings, processed),
        estimated_time_remaining=format_remaining(progress.estimated_time_remaining),
        average_time_per_item=average,
    )


def group_errors_by_code(errors: Iterable[MigrationError]) -> Dict[str, List[MigrationError]]:
    """Bucket errors by code value, keeping first-seen order within each bucket."""
    grouped: Dict[str, List[MigrationError]] = defaultdict(list)
    for error in errors:
        grouped[error.code.value].append(error)
    return dict(grouped)
