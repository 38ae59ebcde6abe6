"""
BatchMigrate Use Case.

Migrates a list of legacy workout records to the unified schema in
fixed-size batches, reporting progress after every record and honouring
cooperative pause/cancel signals.

Workflow per record:
1. Detect the format
2. ``unified``: immediate success, no converter is called
3. ``unknown``: ``UNKNOWN_FORMAT`` failure
4. Optionally run the shallow validator (``VALIDATION_ERROR`` on failure)
5. Run the matching converter

Results are positional: ``results[i]`` always describes ``records[i]``.
"""

import asyncio
import dataclasses
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from application.ports import MigrationControl
from application.use_cases.migration_run import MigrationRun, RunStatus
from domain.converters import CONVERTERS
from domain.detection import detect_workout_format
from domain.models import (
    ErrorCode,
    MigrationError,
    MigrationMetadata,
    MigrationOptions,
    MigrationResult,
    MigrationWarning,
    UnifiedWorkoutSession,
    WorkoutFormat,
)
from domain.validation import validate_workout_data

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50
DEFAULT_BATCH_PAUSE_SECONDS = 0.1
DEFAULT_PAUSE_POLL_SECONDS = 0.05


@dataclass(frozen=True)
class BatchMigrationOptions:
    """
    Options for one batch run.

    ``dry_run`` and ``preserve_original`` do not change what the engine
    computes; they are handed back on ``BatchResult.persistence`` for the
    caller that stores the results.
    """

    batch_size: int = DEFAULT_BATCH_SIZE
    validate_before_migration: bool = True
    stop_on_error: bool = False
    preserve_original: bool = True
    dry_run: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.batch_size, int) or self.batch_size <= 0:
            raise ValueError(f"batch_size must be a positive integer, got {self.batch_size!r}")


@dataclass
class BatchMigrationProgress:
    """Progress snapshot emitted after every processed record."""

    total: int
    processed: int = 0
    successful: int = 0
    failed: int = 0
    warnings: int = 0
    current_batch: int = 0
    estimated_time_remaining: int = 0  # milliseconds

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "processed": self.processed,
            "successful": self.successful,
            "failed": self.failed,
            "warnings": self.warnings,
            "currentBatch": self.current_batch,
            "estimatedTimeRemaining": self.estimated_time_remaining,
        }


ProgressCallback = Callable[[BatchMigrationProgress], None]


@dataclass
class BatchSummary:
    """Totals for a finished run."""

    total: int
    successful: int
    failed: int
    warnings: int
    duration_ms: int

    def to_dict(self) -> Dict[str, int]:
        return dataclasses.asdict(self)


@dataclass(frozen=True)
class PersistenceDirective:
    """
    What the caller should do with the results.

    The engine never writes or deletes anything; these flags only tell the
    persistence layer downstream how to treat ``BatchResult.results``.
    """

    dry_run: bool
    preserve_original: bool

    @property
    def should_persist(self) -> bool:
        return not self.dry_run

    @property
    def may_replace_original(self) -> bool:
        return self.should_persist and not self.preserve_original

    def to_dict(self) -> Dict[str, bool]:
        return {
            "dryRun": self.dry_run,
            "preserveOriginal": self.preserve_original,
            "shouldPersist": self.should_persist,
        }


@dataclass
class BatchResult:
    """Result of the BatchMigrate use case execution."""

    results: List[MigrationResult]
    summary: BatchSummary
    status: RunStatus
    persistence: PersistenceDirective
    progress: Optional[BatchMigrationProgress] = None

    @property
    def successful_sessions(self) -> List[UnifiedWorkoutSession]:
        return [r.data for r in self.results if r.success and isinstance(r.data, UnifiedWorkoutSession)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [r.to_wire() for r in self.results],
            "summary": self.summary.to_dict(),
            "status": self.status.value,
            "persistence": self.persistence.to_dict(),
        }


def _failure(
    source_type: WorkoutFormat, errors: List[MigrationError]
) -> MigrationResult:
    return MigrationResult(
        success=False,
        errors=errors,
        metadata=MigrationMetadata(source_type=source_type, fields_modified=[], data_loss=False),
    )


class BatchMigrateUseCase:
    """
    Use case for migrating many records at once.

    Orchestrates the following workflow:
    1. Partition records into consecutive batches of ``batch_size``
    2. Process each record (detect, validate, convert) inside a failure boundary
    3. Emit a progress snapshot after every record
    4. Yield to the event loop between batches
    5. Return positional results, a summary and the final run status

    Dependencies are injected via constructor for testability.

    Usage:
        >>> use_case = BatchMigrateUseCase()
        >>> result = await use_case.execute(
        ...     records,
        ...     BatchMigrationOptions(batch_size=25, stop_on_error=True),
        ...     on_progress=print,
        ... )
        >>> result.summary.successful
    """

    def __init__(
        self,
        migration_options: Optional[MigrationOptions] = None,
        *,
        batch_pause_seconds: float = DEFAULT_BATCH_PAUSE_SECONDS,
        pause_poll_seconds: float = DEFAULT_PAUSE_POLL_SECONDS,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        """
        Initialize the use case.

        Args:
            migration_options: Options passed to every converter
            batch_pause_seconds: Sleep between batches (not after the last)
            pause_poll_seconds: How often a paused run re-checks its control
            clock: Monotonic clock in seconds, injectable for tests
        """
        self._migration_options = migration_options or MigrationOptions()
        self._batch_pause_seconds = batch_pause_seconds
        self._pause_poll_seconds = pause_poll_seconds
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Any) -> "BatchMigrateUseCase":
        """Build the use case from application settings."""
        return cls(
            MigrationOptions.from_settings(settings),
            batch_pause_seconds=settings.migration_batch_pause_seconds,
        )

    async def execute(
        self,
        records: Sequence[Any],
        options: Optional[BatchMigrationOptions] = None,
        on_progress: Optional[ProgressCallback] = None,
        control: Optional[MigrationControl] = None,
    ) -> BatchResult:
        """
        Execute the batch migration workflow.

        Args:
            records: Legacy (or already unified) records; never mutated
            options: Batch options (defaults to ``BatchMigrationOptions()``)
            on_progress: Called synchronously with a snapshot after each record
            control: Pause/cancel signal; a ``MigrationRun`` also gets its
                status driven by this run; a finished run is reset first

        Returns:
            BatchResult with one result per processed record, in input order
        """
        options = options or BatchMigrationOptions()
        run = control if isinstance(control, MigrationRun) else MigrationRun(control)
        if run.status.is_terminal:
            run.reset()
        run.transition(RunStatus.RUNNING)

        total = len(records)
        progress = BatchMigrationProgress(total=total)
        results: List[MigrationResult] = []
        started = self._clock()
        batch_count = (total + options.batch_size - 1) // options.batch_size
        halted = False
        cancelled = False

        logger.info(
            f"Starting batch migration of {total} records "
            f"({batch_count} batches of up to {options.batch_size})"
        )

        for batch_index in range(batch_count):
            progress.current_batch = batch_index + 1
            batch_start = batch_index * options.batch_size
            batch = records[batch_start : batch_start + options.batch_size]

            for record in batch:
                await self._wait_while_paused(run)
                if run.is_cancelled():
                    halted = cancelled = True
                    break

                result = self._migrate_record(record, options)
                results.append(result)

                progress.processed += 1
                if result.success:
                    progress.successful += 1
                else:
                    progress.failed += 1
                progress.warnings += len(result.warnings)

                elapsed_ms = (self._clock() - started) * 1000
                remaining = total - progress.processed
                progress.estimated_time_remaining = round(elapsed_ms / progress.processed * remaining)

                if on_progress is not None:
                    on_progress(dataclasses.replace(progress))

                if not result.success and options.stop_on_error:
                    logger.warning(
                        f"Stopping batch migration after record {progress.processed}: "
                        f"{result.errors[0].message if result.errors else 'failed'}"
                    )
                    halted = True
                    break

            if halted:
                break

            if batch_index < batch_count - 1:
                await asyncio.sleep(self._batch_pause_seconds)

        if cancelled:
            status = RunStatus.CANCELLED
            logger.warning(f"Batch migration cancelled after {progress.processed}/{total} records")
        elif halted:
            status = RunStatus.FAILED
        else:
            status = RunStatus.COMPLETED
        run.transition(status)

        duration_ms = round((self._clock() - started) * 1000)
        summary = BatchSummary(
            total=total,
            successful=progress.successful,
            failed=progress.failed,
            warnings=progress.warnings,
            duration_ms=duration_ms,
        )
        logger.info(
            f"Batch migration {status.value}: {summary.successful} succeeded, "
            f"{summary.failed} failed, {summary.warnings} warnings in {duration_ms}ms"
        )

        return BatchResult(
            results=results,
            summary=summary,
            status=status,
            persistence=PersistenceDirective(
                dry_run=options.dry_run,
                preserve_original=options.preserve_original,
            ),
            progress=progress,
        )

    async def _wait_while_paused(self, run: MigrationRun) -> None:
        if not run.is_paused() or run.is_cancelled():
            return

        run.transition(RunStatus.PAUSED)
        logger.info("Batch migration paused")
        while run.is_paused() and not run.is_cancelled():
            await asyncio.sleep(self._pause_poll_seconds)

        if not run.is_cancelled():
            run.transition(RunStatus.RUNNING)
            logger.info("Batch migration resumed")

    def _migrate_record(self, record: Any, options: BatchMigrationOptions) -> MigrationResult:
        """Detect, validate and convert one record; never raises."""
        try:
            fmt = detect_workout_format(record)

            if fmt == WorkoutFormat.UNIFIED:
                return self._already_unified(record)

            if fmt == WorkoutFormat.UNKNOWN:
                return _failure(
                    WorkoutFormat.UNKNOWN,
                    [
                        MigrationError(
                            field="format",
                            message="Unknown workout format",
                            code=ErrorCode.UNKNOWN_FORMAT,
                        )
                    ],
                )

            if options.validate_before_migration:
                validation = validate_workout_data(record, fmt)
                if not validation.is_valid:
                    return _failure(fmt, [issue.to_migration_error() for issue in validation.errors])

            return CONVERTERS[fmt](record, self._migration_options)
        except Exception as e:
            logger.warning(f"Unexpected error migrating record: {e}")
            return _failure(
                WorkoutFormat.UNKNOWN,
                [
                    MigrationError(
                        field="general",
                        message=f"Migration error: {e}",
                        code=ErrorCode.MIGRATION_ERROR,
                    )
                ],
            )

    def _already_unified(self, record: Any) -> MigrationResult:
        """Unified records pass through; no converter is called."""
        if isinstance(record, UnifiedWorkoutSession):
            version = record.version
        else:
            version = str(record.get("version")) if isinstance(record, Mapping) else None
        metadata = MigrationMetadata(
            source_type=WorkoutFormat.UNIFIED,
            source_version=version,
            fields_modified=[],
            data_loss=False,
        )
        if isinstance(record, UnifiedWorkoutSession):
            return MigrationResult(success=True, data=record, metadata=metadata)

        try:
            session = UnifiedWorkoutSession.model_validate(record)
        except PydanticValidationError as e:
            return MigrationResult(
                success=True,
                data=None,
                warnings=[
                    MigrationWarning(
                        field="general",
                        message=f"Record is already unified but does not load as a session: "
                        f"{e.error_count()} schema error(s)",
                        suggestion="Fix the record in place; it was not migrated again",
                    )
                ],
                metadata=metadata,
            )
        return MigrationResult(success=True, data=session, metadata=metadata)


async def batch_migrate_workouts(
    records: Sequence[Any],
    options: Optional[BatchMigrationOptions] = None,
    on_progress: Optional[ProgressCallback] = None,
    control: Optional[MigrationControl] = None,
    migration_options: Optional[MigrationOptions] = None,
) -> BatchResult:
    """Run a batch migration with a one-off ``BatchMigrateUseCase``."""
    use_case = BatchMigrateUseCase(migration_options)
    return await use_case.execute(records, options, on_progress=on_progress, control=control)
