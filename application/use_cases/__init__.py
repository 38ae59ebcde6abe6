"""
Application Use Cases for the workout migration engine.

This package contains application-level use cases that orchestrate the pure
domain converters: batching, progress, pause/cancel, bulk rollback, analysis
and reporting.

Architecture follows Clean Architecture / Hexagonal pattern:
- Use cases orchestrate domain functions and the MigrationControl port
- Dependencies are injected via constructors for testability
- Use cases return result objects; they never raise for bad records

Usage:
    from application.use_cases import (
        BatchMigrateUseCase,
        BatchMigrationOptions,
        MigrationRun,
        RollbackWorkoutsUseCase,
        analyze_workouts,
        build_migration_report,
    )

    # Look before migrating
    analysis = analyze_workouts(records)

    # Migrate with a pausable run
    run = MigrationRun()
    result = await BatchMigrateUseCase().execute(
        records,
        BatchMigrationOptions(batch_size=25),
        control=run,
    )

    # Roll back
    rollback = await RollbackWorkoutsUseCase().execute(sessions, "strength")
"""

from application.use_cases.analyze_workouts import MigrationAnalysis, analyze_workouts
from application.use_cases.batch_migrate import (
    BatchMigrateUseCase,
    BatchMigrationOptions,
    BatchMigrationProgress,
    BatchResult,
    BatchSummary,
    PersistenceDirective,
    ProgressCallback,
    batch_migrate_workouts,
)
from application.use_cases.migration_report import (
    MigrationProgressSummary,
    MigrationReport,
    build_migration_report,
    format_remaining,
    group_errors_by_code,
    summarize_progress,
)
from application.use_cases.migration_run import InvalidRunTransition, MigrationRun, RunStatus
from application.use_cases.rollback_workouts import (
    RollbackWorkoutsResult,
    RollbackWorkoutsUseCase,
)

__all__ = [
    # BatchMigrate
    "BatchMigrateUseCase",
    "BatchMigrationOptions",
    "BatchMigrationProgress",
    "BatchResult",
    "BatchSummary",
    "PersistenceDirective",
    "ProgressCallback",
    "batch_migrate_workouts",
    # Run state
    "MigrationRun",
    "RunStatus",
    "InvalidRunTransition",
    # RollbackWorkouts
    "RollbackWorkoutsUseCase",
    "RollbackWorkoutsResult",
    # Analysis and reporting
    "MigrationAnalysis",
    "analyze_workouts",
    "MigrationReport",
    "MigrationProgressSummary",
    "build_migration_report",
    "summarize_progress",
    "format_remaining",
    "group_errors_by_code",
]
