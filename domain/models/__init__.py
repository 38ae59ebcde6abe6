"""
Domain models for the workout migration engine.

These models represent the core concepts:
- UnifiedWorkoutSession: the canonical, format-agnostic workout
- WorkoutBlock: discriminated union of exercise, interval, rest, transition
  and agility blocks
- MigrationResult: outcome of a single forward or rollback conversion

Usage:
    >>> from domain.models import UnifiedWorkoutSession, WorkoutContent, RestBlock

    >>> session = UnifiedWorkoutSession(
    ...     id="w-1",
    ...     type="hybrid",
    ...     name="Circuit",
    ...     content=WorkoutContent(blocks=[RestBlock(id="r-1", duration=60)]),
    ... )

    >>> # Serialize to the camelCase wire shape
    >>> payload = session.to_wire()

    >>> # Deserialize from JSON
    >>> session = UnifiedWorkoutSession.model_validate(payload)
"""

from domain.models.block import (
    BLOCK_TYPES,
    DEFAULT_REST_BETWEEN_SETS,
    SECONDS_PER_SET,
    AgilityBlock,
    AgilityMetrics,
    BlockExercise,
    ExerciseBlock,
    IntervalBlock,
    RestBlock,
    TargetMetrics,
    TransitionBlock,
    WorkoutBlock,
    WorkoutSet,
    total_block_duration,
)
from domain.models.migration import (
    ErrorCode,
    FieldLoss,
    MigrationError,
    MigrationMetadata,
    MigrationOptions,
    MigrationResult,
    MigrationWarning,
    ValidationIssue,
    ValidationResult,
    WorkoutFormat,
)
from domain.models.workout import (
    UNIFIED_SCHEMA_VERSION,
    Assignments,
    IntervalSettings,
    Permissions,
    StandardMetadata,
    UnifiedWorkoutSession,
    WarmupCooldown,
    WorkoutContent,
)

__all__ = [
    # Session
    "UnifiedWorkoutSession",
    "WorkoutContent",
    "StandardMetadata",
    "Permissions",
    "Assignments",
    "WarmupCooldown",
    "IntervalSettings",
    "UNIFIED_SCHEMA_VERSION",
    # Blocks
    "WorkoutBlock",
    "ExerciseBlock",
    "IntervalBlock",
    "RestBlock",
    "TransitionBlock",
    "AgilityBlock",
    "BlockExercise",
    "WorkoutSet",
    "TargetMetrics",
    "AgilityMetrics",
    "BLOCK_TYPES",
    "SECONDS_PER_SET",
    "DEFAULT_REST_BETWEEN_SETS",
    "total_block_duration",
    # Migration results
    "MigrationResult",
    "MigrationError",
    "MigrationWarning",
    "MigrationMetadata",
    "MigrationOptions",
    "FieldLoss",
    "ValidationIssue",
    "ValidationResult",
    # Enums
    "WorkoutFormat",
    "ErrorCode",
]
