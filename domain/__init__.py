"""
Domain layer for the workout migration engine.

This package contains pure domain models and conversion functions that are
independent of infrastructure concerns (storage, UI, transport). Everything
here is a synchronous, side-effect-free transform.
"""

from domain.converters import (
    migrate_agility_workout,
    migrate_conditioning_workout,
    migrate_hybrid_workout,
    migrate_strength_workout,
    rollback_migration,
)
from domain.detection import detect_workout_format
from domain.models import (
    ErrorCode,
    MigrationOptions,
    MigrationResult,
    UnifiedWorkoutSession,
    WorkoutFormat,
)
from domain.validation import check_workout, validate_workout_data

__all__ = [
    "detect_workout_format",
    "validate_workout_data",
    "check_workout",
    "migrate_strength_workout",
    "migrate_conditioning_workout",
    "migrate_hybrid_workout",
    "migrate_agility_workout",
    "rollback_migration",
    "ErrorCode",
    "MigrationOptions",
    "MigrationResult",
    "UnifiedWorkoutSession",
    "WorkoutFormat",
]
