"""
Domain converters between the legacy workout shapes and the unified schema.

Forward converters (legacy dict -> UnifiedWorkoutSession):

- migrate_strength_workout: strength template (exercises + sets)
- migrate_conditioning_workout: interval program
- migrate_hybrid_workout: block-based hybrid workout
- migrate_agility_workout: phases of drills

Rollback converters (UnifiedWorkoutSession -> legacy dict) sit behind
``rollback_migration``.

All converters are pure functions with no side effects, and none of them
raise: failures come back as a ``MigrationResult`` with ``success=False``.

Examples:
    >>> from domain.converters import migrate_hybrid_workout, rollback_migration

    >>> result = migrate_hybrid_workout({"id": "h-1", "blocks": [...]})
    >>> session = result.data

    >>> # And back again
    >>> legacy = rollback_migration(session, "hybrid").data
"""

from domain.converters.agility_to_unified import migrate_agility_workout
from domain.converters.common import generate_workout_id
from domain.converters.conditioning_to_unified import (
    difficulty_from_intensity,
    migrate_conditioning_workout,
)
from domain.converters.hybrid_to_unified import migrate_hybrid_workout
from domain.converters.strength_to_unified import migrate_strength_workout
from domain.converters.unified_to_legacy import (
    rollback_migration,
    rollback_to_agility,
    rollback_to_conditioning,
    rollback_to_hybrid,
    rollback_to_strength,
)
from domain.models import WorkoutFormat

# Forward converter per legacy format
CONVERTERS = {
    WorkoutFormat.STRENGTH: migrate_strength_workout,
    WorkoutFormat.CONDITIONING: migrate_conditioning_workout,
    WorkoutFormat.HYBRID: migrate_hybrid_workout,
    WorkoutFormat.AGILITY: migrate_agility_workout,
}

__all__ = [
    "CONVERTERS",
    "migrate_strength_workout",
    "migrate_conditioning_workout",
    "migrate_hybrid_workout",
    "migrate_agility_workout",
    "rollback_migration",
    "rollback_to_strength",
    "rollback_to_conditioning",
    "rollback_to_hybrid",
    "rollback_to_agility",
    "difficulty_from_intensity",
    "generate_workout_id",
]
