"""
Converter: legacy strength template -> UnifiedWorkoutSession.

Each exercise becomes its own ``exercise`` block holding exactly one exercise
entry. When the template sets ``restBetweenExercises`` a ``rest`` block is
placed between consecutive exercise blocks (never after the last one).
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from domain.converters.common import (
    as_list,
    as_mapping,
    drop_none,
    failed_result,
    migration_failure,
    optional_str,
    resolve_workout_id,
)
from domain.models import (
    Assignments,
    BlockExercise,
    ErrorCode,
    ExerciseBlock,
    MigrationError,
    MigrationMetadata,
    MigrationOptions,
    MigrationResult,
    Permissions,
    RestBlock,
    StandardMetadata,
    UnifiedWorkoutSession,
    WarmupCooldown,
    WorkoutBlock,
    WorkoutContent,
    WorkoutFormat,
    WorkoutSet,
    total_block_duration,
)

logger = logging.getLogger(__name__)

FIELDS_MODIFIED = ["structure", "metadata", "content.blocks"]


def _convert_set(set_data: Mapping) -> WorkoutSet:
    # completed is reset: a migrated template has not been performed
    return WorkoutSet(
        **drop_none(
            {
                "type": set_data.get("type") or "working",
                "reps": set_data.get("reps"),
                "weight": set_data.get("weight"),
                "duration": set_data.get("duration"),
                "distance": set_data.get("distance"),
            }
        ),
        completed=False,
    )


def _convert_exercise(exercise: Mapping, options: MigrationOptions) -> BlockExercise:
    details = as_mapping(exercise.get("exercise"))
    return BlockExercise(
        exercise_id=optional_str(exercise.get("exerciseId")),
        exercise_name=details.get("name") or "Unknown Exercise",
        sets=[_convert_set(as_mapping(s)) for s in as_list(exercise.get("sets"))],
        rest_between_sets=exercise.get("restBetweenSets") or options.default_rest_between_sets,
        instructions=exercise.get("notes"),
    )


def _build_blocks(record: Mapping, options: MigrationOptions) -> List[WorkoutBlock]:
    exercises = record["exercises"]
    rest_between = record.get("restBetweenExercises")

    blocks: List[WorkoutBlock] = []
    for index, raw in enumerate(exercises):
        exercise = as_mapping(raw)
        blocks.append(
            ExerciseBlock(
                id=f"exercise-{index}",
                exercises=[_convert_exercise(exercise, options)],
                notes=exercise.get("notes"),
            )
        )
        if rest_between and index < len(exercises) - 1:
            blocks.append(
                RestBlock(
                    id=f"rest-{index}",
                    duration=rest_between,
                    message="Rest between exercises",
                )
            )
    return blocks


def _collect_equipment(exercises: List[Any]) -> List[str]:
    """Union of every exercise's own equipment list, first-seen order."""
    equipment: List[str] = []
    for raw in exercises:
        for item in as_list(as_mapping(as_mapping(raw).get("exercise")).get("equipment")):
            if item not in equipment:
                equipment.append(item)
    return equipment


def _segment(duration: Any, instructions: str) -> Optional[WarmupCooldown]:
    if not duration:
        return None
    return WarmupCooldown(duration=duration, exercises=[], instructions=instructions)


def _build_metadata(record: Mapping) -> StandardMetadata:
    is_public = bool(record.get("isPublic"))
    target_level = record.get("targetLevel")
    is_template = record.get("isTemplate")

    fields: Dict[str, Any] = {
        "created_by": record.get("createdBy") or "system",
        "created_at": record.get("createdAt") or None,
        "last_modified_by": record.get("updatedBy") or "system",
        "last_modified_at": record.get("updatedAt") or None,
        "tags": record.get("tags") or [],
        "category": record.get("category") or "general",
        "is_template": True if is_template is None else is_template,
        "version": 1,
        "equipment": _collect_equipment(record["exercises"]),
        "target_audience": [target_level] if target_level else ["intermediate"],
        "language": "en",
        "visibility": "public" if is_public else "private",
        "permissions": Permissions(can_view=["all"] if is_public else ["owner", "team"]),
    }
    return StandardMetadata(**drop_none(fields))


def _build_assignments(record: Mapping) -> Optional[Assignments]:
    players = record.get("assignedPlayers")
    if not players:
        return None
    scheduled = record.get("scheduledDate")
    return Assignments(
        player_ids=[str(p) for p in players],
        team_ids=[str(t) for t in record.get("assignedTeams") or []],
        start_date=scheduled,
        end_date=scheduled,
        recurrence=record.get("recurrence"),
    )


def migrate_strength_workout(
    record: Dict[str, Any], options: Optional[MigrationOptions] = None
) -> MigrationResult:
    """
    Convert a legacy strength template to the unified schema.

    Args:
        record: Legacy strength template (camelCase dict). Never mutated.
        options: Converter options; defaults to ``MigrationOptions()``.

    Returns:
        MigrationResult with a ``UnifiedWorkoutSession`` on success. A
        template whose ``exercises`` is not a list fails with
        ``INVALID_EXERCISES``; any other problem fails with
        ``MIGRATION_ERROR``.

    Examples:
        >>> result = migrate_strength_workout({
        ...     "id": "s-1",
        ...     "name": "Squat Day",
        ...     "exercises": [{"exerciseId": "ex-1", "sets": [{"reps": 5}]}],
        ... })
        >>> result.data.block_types
        ['exercise']
        >>> result.data.content.total_duration
        120
    """
    options = options or MigrationOptions()

    try:
        if not isinstance(record.get("exercises"), list):
            return failed_result(
                WorkoutFormat.STRENGTH,
                [
                    MigrationError(
                        field="exercises",
                        message="Invalid or missing exercises array",
                        code=ErrorCode.INVALID_EXERCISES,
                    )
                ],
            )

        blocks = _build_blocks(record, options)
        content = WorkoutContent(
            **drop_none(
                {
                    "blocks": blocks,
                    "warmup": _segment(record.get("warmupDuration"), "Standard warmup routine"),
                    "cooldown": _segment(
                        record.get("cooldownDuration"), "Standard cooldown routine"
                    ),
                    "total_duration": total_block_duration(blocks, options.seconds_per_set),
                    "estimated_calories": record.get("estimatedCalories"),
                    "target_muscle_groups": record.get("focusAreas") or [],
                    "difficulty": record.get("difficulty") or "intermediate",
                    "progression_rules": record.get("progressionRules"),
                }
            )
        )

        session = UnifiedWorkoutSession(
            **drop_none(
                {
                    "id": resolve_workout_id(record, options),
                    "type": "strength",
                    "name": record.get("name"),
                    "description": record.get("description"),
                    "content": content,
                    "metadata": _build_metadata(record),
                    "assignments": _build_assignments(record),
                }
            )
        )
    except Exception as e:
        return migration_failure(WorkoutFormat.STRENGTH, e)

    logger.debug(f"Migrated strength workout {session.id} ({session.block_count} blocks)")
    return MigrationResult(
        success=True,
        data=session,
        metadata=MigrationMetadata(
            source_type=WorkoutFormat.STRENGTH,
            fields_modified=list(FIELDS_MODIFIED),
            data_loss=False,
        ),
    )
