"""
Rollback converters: UnifiedWorkoutSession -> legacy shapes.

Rollback is best-effort. The unified schema does not carry everything the
legacy shapes had (phase grouping, interval rest pairing, per-exercise
details), and some unified fields have no legacy home. Rather than guess,
every rollback reports what it did per field through ``FieldLoss`` entries:

- reconstructed: rebuilt from data the session carries
- defaulted: no source value, a fixed default was written
- dropped: present in the session, absent from the legacy record

Output records are plain camelCase dicts, ready to be stored or re-migrated.
Every public function here runs behind the same failure boundary: an invalid
session comes back as a failed ``ROLLBACK_ERROR`` result.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Union

from domain.converters.common import drop_none, failed_result
from domain.models import (
    AgilityBlock,
    ErrorCode,
    ExerciseBlock,
    FieldLoss,
    IntervalBlock,
    MigrationError,
    MigrationMetadata,
    MigrationResult,
    MigrationWarning,
    RestBlock,
    UnifiedWorkoutSession,
    WorkoutBlock,
    WorkoutFormat,
)

logger = logging.getLogger(__name__)

DEFAULT_CONDITIONING_EQUIPMENT = "bike"


def _coerce_session(unified: Union[UnifiedWorkoutSession, Mapping]) -> UnifiedWorkoutSession:
    if isinstance(unified, UnifiedWorkoutSession):
        return unified
    return UnifiedWorkoutSession.model_validate(unified)


def _base_fields(session: UnifiedWorkoutSession, wire: Dict[str, Any]) -> Dict[str, Any]:
    """Identity and authorship fields every legacy shape shares."""
    return {
        "id": session.id,
        "name": session.name,
        "description": session.description,
        "createdBy": session.metadata.created_by,
        "createdAt": wire["metadata"].get("createdAt"),
    }


def _next_rest(blocks: List[WorkoutBlock], index: int) -> Optional[RestBlock]:
    if index + 1 < len(blocks) and isinstance(blocks[index + 1], RestBlock):
        return blocks[index + 1]
    return None


def _dropped_blocks(
    blocks: List[WorkoutBlock], keep: tuple, note: str
) -> List[FieldLoss]:
    return [
        FieldLoss(field=f"content.blocks[{i}]", disposition="dropped", note=f"{block.type} {note}")
        for i, block in enumerate(blocks)
        if not isinstance(block, keep)
    ]


def _success(
    target: WorkoutFormat,
    data: Dict[str, Any],
    fields_modified: List[str],
    data_loss: bool,
    field_losses: List[FieldLoss],
    warnings: Optional[List[MigrationWarning]] = None,
) -> MigrationResult:
    return MigrationResult(
        success=True,
        data=data,
        warnings=warnings or [],
        metadata=MigrationMetadata(
            source_type=target,
            fields_modified=fields_modified,
            data_loss=data_loss,
            field_losses=field_losses,
        ),
    )


def _rollback_to_strength(unified: Union[UnifiedWorkoutSession, Mapping]) -> MigrationResult:
    """
    Roll a unified session back to a strength template.

    Every exercise entry of every exercise block becomes a template exercise.
    The rest between exercises is recovered from the first rest block.
    """
    session = _coerce_session(unified)
    wire = session.to_wire()
    blocks = session.content.blocks

    exercises: List[Dict[str, Any]] = []
    for block in blocks:
        if not isinstance(block, ExerciseBlock):
            continue
        for ex in block.exercises:
            exercises.append(
                drop_none(
                    {
                        "exerciseId": ex.exercise_id,
                        "exercise": {"name": ex.exercise_name},
                        "sets": [s.to_wire() for s in ex.sets],
                        "notes": ex.instructions,
                        "restBetweenSets": ex.rest_between_sets,
                    }
                )
            )

    first_rest = next((b for b in blocks if isinstance(b, RestBlock)), None)
    content = session.content
    metadata = session.metadata

    template = drop_none(
        {
            **_base_fields(session, wire),
            "exercises": exercises,
            "restBetweenExercises": first_rest.duration if first_rest else None,
            "warmupDuration": content.warmup.duration if content.warmup else None,
            "cooldownDuration": content.cooldown.duration if content.cooldown else None,
            "estimatedCalories": content.estimated_calories,
            "difficulty": content.difficulty,
            "focusAreas": content.target_muscle_groups,
            "category": metadata.category,
            "isTemplate": metadata.is_template,
            "isPublic": metadata.visibility == "public",
            "tags": list(metadata.tags),
        }
    )

    losses = [FieldLoss(field="exercises", disposition="reconstructed", note="one per exercise entry")]
    if first_rest is not None:
        losses.append(
            FieldLoss(
                field="restBetweenExercises",
                disposition="reconstructed",
                note="taken from the first rest block",
            )
        )
    losses.extend(_dropped_blocks(blocks, (ExerciseBlock, RestBlock), "block has no strength equivalent"))
    losses.append(
        FieldLoss(field="exercises[].exercise.equipment", disposition="dropped", note="only the union survives migration")
    )
    losses.append(FieldLoss(field="metadata.permissions", disposition="dropped"))
    if session.assignments is not None:
        losses.append(FieldLoss(field="assignments", disposition="dropped"))

    return _success(WorkoutFormat.STRENGTH, template, ["structure"], True, losses)


def _rollback_to_conditioning(unified: Union[UnifiedWorkoutSession, Mapping]) -> MigrationResult:
    """
    Roll a unified session back to a conditioning interval program.

    The program's equipment is the last interval equipment seen, ``bike``
    when no interval names one.
    """
    session = _coerce_session(unified)
    wire = session.to_wire()
    blocks = session.content.blocks

    intervals: List[Dict[str, Any]] = []
    equipment = None
    for index, block in enumerate(blocks):
        if not isinstance(block, IntervalBlock):
            continue
        targets = block.target_metrics
        rest = _next_rest(blocks, index)
        intervals.append(
            drop_none(
                {
                    "duration": block.duration,
                    "intensity": block.intensity,
                    "targetHeartRate": targets.heart_rate if targets else None,
                    "targetPower": targets.power if targets else None,
                    "targetPace": targets.pace if targets else None,
                    "targetCadence": targets.cadence if targets else None,
                    "equipment": block.equipment,
                    "notes": block.notes,
                    "restAfter": rest.duration if rest else None,
                }
            )
        )
        if block.equipment:
            equipment = block.equipment

    content = session.content
    settings = content.interval_settings
    program = drop_none(
        {
            **_base_fields(session, wire),
            "intervals": intervals,
            "equipment": equipment or DEFAULT_CONDITIONING_EQUIPMENT,
            "totalDuration": content.total_duration,
            "warmupDuration": content.warmup.duration if content.warmup else None,
            "cooldownDuration": content.cooldown.duration if content.cooldown else None,
            "estimatedCalories": content.estimated_calories,
            "targetSystems": content.target_systems,
            "restBetweenIntervals": settings.rest_between_intervals if settings else None,
            "audioCues": settings.audio_cues if settings else None,
            "countdownBeeps": settings.countdown_beeps if settings else None,
            "tags": list(session.metadata.tags),
        }
    )

    losses = [
        FieldLoss(field="intervals", disposition="reconstructed", note="one per interval block"),
        FieldLoss(
            field="intervals[].restAfter",
            disposition="reconstructed",
            note="from the rest block following each interval",
        ),
    ]
    if equipment is None:
        losses.append(
            FieldLoss(field="equipment", disposition="defaulted", note=DEFAULT_CONDITIONING_EQUIPMENT)
        )
    losses.append(
        FieldLoss(field="averageIntensity", disposition="dropped", note="only the derived difficulty is kept")
    )
    losses.append(FieldLoss(field="testBasedTargets", disposition="dropped"))
    losses.extend(_dropped_blocks(blocks, (IntervalBlock, RestBlock), "block has no conditioning equivalent"))
    losses.append(FieldLoss(field="metadata.permissions", disposition="dropped"))

    warnings = [MigrationWarning(field="metadata", message="Some unified metadata was lost in rollback")]
    return _success(
        WorkoutFormat.CONDITIONING, program, ["structure", "metadata"], True, losses, warnings
    )


def _hybrid_block(block: WorkoutBlock) -> Dict[str, Any]:
    """Legacy hybrid block; exercise and rest blocks get their legacy keys back."""
    if isinstance(block, ExerciseBlock):
        return drop_none(
            {
                "id": block.id,
                "type": block.type,
                "exercises": [
                    drop_none(
                        {
                            "id": ex.exercise_id,
                            "name": ex.exercise_name,
                            "sets": [s.to_wire() for s in ex.sets],
                            "restBetweenSets": ex.rest_between_sets,
                            "instructions": ex.instructions,
                        }
                    )
                    for ex in block.exercises
                ],
                "notes": block.notes,
            }
        )
    if isinstance(block, RestBlock):
        return drop_none(
            {"id": block.id, "type": block.type, "duration": block.duration, "notes": block.message}
        )
    return block.to_wire()


def _rollback_to_hybrid(unified: Union[UnifiedWorkoutSession, Mapping]) -> MigrationResult:
    """
    Roll a unified session back to a hybrid workout.

    Hybrid is the legacy shape closest to the unified block model, so block
    ids and types come back unchanged and no data loss is reported.
    """
    session = _coerce_session(unified)
    wire = session.to_wire()
    content = session.content
    metadata = session.metadata

    workout = drop_none(
        {
            **_base_fields(session, wire),
            "blocks": [_hybrid_block(block) for block in content.blocks],
            "warmup": wire["content"].get("warmup"),
            "cooldown": wire["content"].get("cooldown"),
            "totalDuration": content.total_duration,
            "estimatedCalories": content.estimated_calories,
            "difficulty": content.difficulty,
            "targetMuscleGroups": content.target_muscle_groups,
            "targetSystems": content.target_systems,
            "transitionTime": content.transition_time,
            "category": metadata.category,
            "equipment": list(metadata.equipment),
            "isTemplate": metadata.is_template,
            "tags": list(metadata.tags),
        }
    )

    losses = [
        FieldLoss(field="blocks", disposition="reconstructed", note="ids and types preserved"),
    ]
    return _success(WorkoutFormat.HYBRID, workout, ["metadata"], False, losses)


def _rollback_to_agility(unified: Union[UnifiedWorkoutSession, Mapping]) -> MigrationResult:
    """
    Roll a unified session back to an agility session.

    The original phase grouping is not recoverable: all drills land in a
    single ``Main Phase`` and a warning says so. A drill's ``restAfter`` is
    recovered from the rest block that directly follows it.
    """
    session = _coerce_session(unified)
    wire = session.to_wire()
    blocks = session.content.blocks

    drills: List[Dict[str, Any]] = []
    for index, block in enumerate(blocks):
        if not isinstance(block, AgilityBlock):
            continue
        rest = _next_rest(blocks, index)
        drills.append(
            drop_none(
                {
                    "id": block.drill_id,
                    "name": block.drill_name,
                    "pattern": block.pattern,
                    "duration": block.duration,
                    "sets": block.sets,
                    "equipment": list(block.equipment),
                    "instructions": block.instructions,
                    "trackTime": block.metrics.track_time,
                    "trackErrors": block.metrics.track_errors,
                    "targetTime": block.metrics.target_time,
                    "restAfter": rest.duration if rest else None,
                }
            )
        )

    content = session.content
    metadata = session.metadata
    phase = {
        "id": "main",
        "name": "Main Phase",
        "description": "Converted from unified format",
        "drills": drills,
        "order": 0,
    }
    workout = drop_none(
        {
            **_base_fields(session, wire),
            "phases": [phase],
            "warmup": wire["content"].get("warmup"),
            "cooldown": wire["content"].get("cooldown"),
            "totalDuration": content.total_duration,
            "estimatedCalories": content.estimated_calories,
            "difficulty": content.difficulty,
            "focusAreas": content.focus_areas,
            "equipment": content.equipment,
            "category": metadata.category,
            "isTemplate": metadata.is_template,
            "tags": list(metadata.tags),
        }
    )

    losses = [
        FieldLoss(field="phases", disposition="reconstructed", note="single Main Phase"),
        FieldLoss(field="phases[].name", disposition="defaulted", note="Main Phase"),
        FieldLoss(
            field="phases[].restAfter",
            disposition="dropped",
            note="rest between phases cannot be told apart from drill rest",
        ),
    ]
    losses.extend(_dropped_blocks(blocks, (AgilityBlock, RestBlock), "block has no agility equivalent"))
    warnings = [MigrationWarning(field="phases", message="Phase structure was simplified during rollback")]
    return _success(WorkoutFormat.AGILITY, workout, ["phases", "metadata"], True, losses, warnings)


_ROLLBACKS: Dict[WorkoutFormat, Callable[[UnifiedWorkoutSession], MigrationResult]] = {
    WorkoutFormat.STRENGTH: _rollback_to_strength,
    WorkoutFormat.CONDITIONING: _rollback_to_conditioning,
    WorkoutFormat.HYBRID: _rollback_to_hybrid,
    WorkoutFormat.AGILITY: _rollback_to_agility,
}


def rollback_migration(
    unified: Union[UnifiedWorkoutSession, Mapping],
    target_format: Union[WorkoutFormat, str],
) -> MigrationResult:
    """
    Roll a unified session back to one of the legacy formats.

    Args:
        unified: A ``UnifiedWorkoutSession`` or its camelCase dict form.
        target_format: strength, conditioning, hybrid or agility.

    Returns:
        MigrationResult whose ``data`` is the legacy record as a plain dict.
        An unsupported target, an invalid session or any conversion error
        yields a failed result coded ``ROLLBACK_ERROR``; this never raises.

    Examples:
        >>> from domain.samples import sample_unified_workout
        >>> result = rollback_migration(sample_unified_workout("agility"), "agility")
        >>> result.data["phases"][0]["name"]
        'Main Phase'
        >>> result.metadata.data_loss
        True
    """
    try:
        target = WorkoutFormat(target_format)
    except ValueError:
        target = WorkoutFormat.UNKNOWN

    try:
        rollback = _ROLLBACKS.get(target)
        if rollback is None:
            raise ValueError(f"Unsupported target format: {target_format}")
        result = rollback(_coerce_session(unified))
    except Exception as e:
        logger.warning(f"Rollback to {target_format} failed: {e}")
        return failed_result(
            target,
            [
                MigrationError(
                    field="general",
                    message=f"Rollback failed: {e}",
                    code=ErrorCode.ROLLBACK_ERROR,
                )
            ],
        )

    logger.debug(f"Rolled back workout {result.data.get('id')} to {target.value}")
    return result


def rollback_to_strength(unified: Union[UnifiedWorkoutSession, Mapping]) -> MigrationResult:
    """Roll back to a strength template; never raises."""
    return rollback_migration(unified, WorkoutFormat.STRENGTH)


def rollback_to_conditioning(unified: Union[UnifiedWorkoutSession, Mapping]) -> MigrationResult:
    """Roll back to a conditioning program; never raises."""
    return rollback_migration(unified, WorkoutFormat.CONDITIONING)


def rollback_to_hybrid(unified: Union[UnifiedWorkoutSession, Mapping]) -> MigrationResult:
    """Roll back to a hybrid workout; never raises."""
    return rollback_migration(unified, WorkoutFormat.HYBRID)


def rollback_to_agility(unified: Union[UnifiedWorkoutSession, Mapping]) -> MigrationResult:
    """Roll back to an agility session; never raises."""
    return rollback_migration(unified, WorkoutFormat.AGILITY)
