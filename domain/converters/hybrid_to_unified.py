"""
Converter: legacy hybrid block workout -> UnifiedWorkoutSession.

Hybrid workouts are already block-structured, so blocks convert 1:1 by their
``type`` tag. Unrecognised block types are skipped with a warning (or fail
the record in strict mode) instead of aborting the conversion.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Tuple

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
    BlockExercise,
    ErrorCode,
    ExerciseBlock,
    FieldLoss,
    IntervalBlock,
    MigrationError,
    MigrationMetadata,
    MigrationOptions,
    MigrationResult,
    MigrationWarning,
    RestBlock,
    StandardMetadata,
    TransitionBlock,
    UnifiedWorkoutSession,
    WorkoutBlock,
    WorkoutContent,
    WorkoutFormat,
    WorkoutSet,
    total_block_duration,
)

logger = logging.getLogger(__name__)

FIELDS_MODIFIED = ["blocks", "structure", "metadata"]


def _convert_exercise(ex: Mapping, options: MigrationOptions) -> BlockExercise:
    sets = [
        WorkoutSet(
            **drop_none(
                {
                    "type": as_mapping(s).get("type") or "working",
                    "reps": as_mapping(s).get("reps"),
                    "weight": as_mapping(s).get("weight"),
                    "duration": as_mapping(s).get("duration"),
                    "distance": as_mapping(s).get("distance"),
                }
            ),
            completed=False,
        )
        for s in as_list(ex.get("sets"))
    ]
    return BlockExercise(
        **drop_none(
            {
                "exercise_id": optional_str(ex.get("id")),
                "exercise_name": ex.get("name"),
                "sets": sets,
                "rest_between_sets": ex.get("restBetweenSets") or options.default_rest_between_sets,
                "instructions": ex.get("instructions"),
            }
        )
    )


def _exercise_block(block: Mapping, block_id: str, options: MigrationOptions) -> WorkoutBlock:
    return ExerciseBlock(
        id=block_id,
        exercises=[_convert_exercise(as_mapping(ex), options) for ex in as_list(block.get("exercises"))],
        notes=block.get("notes"),
    )


def _interval_block(block: Mapping, block_id: str, options: MigrationOptions) -> WorkoutBlock:
    return IntervalBlock(
        id=block_id,
        duration=block.get("duration"),
        intensity=block.get("intensity"),
        equipment=block.get("equipment"),
        target_metrics=block.get("targetMetrics"),
        notes=block.get("notes"),
    )


def _transition_block(block: Mapping, block_id: str, options: MigrationOptions) -> WorkoutBlock:
    return TransitionBlock(
        id=block_id,
        duration=block.get("duration"),
        from_activity=block.get("fromActivity"),
        to_activity=block.get("toActivity"),
        instructions=block.get("instructions"),
    )


def _rest_block(block: Mapping, block_id: str, options: MigrationOptions) -> WorkoutBlock:
    return RestBlock(
        id=block_id,
        duration=block.get("duration"),
        message=block.get("notes") or "Rest period",
    )


_BLOCK_CONVERTERS: Dict[str, Callable[[Mapping, str, MigrationOptions], WorkoutBlock]] = {
    "exercise": _exercise_block,
    "interval": _interval_block,
    "transition": _transition_block,
    "rest": _rest_block,
}


def _convert_blocks(
    raw_blocks: List[Any], options: MigrationOptions
) -> Tuple[List[WorkoutBlock], List[MigrationWarning], List[FieldLoss]]:
    blocks: List[WorkoutBlock] = []
    warnings: List[MigrationWarning] = []
    losses: List[FieldLoss] = []

    for index, raw in enumerate(raw_blocks):
        block = as_mapping(raw)
        block_type = block.get("type")
        convert = _BLOCK_CONVERTERS.get(block_type) if isinstance(block_type, str) else None
        if convert is None:
            message = f"Unknown block type: {block_type}"
            warnings.append(
                MigrationWarning(
                    field=f"blocks[{index}]",
                    message=message,
                    suggestion="Block will be skipped",
                )
            )
            losses.append(FieldLoss(field=f"blocks[{index}]", disposition="dropped", note=message))
            continue

        block_id = optional_str(block.get("id")) or f"block-{index}"
        blocks.append(convert(block, block_id, options))

    return blocks, warnings, losses


def migrate_hybrid_workout(
    record: Dict[str, Any], options: Optional[MigrationOptions] = None
) -> MigrationResult:
    """
    Convert a legacy hybrid workout to the unified schema.

    Block ids are carried over (``block-<index>`` when absent) and block order
    is preserved. Each skipped block yields a ``MigrationWarning`` and a
    ``dropped`` field loss, and flips ``data_loss`` to True. With
    ``options.strict_mode`` an unknown block fails the whole record instead.

    Args:
        record: Legacy hybrid workout (camelCase dict). Never mutated.
        options: Converter options.

    Returns:
        MigrationResult carrying a ``UnifiedWorkoutSession`` on success.
    """
    options = options or MigrationOptions()

    try:
        blocks, warnings, losses = _convert_blocks(as_list(record.get("blocks")), options)

        if losses and options.strict_mode:
            logger.warning(f"Hybrid workout {record.get('id')} has unknown blocks (strict mode)")
            return failed_result(
                WorkoutFormat.HYBRID,
                [
                    MigrationError(
                        field=warning.field,
                        message=warning.message,
                        code=ErrorCode.MIGRATION_ERROR,
                    )
                    for warning in warnings
                ],
            )

        declared_total = record.get("totalDuration")
        content = WorkoutContent(
            **drop_none(
                {
                    "blocks": blocks,
                    "warmup": record.get("warmup"),
                    "cooldown": record.get("cooldown"),
                    "total_duration": (
                        declared_total
                        if declared_total is not None
                        else total_block_duration(blocks, options.seconds_per_set)
                    ),
                    "estimated_calories": record.get("estimatedCalories"),
                    "difficulty": record.get("difficulty") or "intermediate",
                    "target_muscle_groups": record.get("targetMuscleGroups"),
                    "target_systems": record.get("targetSystems"),
                    "transition_time": record.get("transitionTime"),
                }
            )
        )

        created_by = record.get("createdBy") or "system"
        is_template = record.get("isTemplate")
        metadata = StandardMetadata(
            **drop_none(
                {
                    "created_by": created_by,
                    "created_at": record.get("createdAt") or None,
                    "last_modified_by": created_by,
                    "last_modified_at": record.get("updatedAt") or None,
                    "tags": record.get("tags") or [],
                    "category": record.get("category") or "hybrid",
                    "is_template": True if is_template is None else is_template,
                    "version": 1,
                    "equipment": record.get("equipment") or [],
                    "target_audience": ["intermediate", "advanced"],
                    "language": "en",
                    "visibility": "private",
                }
            )
        )

        session = UnifiedWorkoutSession(
            **drop_none(
                {
                    "id": resolve_workout_id(record, options),
                    "type": "hybrid",
                    "name": record.get("name"),
                    "description": record.get("description"),
                    "content": content,
                    "metadata": metadata,
                }
            )
        )
    except Exception as e:
        return migration_failure(WorkoutFormat.HYBRID, e)

    if warnings:
        logger.info(f"Hybrid workout {session.id}: skipped {len(warnings)} unknown block(s)")
    logger.debug(f"Migrated hybrid workout {session.id} ({session.block_count} blocks)")
    return MigrationResult(
        success=True,
        data=session,
        warnings=warnings,
        metadata=MigrationMetadata(
            source_type=WorkoutFormat.HYBRID,
            fields_modified=list(FIELDS_MODIFIED),
            data_loss=bool(losses),
            field_losses=losses,
        ),
    )
