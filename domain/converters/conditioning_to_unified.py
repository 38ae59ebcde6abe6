"""
Converter: legacy conditioning interval program -> UnifiedWorkoutSession.

Every interval becomes an ``interval`` block, followed by a ``rest`` block
when the interval declares ``restAfter``.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from domain.converters.common import (
    as_list,
    as_mapping,
    drop_none,
    migration_failure,
    resolve_workout_id,
)
from domain.models import (
    IntervalBlock,
    IntervalSettings,
    MigrationMetadata,
    MigrationOptions,
    MigrationResult,
    RestBlock,
    StandardMetadata,
    TargetMetrics,
    UnifiedWorkoutSession,
    WarmupCooldown,
    WorkoutBlock,
    WorkoutContent,
    WorkoutFormat,
    total_block_duration,
)

logger = logging.getLogger(__name__)

FIELDS_MODIFIED = ["structure", "intervals", "metadata"]


def difficulty_from_intensity(average_intensity: Optional[float]) -> str:
    """
    Map an average intensity (0-100) to a difficulty level.

    A missing or zero intensity maps to ``intermediate``.

    Examples:
        >>> difficulty_from_intensity(35)
        'beginner'
        >>> difficulty_from_intensity(75)
        'advanced'
    """
    if not average_intensity:
        return "intermediate"
    if average_intensity < 40:
        return "beginner"
    if average_intensity < 70:
        return "intermediate"
    if average_intensity < 90:
        return "advanced"
    return "elite"


def _build_blocks(record: Mapping) -> List[WorkoutBlock]:
    program_equipment = record.get("equipment")
    blocks: List[WorkoutBlock] = []

    for index, raw in enumerate(as_list(record.get("intervals"))):
        interval = as_mapping(raw)
        blocks.append(
            IntervalBlock(
                id=f"interval-{index}",
                duration=interval.get("duration"),
                intensity=interval.get("intensity"),
                target_metrics=TargetMetrics(
                    heart_rate=interval.get("targetHeartRate"),
                    power=interval.get("targetPower"),
                    pace=interval.get("targetPace"),
                    cadence=interval.get("targetCadence"),
                ),
                equipment=interval.get("equipment") or program_equipment,
                notes=interval.get("notes"),
            )
        )
        if interval.get("restAfter"):
            blocks.append(
                RestBlock(
                    id=f"rest-{index}",
                    duration=interval["restAfter"],
                    message="Recovery period",
                )
            )
    return blocks


def _segment(duration: Any, instructions: Optional[str], default: str) -> Optional[WarmupCooldown]:
    if not duration:
        return None
    return WarmupCooldown(duration=duration, exercises=[], instructions=instructions or default)


def _build_metadata(record: Mapping) -> StandardMetadata:
    created_by = record.get("createdBy") or "system"
    targets = record.get("testBasedTargets")
    equipment = record.get("equipment")

    fields: Dict[str, Any] = {
        "created_by": created_by,
        "created_at": record.get("createdAt") or None,
        "last_modified_by": created_by,
        "last_modified_at": record.get("updatedAt") or None,
        "tags": record.get("tags") or [],
        "category": record.get("category") or "conditioning",
        "is_template": True,
        "version": 1,
        "equipment": list(equipment) if isinstance(equipment, list) else [equipment] if equipment else [],
        "target_audience": ["all"],
        "language": "en",
        "visibility": "private",
        "test_requirements": list(targets.keys()) if isinstance(targets, Mapping) else None,
    }
    return StandardMetadata(**drop_none(fields))


def migrate_conditioning_workout(
    record: Dict[str, Any], options: Optional[MigrationOptions] = None
) -> MigrationResult:
    """
    Convert a legacy conditioning program to the unified schema.

    ``content.total_duration`` is the program's declared ``totalDuration``;
    only when that is missing is it computed from the blocks.

    Examples:
        >>> result = migrate_conditioning_workout({
        ...     "id": "c-1",
        ...     "intervals": [
        ...         {"duration": 600, "intensity": 80, "restAfter": 300},
        ...         {"duration": 600, "intensity": 85},
        ...     ],
        ...     "equipment": "bike",
        ...     "totalDuration": 1800,
        ... })
        >>> result.data.block_types
        ['interval', 'rest', 'interval']
        >>> result.data.content.total_duration
        1800
    """
    options = options or MigrationOptions()

    try:
        blocks = _build_blocks(record)
        declared_total = record.get("totalDuration")
        content = WorkoutContent(
            **drop_none(
                {
                    "blocks": blocks,
                    "warmup": _segment(
                        record.get("warmupDuration"),
                        record.get("warmupInstructions"),
                        "Dynamic warmup",
                    ),
                    "cooldown": _segment(
                        record.get("cooldownDuration"),
                        record.get("cooldownInstructions"),
                        "Light cardio and stretching",
                    ),
                    "total_duration": (
                        declared_total
                        if declared_total is not None
                        else total_block_duration(blocks, options.seconds_per_set)
                    ),
                    "estimated_calories": record.get("estimatedCalories"),
                    "difficulty": difficulty_from_intensity(record.get("averageIntensity")),
                    "target_systems": record.get("targetSystems") or ["cardiovascular"],
                    "interval_settings": IntervalSettings(
                        rest_between_intervals=record.get("restBetweenIntervals"),
                        audio_cues=record.get("audioCues"),
                        countdown_beeps=record.get("countdownBeeps"),
                    ),
                }
            )
        )

        session = UnifiedWorkoutSession(
            **drop_none(
                {
                    "id": resolve_workout_id(record, options),
                    "type": "conditioning",
                    "name": record.get("name"),
                    "description": record.get("description"),
                    "content": content,
                    "metadata": _build_metadata(record),
                }
            )
        )
    except Exception as e:
        return migration_failure(WorkoutFormat.CONDITIONING, e)

    logger.debug(f"Migrated conditioning workout {session.id} ({session.block_count} blocks)")
    return MigrationResult(
        success=True,
        data=session,
        metadata=MigrationMetadata(
            source_type=WorkoutFormat.CONDITIONING,
            fields_modified=list(FIELDS_MODIFIED),
            data_loss=False,
        ),
    )
