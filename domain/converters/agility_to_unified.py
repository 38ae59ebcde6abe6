"""
Converter: legacy agility drill session -> UnifiedWorkoutSession.

The phase -> drill hierarchy is flattened into one ordered block list:

    drill-<p>-<d>     one ``agility`` block per drill
    rest-<p>-<d>      after a drill with ``restAfter``
    phase-rest-<p>    after the last drill of a phase with ``restAfter``
                      (never after the final phase)

Phase boundaries themselves are not represented in the unified schema.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from domain.converters.common import (
    as_list,
    as_mapping,
    drop_none,
    migration_failure,
    optional_str,
    resolve_workout_id,
)
from domain.models import (
    AgilityBlock,
    AgilityMetrics,
    MigrationMetadata,
    MigrationOptions,
    MigrationResult,
    RestBlock,
    StandardMetadata,
    UnifiedWorkoutSession,
    WorkoutBlock,
    WorkoutContent,
    WorkoutFormat,
    total_block_duration,
)

logger = logging.getLogger(__name__)

FIELDS_MODIFIED = ["phases", "drills", "structure"]


def _drill_block(drill: Mapping, block_id: str) -> AgilityBlock:
    return AgilityBlock(
        **drop_none(
            {
                "id": block_id,
                "drill_id": optional_str(drill.get("id")),
                "drill_name": drill.get("name"),
                "pattern": drill.get("pattern"),
                "duration": drill.get("duration"),
                "sets": drill.get("sets") or 1,
                "equipment": drill.get("equipment"),
                "instructions": drill.get("instructions"),
                "metrics": AgilityMetrics(
                    track_time=drill.get("trackTime") is not False,
                    track_errors=drill.get("trackErrors") is not False,
                    target_time=drill.get("targetTime"),
                ),
            }
        )
    )


def _flatten_phases(phases: List[Any]) -> List[WorkoutBlock]:
    blocks: List[WorkoutBlock] = []
    last_phase = len(phases) - 1

    for p, raw_phase in enumerate(phases):
        phase = as_mapping(raw_phase)
        for d, raw_drill in enumerate(as_list(phase.get("drills"))):
            drill = as_mapping(raw_drill)
            blocks.append(_drill_block(drill, f"drill-{p}-{d}"))
            if drill.get("restAfter"):
                blocks.append(
                    RestBlock(
                        id=f"rest-{p}-{d}",
                        duration=drill["restAfter"],
                        message="Rest between drills",
                    )
                )

        if p < last_phase and phase.get("restAfter"):
            blocks.append(
                RestBlock(
                    id=f"phase-rest-{p}",
                    duration=phase["restAfter"],
                    message=f"Rest after {phase.get('name')}",
                )
            )

    return blocks


def migrate_agility_workout(
    record: Dict[str, Any], options: Optional[MigrationOptions] = None
) -> MigrationResult:
    """
    Convert a legacy agility session to the unified schema.

    ``data_loss`` is reported as False: every drill field survives, only the
    phase grouping is flattened away.

    Examples:
        >>> result = migrate_agility_workout({
        ...     "id": "a-1",
        ...     "phases": [
        ...         {"name": "Speed", "restAfter": 90, "drills": [{"id": "d1", "restAfter": 30}]},
        ...         {"name": "Cool", "drills": [{"id": "d2"}]},
        ...     ],
        ... })
        >>> result.data.block_ids
        ['drill-0-0', 'rest-0-0', 'phase-rest-0', 'drill-1-0']
    """
    options = options or MigrationOptions()

    try:
        blocks = _flatten_phases(as_list(record.get("phases")))
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
                    "focus_areas": record.get("focusAreas"),
                    "equipment": record.get("equipment"),
                }
            )
        )

        created_by = record.get("createdBy") or "system"
        target_level = record.get("targetLevel")
        is_template = record.get("isTemplate")
        metadata = StandardMetadata(
            **drop_none(
                {
                    "created_by": created_by,
                    "created_at": record.get("createdAt") or None,
                    "last_modified_by": created_by,
                    "last_modified_at": record.get("updatedAt") or None,
                    "tags": record.get("tags") or [],
                    "category": record.get("category") or "agility",
                    "is_template": True if is_template is None else is_template,
                    "version": 1,
                    "equipment": record.get("equipment") or [],
                    "target_audience": [target_level] if target_level else ["intermediate"],
                    "language": "en",
                    "visibility": "private",
                }
            )
        )

        session = UnifiedWorkoutSession(
            **drop_none(
                {
                    "id": resolve_workout_id(record, options),
                    "type": "agility",
                    "name": record.get("name"),
                    "description": record.get("description"),
                    "content": content,
                    "metadata": metadata,
                }
            )
        )
    except Exception as e:
        return migration_failure(WorkoutFormat.AGILITY, e)

    logger.debug(f"Migrated agility workout {session.id} ({session.block_count} blocks)")
    return MigrationResult(
        success=True,
        data=session,
        metadata=MigrationMetadata(
            source_type=WorkoutFormat.AGILITY,
            fields_modified=list(FIELDS_MODIFIED),
            data_loss=False,
        ),
    )
