"""
Format detection for workout records.

Classifies an arbitrary record as one of the legacy shapes, the unified
schema, or unknown by looking at structural signatures. Legacy shapes share
field names (a unified session also has ``type`` and a hybrid workout may have
``equipment``), so rules run in a fixed priority order and the first match
wins:

1. unified      - ``version`` str, ``type`` str, ``content`` and ``metadata`` objects
2. strength     - ``exercises`` list, every entry has ``exerciseId`` and ``sets``
3. conditioning - ``intervals`` list, ``equipment`` value, numeric ``totalDuration``
4. hybrid       - ``blocks`` list, at least one entry has a ``type``
5. agility      - ``phases`` list, at least one phase has ``drills``
6. unknown
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from domain.models import WorkoutFormat

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_unified(data: Mapping) -> bool:
    return (
        isinstance(data.get("version"), str)
        and bool(data["version"])
        and isinstance(data.get("type"), str)
        and bool(data["type"])
        and isinstance(data.get("content"), Mapping)
        and isinstance(data.get("metadata"), Mapping)
    )


def _is_strength(data: Mapping) -> bool:
    exercises = data.get("exercises")
    if not isinstance(exercises, list):
        return False
    return all(
        isinstance(ex, Mapping) and bool(ex.get("exerciseId")) and ex.get("sets") is not None
        for ex in exercises
    )


def _is_conditioning(data: Mapping) -> bool:
    return (
        isinstance(data.get("intervals"), list)
        and bool(data.get("equipment"))
        and _is_number(data.get("totalDuration"))
    )


def _is_hybrid(data: Mapping) -> bool:
    blocks = data.get("blocks")
    if not isinstance(blocks, list):
        return False
    return any(isinstance(block, Mapping) and bool(block.get("type")) for block in blocks)


def _is_agility(data: Mapping) -> bool:
    phases = data.get("phases")
    if not isinstance(phases, list):
        return False
    return any(
        isinstance(phase, Mapping) and phase.get("drills") is not None for phase in phases
    )


_RULES = (
    (WorkoutFormat.UNIFIED, _is_unified),
    (WorkoutFormat.STRENGTH, _is_strength),
    (WorkoutFormat.CONDITIONING, _is_conditioning),
    (WorkoutFormat.HYBRID, _is_hybrid),
    (WorkoutFormat.AGILITY, _is_agility),
)


def detect_workout_format(record: Any) -> WorkoutFormat:
    """
    Classify a workout record by its structure.

    Pure and deterministic: the same input always yields the same format.
    Malformed or absent fields simply fail a rule; this function never
    raises.

    Args:
        record: A JSON-compatible mapping or a pydantic model (dumped by
            alias before inspection). Anything else is ``unknown``.

    Returns:
        The detected ``WorkoutFormat``.

    Examples:
        >>> detect_workout_format({
        ...     "intervals": [{"duration": 180, "intensity": 75}],
        ...     "equipment": "bike",
        ...     "totalDuration": 1800,
        ... })
        <WorkoutFormat.CONDITIONING: 'conditioning'>
        >>> detect_workout_format({"foo": 1})
        <WorkoutFormat.UNKNOWN: 'unknown'>
    """
    if isinstance(record, BaseModel):
        record = record.model_dump(mode="json", by_alias=True)

    if not isinstance(record, Mapping):
        return WorkoutFormat.UNKNOWN

    for workout_format, matches in _RULES:
        if matches(record):
            return workout_format

    logger.debug("Record matched no known workout format")
    return WorkoutFormat.UNKNOWN
