"""
RollbackWorkouts Use Case.

Rolls many unified sessions back to one legacy format, reporting a 0-100
progress percentage after each record and yielding to the event loop every
few records so a host stays responsive.
"""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from domain.converters import rollback_migration
from domain.models import (
    ErrorCode,
    MigrationError,
    MigrationMetadata,
    MigrationResult,
    UnifiedWorkoutSession,
    WorkoutFormat,
)

logger = logging.getLogger(__name__)

DEFAULT_YIELD_EVERY = 10
DEFAULT_YIELD_SECONDS = 0.01

RollbackProgressCallback = Callable[[int], None]


@dataclass
class RollbackWorkoutsResult:
    """Result of the RollbackWorkouts use case execution."""

    success: bool
    target_format: str
    rolled_back: List[Dict[str, Any]] = field(default_factory=list)
    results: List[MigrationResult] = field(default_factory=list)
    errors: List[MigrationError] = field(default_factory=list)
    progress: int = 0

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "targetFormat": self.target_format,
            "rolledBack": self.rolled_back,
            "errors": [e.to_wire() for e in self.errors],
            "progress": self.progress,
        }


def _workout_id(workout: Any) -> Any:
    if isinstance(workout, UnifiedWorkoutSession):
        return workout.id
    if isinstance(workout, Mapping):
        return workout.get("id")
    return None


class RollbackWorkoutsUseCase:
    """
    Use case for rolling back many unified sessions.

    Per-record failures never stop the run: they are collected as
    ``ROLLBACK_ERROR`` entries. A failure of the operation itself (for
    example a progress callback raising) ends the run with a single
    ``ROLLBACK_OPERATION_ERROR``.

    Usage:
        >>> use_case = RollbackWorkoutsUseCase()
        >>> result = await use_case.execute(sessions, "hybrid", on_progress=print)
        >>> len(result.rolled_back)
    """

    def __init__(
        self,
        yield_every: int = DEFAULT_YIELD_EVERY,
        yield_seconds: float = DEFAULT_YIELD_SECONDS,
    ) -> None:
        if yield_every <= 0:
            raise ValueError("yield_every must be positive")
        self._yield_every = yield_every
        self._yield_seconds = yield_seconds

    @classmethod
    def from_settings(cls, settings: Any) -> "RollbackWorkoutsUseCase":
        return cls(yield_every=settings.rollback_yield_every)

    async def execute(
        self,
        workouts: Sequence[Any],
        target_format: str,
        on_progress: Optional[RollbackProgressCallback] = None,
    ) -> RollbackWorkoutsResult:
        """
        Roll every workout back to ``target_format``.

        Args:
            workouts: Unified sessions (models or camelCase dicts)
            target_format: strength, conditioning, hybrid or agility
            on_progress: Called with an integer percentage after each record

        Returns:
            RollbackWorkoutsResult; ``rolled_back`` holds the legacy records
            of the successful rollbacks in input order
        """
        result = RollbackWorkoutsResult(success=True, target_format=str(target_format))
        try:
            total = len(workouts)
            logger.info(f"Rolling back {total} workouts to {target_format}")
            for index, workout in enumerate(workouts):
                try:
                    outcome = rollback_migration(workout, target_format)
                except Exception as e:
                    outcome = MigrationResult(
                        success=False,
                        errors=[
                            MigrationError(
                                field="general",
                                message=f"Rollback failed for workout {_workout_id(workout)}: {e}",
                                code=ErrorCode.ROLLBACK_ERROR,
                            )
                        ],
                        metadata=MigrationMetadata(source_type=WorkoutFormat.UNKNOWN),
                    )

                result.results.append(outcome)
                if outcome.success:
                    result.rolled_back.append(outcome.data)
                else:
                    result.errors.extend(outcome.errors)

                result.progress = round((index + 1) / total * 100)
                if on_progress is not None:
                    on_progress(result.progress)

                if index % self._yield_every == 0:
                    await asyncio.sleep(self._yield_seconds)

            result.progress = 100
        except Exception as e:
            logger.error(f"Rollback operation failed: {e}")
            result.success = False
            result.errors.append(
                MigrationError(
                    field="general",
                    message=f"Rollback operation failed: {e}",
                    code=ErrorCode.ROLLBACK_OPERATION_ERROR,
                )
            )
            return result

        result.success = not result.errors
        logger.info(
            f"Rollback to {target_format} finished: "
            f"{len(result.rolled_back)} rolled back, {len(result.errors)} errors"
        )
        return result
