"""
Workout block value objects for the unified schema.

A unified workout is an ordered list of blocks. Each block variant carries a
literal ``type`` tag, and ``WorkoutBlock`` is the discriminated union of all
variants, so a dict with ``{"type": "interval", ...}`` validates straight into
an ``IntervalBlock``.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import Field

from domain.models.base import DomainModel, Number

# Legacy strength templates never recorded set execution time, so duration
# estimates assume one minute of work per set.
SECONDS_PER_SET = 60
DEFAULT_REST_BETWEEN_SETS = 60


class WorkoutSet(DomainModel):
    """
    A single prescribed set.

    ``completed`` is always False after migration: a migrated template has not
    been performed.
    """

    type: str = Field(default="working", description="Set type (working, warmup, drop...)")
    reps: Optional[Union[int, str]] = Field(
        default=None, description="Reps (int or string for schemes like '8-10')"
    )
    weight: Optional[Number] = Field(default=None, ge=0)
    duration: Optional[Number] = Field(default=None, ge=0, description="Seconds")
    distance: Optional[Number] = Field(default=None, ge=0)
    completed: bool = False


class BlockExercise(DomainModel):
    """One exercise entry inside an exercise block."""

    exercise_id: Optional[str] = None
    exercise_name: str = Field(default="Unknown Exercise")
    sets: List[WorkoutSet] = Field(default_factory=list)
    rest_between_sets: Number = Field(default=DEFAULT_REST_BETWEEN_SETS, ge=0)
    instructions: Optional[Union[str, List[str]]] = None

    def estimated_duration(self, seconds_per_set: Number = SECONDS_PER_SET) -> Number:
        """Seconds spent on this exercise: each set plus the rest after it."""
        return len(self.sets) * (seconds_per_set + self.rest_between_sets)


class TargetMetrics(DomainModel):
    """Optional physiological targets for an interval."""

    heart_rate: Optional[Number] = None
    power: Optional[Number] = None
    pace: Optional[Union[Number, str]] = None
    cadence: Optional[Number] = None


class AgilityMetrics(DomainModel):
    """What to measure while running a drill."""

    track_time: bool = True
    track_errors: bool = True
    target_time: Optional[Number] = None


class ExerciseBlock(DomainModel):
    """Block of one or more exercises performed set by set."""

    id: str
    type: Literal["exercise"] = "exercise"
    exercises: List[BlockExercise] = Field(default_factory=list)
    notes: Optional[str] = None

    @property
    def total_sets(self) -> int:
        return sum(len(ex.sets) for ex in self.exercises)

    def estimated_duration(self, seconds_per_set: Number = SECONDS_PER_SET) -> Number:
        """
        Estimate block duration in seconds.

        Exercise blocks carry no explicit duration, so the estimate is
        ``len(sets) * (seconds_per_set + rest_between_sets)`` summed over the
        block's exercises.
        """
        return sum(ex.estimated_duration(seconds_per_set) for ex in self.exercises)


class IntervalBlock(DomainModel):
    """Timed effort at a given intensity (0-100)."""

    id: str
    type: Literal["interval"] = "interval"
    duration: Optional[Number] = Field(default=None, ge=0)
    intensity: Optional[Number] = Field(default=None, ge=0, le=100)
    target_metrics: Optional[TargetMetrics] = None
    equipment: Optional[Union[str, List[str]]] = None
    notes: Optional[str] = None

    def estimated_duration(self, seconds_per_set: Number = SECONDS_PER_SET) -> Number:
        return self.duration or 0


class RestBlock(DomainModel):
    """Passive recovery."""

    id: str
    type: Literal["rest"] = "rest"
    duration: Optional[Number] = Field(default=None, ge=0)
    message: Optional[str] = None

    def estimated_duration(self, seconds_per_set: Number = SECONDS_PER_SET) -> Number:
        return self.duration or 0


class TransitionBlock(DomainModel):
    """Changeover between two activities."""

    id: str
    type: Literal["transition"] = "transition"
    duration: Optional[Number] = Field(default=None, ge=0)
    from_activity: Optional[str] = None
    to_activity: Optional[str] = None
    instructions: Optional[str] = None

    def estimated_duration(self, seconds_per_set: Number = SECONDS_PER_SET) -> Number:
        return self.duration or 0


class AgilityBlock(DomainModel):
    """
    A single agility drill.

    Produced by flattening agility phases; the drill pattern (cones and path)
    is carried through untouched, whether a named pattern such as
    ``t_drill`` or a cone layout.
    """

    id: str
    type: Literal["agility"] = "agility"
    drill_id: Optional[str] = None
    drill_name: Optional[str] = None
    pattern: Optional[Union[str, Dict[str, Any]]] = None
    duration: Optional[Number] = Field(default=None, ge=0)
    sets: int = Field(default=1, ge=1)
    equipment: List[str] = Field(default_factory=list)
    instructions: Optional[Union[str, List[str]]] = None
    metrics: AgilityMetrics = Field(default_factory=AgilityMetrics)

    def estimated_duration(self, seconds_per_set: Number = SECONDS_PER_SET) -> Number:
        return self.duration or 0


WorkoutBlock = Annotated[
    Union[ExerciseBlock, IntervalBlock, RestBlock, TransitionBlock, AgilityBlock],
    Field(discriminator="type"),
]

BLOCK_TYPES = ("exercise", "interval", "rest", "transition", "agility")


def total_block_duration(
    blocks: List[WorkoutBlock], seconds_per_set: Number = SECONDS_PER_SET
) -> Number:
    """Sum the estimated duration of every block, in seconds."""
    return sum(block.estimated_duration(seconds_per_set) for block in blocks)
