"""
Unified workout session - the canonical target of every migration.

All four legacy shapes (strength templates, conditioning interval programs,
hybrid block workouts, agility drill sessions) are normalized into a
``UnifiedWorkoutSession``. Unification normalizes structure, not domain: the
session keeps the family it came from in ``type``.
"""

from datetime import datetime, timezone
from typing import Any, List, Literal, Optional

from pydantic import Field, field_validator

from domain.models.base import DomainModel, Number
from domain.models.block import WorkoutBlock

UNIFIED_SCHEMA_VERSION = "1.0.0"

SessionType = Literal["strength", "conditioning", "hybrid", "agility"]
Difficulty = Literal["beginner", "intermediate", "advanced", "elite"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _dedupe(values: List[str]) -> List[str]:
    """Remove duplicates while preserving first-seen order."""
    seen = set()
    unique = []
    for value in values:
        if value not in seen:
            seen.add(value)
            unique.append(value)
    return unique


class WarmupCooldown(DomainModel):
    """Warmup or cooldown segment wrapped around the main blocks."""

    duration: Optional[Number] = Field(default=None, ge=0)
    exercises: List[Any] = Field(default_factory=list)
    instructions: Optional[str] = None


class IntervalSettings(DomainModel):
    """Playback settings carried over from conditioning programs."""

    rest_between_intervals: Optional[Number] = None
    audio_cues: Optional[bool] = None
    countdown_beeps: Optional[bool] = None


class WorkoutContent(DomainModel):
    """
    The executable part of a session.

    ``blocks`` order is execution order and is never rearranged. The
    format-specific optional fields are only populated by the converter for
    the matching legacy family.
    """

    blocks: List[WorkoutBlock] = Field(default_factory=list)
    warmup: Optional[WarmupCooldown] = None
    cooldown: Optional[WarmupCooldown] = None
    total_duration: Number = Field(default=0, ge=0, description="Seconds")
    estimated_calories: Optional[Number] = None
    difficulty: Difficulty = "intermediate"

    # Format-specific extras
    target_muscle_groups: Optional[List[str]] = None
    target_systems: Optional[List[str]] = None
    interval_settings: Optional[IntervalSettings] = None
    focus_areas: Optional[List[str]] = None
    equipment: Optional[List[str]] = None
    transition_time: Optional[Number] = None
    progression_rules: Optional[Any] = None


class Permissions(DomainModel):
    """Role lists controlling who may edit, view and share a session."""

    can_edit: List[str] = Field(default_factory=lambda: ["owner", "admin"])
    can_view: List[str] = Field(default_factory=lambda: ["owner", "team"])
    can_share: List[str] = Field(default_factory=lambda: ["owner", "admin"])


class StandardMetadata(DomainModel):
    """Audit, ownership and classification fields shared by every session."""

    created_by: str = "system"
    created_at: datetime = Field(default_factory=_utcnow)
    last_modified_by: str = "system"
    last_modified_at: datetime = Field(default_factory=_utcnow)
    tags: List[str] = Field(default_factory=list)
    category: str = "general"
    is_template: bool = True
    version: int = Field(
        default=1,
        ge=1,
        description="Revision counter within the unified schema; 1 for fresh migrations",
    )
    equipment: List[str] = Field(default_factory=list)
    target_audience: List[str] = Field(default_factory=lambda: ["intermediate"])
    language: str = "en"
    visibility: Literal["public", "private"] = "private"
    permissions: Permissions = Field(default_factory=Permissions)
    test_requirements: Optional[List[str]] = None

    @field_validator("tags", "equipment")
    @classmethod
    def validate_unique(cls, v: List[str]) -> List[str]:
        """Tags and equipment are sets; drop duplicates, keep order."""
        return _dedupe(v)


class Assignments(DomainModel):
    """Who the session is scheduled for and when."""

    player_ids: List[str] = Field(default_factory=list)
    team_ids: List[str] = Field(default_factory=list)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    recurrence: Optional[Any] = None


class UnifiedWorkoutSession(DomainModel):
    """
    Aggregate root of the unified schema.

    Examples:
        >>> session = UnifiedWorkoutSession(
        ...     id="w-1",
        ...     type="conditioning",
        ...     name="Bike Intervals",
        ...     content=WorkoutContent(total_duration=1800),
        ... )
        >>> session.version
        '1.0.0'
        >>> session.metadata.version
        1
    """

    id: str = Field(..., min_length=1)
    version: str = UNIFIED_SCHEMA_VERSION
    type: SessionType
    name: str = "Untitled Workout"
    description: Optional[str] = None
    content: WorkoutContent = Field(default_factory=WorkoutContent)
    metadata: StandardMetadata = Field(default_factory=StandardMetadata)
    assignments: Optional[Assignments] = None

    @property
    def block_types(self) -> List[str]:
        """Block type tags in execution order."""
        return [block.type for block in self.content.blocks]

    @property
    def block_ids(self) -> List[str]:
        return [block.id for block in self.content.blocks]

    @property
    def block_count(self) -> int:
        return len(self.content.blocks)

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f'UnifiedWorkoutSession("{self.name}", {self.type}, '
            f"{self.block_count} blocks, {self.content.total_duration}s)"
        )
