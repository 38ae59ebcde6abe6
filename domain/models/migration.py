"""
Result types for migration and rollback.

Every public operation of the engine reports its outcome as data: a
``MigrationResult`` carries the success flag, the converted payload, errors,
warnings and audit metadata. Nothing here raises for expected failures.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import Field

from domain.models.base import DomainModel, Number
from domain.models.block import DEFAULT_REST_BETWEEN_SETS, SECONDS_PER_SET
from domain.models.workout import UnifiedWorkoutSession


class WorkoutFormat(str, Enum):
    """Shapes the format detector can classify a record as."""

    STRENGTH = "strength"
    CONDITIONING = "conditioning"
    HYBRID = "hybrid"
    AGILITY = "agility"
    UNIFIED = "unified"
    UNKNOWN = "unknown"

    @classmethod
    def legacy(cls) -> List["WorkoutFormat"]:
        """The four formats that have forward and rollback converters."""
        return [cls.STRENGTH, cls.CONDITIONING, cls.HYBRID, cls.AGILITY]

    @property
    def is_legacy(self) -> bool:
        return self in WorkoutFormat.legacy()


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    UNKNOWN_FORMAT = "UNKNOWN_FORMAT"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MIGRATION_ERROR = "MIGRATION_ERROR"
    INVALID_EXERCISES = "INVALID_EXERCISES"
    ROLLBACK_ERROR = "ROLLBACK_ERROR"
    ROLLBACK_OPERATION_ERROR = "ROLLBACK_OPERATION_ERROR"


class MigrationError(DomainModel):
    """A failure attached to a specific field (or ``general``)."""

    field: str
    message: str
    code: ErrorCode
    original_value: Optional[Any] = None


class MigrationWarning(DomainModel):
    """A non-fatal issue; never flips ``success`` to False."""

    field: str
    message: str
    suggestion: Optional[str] = None


class FieldLoss(DomainModel):
    """
    Per-field account of what a conversion did with a piece of data.

    - reconstructed: rebuilt from data the target shape carries
    - defaulted: not available, filled with a fixed default
    - dropped: present in the source, absent from the output
    """

    field: str
    disposition: Literal["reconstructed", "defaulted", "dropped"]
    note: Optional[str] = None


class MigrationMetadata(DomainModel):
    """Audit trail for one conversion."""

    source_type: WorkoutFormat
    source_version: Optional[str] = None
    migrated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    fields_modified: List[str] = Field(default_factory=list)
    data_loss: bool = False
    field_losses: List[FieldLoss] = Field(default_factory=list)

    @property
    def dropped_fields(self) -> List[str]:
        return [loss.field for loss in self.field_losses if loss.disposition == "dropped"]


class MigrationResult(DomainModel):
    """
    Outcome of converting a single record.

    ``data`` is a ``UnifiedWorkoutSession`` for forward migrations and a
    legacy-shaped dict for rollbacks. Failed results carry no data. Plain
    dicts are never coerced into sessions.
    """

    success: bool
    data: Optional[Union[Dict[str, Any], UnifiedWorkoutSession]] = Field(
        default=None, union_mode="left_to_right"
    )
    errors: List[MigrationError] = Field(default_factory=list)
    warnings: List[MigrationWarning] = Field(default_factory=list)
    metadata: MigrationMetadata

    @property
    def error_codes(self) -> List[ErrorCode]:
        return [error.code for error in self.errors]


class ValidationIssue(DomainModel):
    """Structural problem found by the pre-migration validator."""

    field: str
    message: str
    code: ErrorCode = ErrorCode.VALIDATION_ERROR

    def to_migration_error(self) -> MigrationError:
        return MigrationError(field=self.field, message=self.message, code=self.code)


class ValidationResult(DomainModel):
    """Outcome of the shallow structural validator."""

    is_valid: bool
    errors: List[ValidationIssue] = Field(default_factory=list)


class MigrationOptions(DomainModel):
    """
    Per-call converter options.

    Defaults reproduce the historical behaviour: source ids are kept, unknown
    hybrid blocks are skipped with a warning, and strength durations assume a
    minute per set.
    """

    preserve_ids: bool = Field(
        default=True, description="Keep the source id; False always mints a new one"
    )
    strict_mode: bool = Field(
        default=False,
        description="Fail the record on an unknown hybrid block instead of skipping it",
    )
    seconds_per_set: Number = Field(default=SECONDS_PER_SET, gt=0)
    default_rest_between_sets: Number = Field(default=DEFAULT_REST_BETWEEN_SETS, ge=0)

    @classmethod
    def from_settings(cls, settings: Any) -> "MigrationOptions":
        """Build options from application settings."""
        return cls(
            seconds_per_set=settings.migration_seconds_per_set,
            default_rest_between_sets=settings.migration_default_rest_between_sets,
        )
