"""
Pre-migration validation.

Intentionally shallow: it gates a record on the existence (and list-ness) of
the top-level collection its converter walks, and nothing deeper. Full schema
validation happens when the converter builds the unified models.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, List, Union

from domain.detection import detect_workout_format
from domain.models import (
    ErrorCode,
    MigrationError,
    ValidationIssue,
    ValidationResult,
    WorkoutFormat,
)

# (field, must be a list, message) per legacy format
_REQUIRED_FIELDS = {
    WorkoutFormat.STRENGTH: [("exercises", True, "Exercises array is required")],
    WorkoutFormat.CONDITIONING: [
        ("intervals", True, "Intervals array is required"),
        ("equipment", False, "Equipment is required"),
    ],
    WorkoutFormat.HYBRID: [("blocks", True, "Blocks array is required")],
    WorkoutFormat.AGILITY: [("phases", True, "Phases array is required")],
}


def _coerce_format(workout_format: Union[WorkoutFormat, str]) -> WorkoutFormat:
    try:
        return WorkoutFormat(workout_format)
    except ValueError:
        return WorkoutFormat.UNKNOWN


def validate_workout_data(
    record: Any, workout_format: Union[WorkoutFormat, str]
) -> ValidationResult:
    """
    Check that a record has the minimum structure for its claimed format.

    Args:
        record: The raw record.
        workout_format: Format the record claims to be (usually the output of
            ``detect_workout_format``).

    Returns:
        ValidationResult with one issue per missing/invalid field. Unknown or
        unrecognised formats always fail with a single ``UNKNOWN_FORMAT``
        issue. Unified records pass.
    """
    fmt = _coerce_format(workout_format)

    if fmt == WorkoutFormat.UNKNOWN:
        return ValidationResult(
            is_valid=False,
            errors=[
                ValidationIssue(
                    field="format",
                    message="Unknown workout format",
                    code=ErrorCode.UNKNOWN_FORMAT,
                )
            ],
        )
    if fmt == WorkoutFormat.UNIFIED:
        return ValidationResult(is_valid=True)

    data = record if isinstance(record, Mapping) else {}
    errors: List[ValidationIssue] = []
    for field_name, must_be_list, message in _REQUIRED_FIELDS[fmt]:
        value = data.get(field_name)
        present = isinstance(value, list) if must_be_list else bool(value)
        if not present:
            errors.append(ValidationIssue(field=field_name, message=message))

    return ValidationResult(is_valid=not errors, errors=errors)


@dataclass
class CheckResult:
    """Result of detecting and validating a record in one step."""

    workout_format: WorkoutFormat
    is_valid: bool
    errors: List[MigrationError] = field(default_factory=list)


def check_workout(record: Any) -> CheckResult:
    """
    Detect a record's format and validate it against that format.

    Validator issues are reported as ``VALIDATION_ERROR`` migration errors;
    an undetectable record yields a single ``UNKNOWN_FORMAT`` error.
    """
    fmt = detect_workout_format(record)

    if fmt == WorkoutFormat.UNKNOWN:
        return CheckResult(
            workout_format=fmt,
            is_valid=False,
            errors=[
                MigrationError(
                    field="format",
                    message="Unknown workout format",
                    code=ErrorCode.UNKNOWN_FORMAT,
                )
            ],
        )

    validation = validate_workout_data(record, fmt)
    return CheckResult(
        workout_format=fmt,
        is_valid=validation.is_valid,
        errors=[issue.to_migration_error() for issue in validation.errors],
    )
