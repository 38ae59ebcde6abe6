"""
Pre-migration analysis.

Looks at a record list before anything is converted: how many records of
each format there are, how many still need migrating, and which ones would
fail the shallow validator.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from domain.detection import detect_workout_format
from domain.models import WorkoutFormat
from domain.validation import validate_workout_data

logger = logging.getLogger(__name__)

# Rough per-record cost used for the duration estimate
ESTIMATED_MS_PER_RECORD = 50
MAX_REPORTED_ISSUES = 20


@dataclass
class MigrationAnalysis:
    """What a batch migration of a record list would face."""

    total_workouts: int
    by_format: Dict[str, int] = field(default_factory=dict)
    migration_needed: int = 0
    already_migrated: int = 0
    invalid_data: int = 0
    estimated_duration_ms: int = 0
    potential_issues: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalWorkouts": self.total_workouts,
            "byFormat": dict(self.by_format),
            "migrationNeeded": self.migration_needed,
            "alreadyMigrated": self.already_migrated,
            "invalidData": self.invalid_data,
            "estimatedDuration": self.estimated_duration_ms,
            "potentialIssues": list(self.potential_issues),
        }


def analyze_workouts(records: Sequence[Any]) -> MigrationAnalysis:
    """
    Classify and pre-validate every record without converting anything.

    Issues are numbered from 1 in input order and only the first
    ``MAX_REPORTED_ISSUES`` are kept.

    Examples:
        >>> analysis = analyze_workouts([{"foo": 1}])
        >>> analysis.invalid_data, analysis.potential_issues
        (1, ['Workout 1: Unknown format'])
    """
    analysis = MigrationAnalysis(total_workouts=len(records))
    issues: List[str] = []

    for number, record in enumerate(records, start=1):
        fmt = detect_workout_format(record)
        analysis.by_format[fmt.value] = analysis.by_format.get(fmt.value, 0) + 1

        if fmt == WorkoutFormat.UNIFIED:
            analysis.already_migrated += 1
        elif fmt == WorkoutFormat.UNKNOWN:
            analysis.invalid_data += 1
            issues.append(f"Workout {number}: Unknown format")
        else:
            analysis.migration_needed += 1
            validation = validate_workout_data(record, fmt)
            if not validation.is_valid:
                messages = ", ".join(issue.message for issue in validation.errors)
                issues.append(f"Workout {number} ({fmt.value}): {messages}")

    analysis.estimated_duration_ms = len(records) * ESTIMATED_MS_PER_RECORD
    analysis.potential_issues = issues[:MAX_REPORTED_ISSUES]

    logger.info(
        f"Analyzed {analysis.total_workouts} workouts: {analysis.migration_needed} to migrate, "
        f"{analysis.already_migrated} already migrated, {analysis.invalid_data} invalid"
    )
    return analysis
