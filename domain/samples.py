"""
Sample workout records in every supported shape.

Used by the benchmark harness, the CLI's self-check and the test suite. Each
generator returns a fresh JSON-compatible dict, so callers may mutate the
result freely. Keyword overrides replace top-level keys.

Examples:
    >>> from domain.samples import sample_strength_workout
    >>> record = sample_strength_workout(id="strength-42")
    >>> record["id"], len(record["exercises"])
    ('strength-42', 2)
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List

CREATED_AT = "2024-01-01T00:00:00Z"
UPDATED_AT = "2024-01-02T00:00:00Z"


def sample_strength_workout(**overrides: Any) -> Dict[str, Any]:
    """Lower-body strength template: squat and Romanian deadlift, 3 sets each."""
    squat = {
        "id": "ex-1",
        "name": "Barbell Squat",
        "description": "Compound leg exercise",
        "muscleGroups": ["quadriceps", "glutes"],
        "equipment": ["barbell", "rack"],
        "difficulty": "intermediate",
        "category": "strength",
    }

    def workout_exercise(exercise_id: str, exercise: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "exerciseId": exercise_id,
            "exercise": exercise,
            "sets": [
                {"type": "working", "reps": 8, "weight": 185, "completed": False},
                {"type": "working", "reps": 6, "weight": 205, "completed": False},
                {"type": "working", "reps": 4, "weight": 225, "completed": False},
            ],
            "restBetweenSets": 120,
            "notes": "Focus on depth and control",
        }

    record = {
        "id": "strength-1",
        "name": "Lower Body Strength",
        "description": "Heavy compound movements for legs",
        "exercises": [
            workout_exercise("ex-1", squat),
            workout_exercise("ex-2", {**squat, "id": "ex-2", "name": "Romanian Deadlift"}),
        ],
        "warmupDuration": 600,
        "cooldownDuration": 300,
        "restBetweenExercises": 180,
        "estimatedDuration": 3600,
        "difficulty": "intermediate",
        "focusAreas": ["lower-body"],
        "createdBy": "trainer-1",
        "createdAt": CREATED_AT,
        "updatedAt": UPDATED_AT,
        "isTemplate": True,
        "isPublic": False,
        "tags": ["strength", "legs"],
    }
    record.update(overrides)
    return record


def sample_conditioning_workout(**overrides: Any) -> Dict[str, Any]:
    """Bike interval program: five intervals, 1860s total."""

    def interval(duration: int, intensity: int, rest_after: int = 120) -> Dict[str, Any]:
        return {
            "duration": duration,
            "intensity": intensity,
            "targetHeartRate": 150,
            "targetPower": 200,
            "equipment": "bike",
            "restAfter": rest_after,
        }

    record = {
        "id": "conditioning-1",
        "name": "HIIT Bike Intervals",
        "description": "High-intensity cycling workout",
        "intervals": [
            interval(300, 60),
            interval(120, 85),
            interval(120, 90),
            interval(120, 85),
            interval(300, 50, rest_after=0),
        ],
        "equipment": "bike",
        "totalDuration": 1860,
        "warmupDuration": 300,
        "cooldownDuration": 300,
        "restBetweenIntervals": 120,
        "estimatedCalories": 400,
        "averageIntensity": 75,
        "targetSystems": ["cardiovascular"],
        "audioCues": True,
        "countdownBeeps": True,
        "createdBy": "trainer-1",
        "createdAt": CREATED_AT,
    }
    record.update(overrides)
    return record


def sample_hybrid_workout(**overrides: Any) -> Dict[str, Any]:
    """Circuit: a push-up exercise block followed by a rowing interval."""
    record = {
        "id": "hybrid-1",
        "name": "Circuit Training",
        "description": "Mixed strength and cardio workout",
        "blocks": [
            {
                "id": "block-1",
                "type": "exercise",
                "exercises": [
                    {
                        "id": "ex-1",
                        "name": "Push-ups",
                        "sets": [
                            {"type": "working", "reps": 15, "completed": False},
                            {"type": "working", "reps": 12, "completed": False},
                            {"type": "working", "reps": 10, "completed": False},
                        ],
                        "restBetweenSets": 30,
                    }
                ],
                "notes": "Maintain proper form",
            },
            {
                "id": "block-2",
                "type": "interval",
                "duration": 240,
                "intensity": 80,
                "equipment": "rower",
                "targetMetrics": {"heartRate": 160, "power": 250},
            },
        ],
        "warmup": {"duration": 300, "exercises": [], "instructions": "Dynamic warmup"},
        "cooldown": {"duration": 300, "exercises": [], "instructions": "Static stretching"},
        "totalDuration": 2400,
        "estimatedCalories": 350,
        "difficulty": "intermediate",
        "targetMuscleGroups": ["full-body"],
        "targetSystems": ["muscular", "cardiovascular"],
        "transitionTime": 30,
        "equipment": ["bodyweight", "rower"],
        "createdBy": "trainer-1",
        "createdAt": CREATED_AT,
        "isTemplate": True,
    }
    record.update(overrides)
    return record


def sample_agility_workout(**overrides: Any) -> Dict[str, Any]:
    """Agility session with a single phase holding a T-drill."""
    t_drill_pattern = {
        "cones": [
            {"x": 0, "y": 0, "label": "Start"},
            {"x": 0, "y": 10, "label": "A"},
            {"x": -5, "y": 10, "label": "B"},
            {"x": 5, "y": 10, "label": "C"},
        ],
        "path": [
            {"from": 0, "to": 1, "direction": "forward", "distance": 10},
            {"from": 1, "to": 2, "direction": "left", "distance": 5},
            {"from": 2, "to": 1, "direction": "right", "distance": 5},
            {"from": 1, "to": 3, "direction": "right", "distance": 5},
            {"from": 3, "to": 0, "direction": "backward", "distance": math.sqrt(125)},
        ],
    }
    drill = {
        "id": "drill-1",
        "name": "T-Drill",
        "description": "Classic agility test",
        "pattern": t_drill_pattern,
        "duration": 30,
        "sets": 3,
        "equipment": ["cones"],
        "instructions": "Sprint forward, shuffle left and right, backpedal to start",
        "trackTime": True,
        "trackErrors": True,
        "targetTime": 12,
        "restAfter": 60,
    }
    record = {
        "id": "agility-1",
        "name": "Agility Training Session",
        "description": "Multi-directional movement patterns",
        "phases": [
            {
                "id": "phase-1",
                "name": "Main Drills",
                "description": "Primary agility work",
                "drills": [drill],
                "order": 1,
                "restAfter": 120,
            }
        ],
        "warmup": {"duration": 600, "exercises": [], "instructions": "Dynamic movement prep"},
        "cooldown": {
            "duration": 300,
            "exercises": [],
            "instructions": "Light jogging and stretching",
        },
        "totalDuration": 1800,
        "estimatedCalories": 200,
        "difficulty": "intermediate",
        "focusAreas": ["change-of-direction", "acceleration"],
        "equipment": ["cones", "markers"],
        "targetLevel": "intermediate",
        "createdBy": "trainer-1",
        "createdAt": CREATED_AT,
        "isTemplate": True,
    }
    record.update(overrides)
    return record


def sample_unified_workout(workout_type: str) -> Dict[str, Any]:
    """An already-migrated session (camelCase dict) with no blocks."""
    now = datetime.now(timezone.utc).isoformat()
    return {
        "id": f"unified-{workout_type}-1",
        "version": "1.0.0",
        "type": workout_type,
        "name": f"Test {workout_type} workout",
        "description": f"Test unified {workout_type} workout",
        "content": {"blocks": [], "totalDuration": 3600, "difficulty": "intermediate"},
        "metadata": {
            "createdBy": "system",
            "createdAt": now,
            "lastModifiedBy": "system",
            "lastModifiedAt": now,
            "tags": [],
            "category": workout_type,
            "isTemplate": True,
            "version": 1,
            "equipment": [],
            "targetAudience": ["intermediate"],
            "language": "en",
            "visibility": "private",
            "permissions": {"canEdit": ["owner"], "canView": ["owner"], "canShare": ["owner"]},
        },
    }


SAMPLE_GENERATORS = {
    "strength": sample_strength_workout,
    "conditioning": sample_conditioning_workout,
    "hybrid": sample_hybrid_workout,
    "agility": sample_agility_workout,
}


@dataclass
class MigrationScenario:
    """A named record list with the outcome a batch run should produce."""

    name: str
    workouts: List[Any]
    expected_success_rate: int
    expected_warnings: int
    expected_errors: int
    description: str


def _mixed_dataset(size: int) -> List[Dict[str, Any]]:
    kinds = list(SAMPLE_GENERATORS)
    records = []
    for i in range(size):
        kind = kinds[i % len(kinds)]
        records.append(SAMPLE_GENERATORS[kind](id=f"{kind}-{i}"))
    return records


def migration_scenarios() -> List[MigrationScenario]:
    """Canned scenarios covering clean, mixed, malformed, large and migrated input."""
    return [
        MigrationScenario(
            name="All Valid Data",
            workouts=[
                sample_strength_workout(),
                sample_conditioning_workout(),
                sample_hybrid_workout(),
                sample_agility_workout(),
            ],
            expected_success_rate=100,
            expected_warnings=0,
            expected_errors=0,
            description="Perfect migration scenario with all valid data",
        ),
        MigrationScenario(
            name="Mixed Valid and Invalid",
            workouts=[
                sample_strength_workout(),
                {"invalid": "data", "missing": "fields"},
                sample_conditioning_workout(),
                None,
                sample_hybrid_workout(),
                {"type": "unknown"},
            ],
            expected_success_rate=50,
            expected_warnings=0,
            expected_errors=3,
            description="Mix of valid workouts and invalid data",
        ),
        MigrationScenario(
            name="Malformed Strength Data",
            workouts=[
                sample_strength_workout(exercises=None),
                sample_strength_workout(exercises="not-an-array"),
                sample_strength_workout(),
            ],
            expected_success_rate=33,
            expected_warnings=0,
            expected_errors=2,
            description="Strength workouts with malformed exercise data",
        ),
        MigrationScenario(
            name="Large Dataset",
            workouts=_mixed_dataset(100),
            expected_success_rate=100,
            expected_warnings=0,
            expected_errors=0,
            description="Large dataset with 100 valid workouts",
        ),
        MigrationScenario(
            name="Already Migrated",
            workouts=[
                sample_unified_workout("strength"),
                sample_unified_workout("conditioning"),
                sample_strength_workout(),
                sample_conditioning_workout(),
            ],
            expected_success_rate=100,
            expected_warnings=0,
            expected_errors=0,
            description="Mix of unified and legacy workouts",
        ),
    ]
