"""
Unit tests for the rollback converters (unified -> legacy).

Tests for:
- rollback_to_strength / conditioning / hybrid / agility
- rollback_migration dispatch and failure handling
- round trips back through the forward converters
"""

import pytest

from domain.converters import (
    migrate_agility_workout,
    migrate_conditioning_workout,
    migrate_hybrid_workout,
    migrate_strength_workout,
    rollback_migration,
    rollback_to_agility,
    rollback_to_conditioning,
    rollback_to_hybrid,
    rollback_to_strength,
)
from domain.detection import detect_workout_format
from domain.models import ErrorCode, WorkoutFormat
from domain.samples import (
    sample_agility_workout,
    sample_conditioning_workout,
    sample_hybrid_workout,
    sample_strength_workout,
    sample_unified_workout,
)


def _migrated(converter, record):
    result = converter(record)
    assert result.success, result.errors
    return result.data


# =============================================================================
# Strength
# =============================================================================


@pytest.mark.unit
class TestRollbackToStrength:
    """Tests for rollback_to_strength."""

    def test_exercises_rebuilt(self):
        session = _migrated(migrate_strength_workout, sample_strength_workout())
        result = rollback_to_strength(session)

        assert result.success
        template = result.data
        assert isinstance(template, dict)
        assert [e["exerciseId"] for e in template["exercises"]] == ["ex-1", "ex-2"]
        assert template["exercises"][0]["exercise"] == {"name": "Barbell Squat"}
        assert template["exercises"][0]["restBetweenSets"] == 120
        assert template["exercises"][0]["notes"] == "Focus on depth and control"
        assert template["exercises"][0]["sets"][0] == {
            "type": "working",
            "reps": 8,
            "weight": 185,
            "completed": False,
        }

    def test_template_fields(self):
        session = _migrated(migrate_strength_workout, sample_strength_workout())
        template = rollback_to_strength(session).data

        assert template["id"] == "strength-1"
        assert template["name"] == "Lower Body Strength"
        assert template["createdBy"] == "trainer-1"
        assert template["restBetweenExercises"] == 180
        assert template["warmupDuration"] == 600
        assert template["cooldownDuration"] == 300
        assert template["focusAreas"] == ["lower-body"]
        assert template["isPublic"] is False
        assert template["tags"] == ["strength", "legs"]

    def test_result_metadata(self):
        session = _migrated(migrate_strength_workout, sample_strength_workout())
        result = rollback_to_strength(session)

        assert result.metadata.source_type == WorkoutFormat.STRENGTH
        assert result.metadata.fields_modified == ["structure"]
        assert result.metadata.data_loss is True
        dispositions = {loss.field: loss.disposition for loss in result.metadata.field_losses}
        assert dispositions["exercises"] == "reconstructed"
        assert dispositions["restBetweenExercises"] == "reconstructed"
        assert dispositions["metadata.permissions"] == "dropped"

    def test_non_strength_blocks_reported_dropped(self):
        session = _migrated(migrate_hybrid_workout, sample_hybrid_workout())
        result = rollback_to_strength(session)

        assert result.success
        assert len(result.data["exercises"]) == 1
        assert "content.blocks[1]" in result.metadata.dropped_fields

    def test_output_detects_and_remigrates_as_strength(self):
        session = _migrated(migrate_strength_workout, sample_strength_workout())
        template = rollback_to_strength(session).data

        assert detect_workout_format(template) == WorkoutFormat.STRENGTH
        again = _migrated(migrate_strength_workout, template)
        assert again.block_types == session.block_types
        assert again.content.total_duration == session.content.total_duration


# =============================================================================
# Conditioning
# =============================================================================


@pytest.mark.unit
class TestRollbackToConditioning:
    """Tests for rollback_to_conditioning."""

    def test_intervals_and_rest_pairing(self):
        session = _migrated(migrate_conditioning_workout, sample_conditioning_workout())
        program = rollback_to_conditioning(session).data

        assert len(program["intervals"]) == 5
        assert [i.get("restAfter") for i in program["intervals"]] == [120, 120, 120, 120, None]
        assert program["intervals"][0]["targetHeartRate"] == 150
        assert program["intervals"][0]["targetPower"] == 200
        assert program["equipment"] == "bike"
        assert program["totalDuration"] == 1860

    def test_equipment_is_last_interval_equipment(self):
        record = sample_conditioning_workout()
        record["intervals"][-1]["equipment"] = "rower"
        session = _migrated(migrate_conditioning_workout, record)
        assert rollback_to_conditioning(session).data["equipment"] == "rower"

    def test_equipment_defaults_to_bike(self):
        result = rollback_to_conditioning(sample_unified_workout("conditioning"))

        assert result.data["equipment"] == "bike"
        assert result.data["intervals"] == []
        defaulted = [l.field for l in result.metadata.field_losses if l.disposition == "defaulted"]
        assert defaulted == ["equipment"]

    def test_warning_and_metadata(self):
        session = _migrated(migrate_conditioning_workout, sample_conditioning_workout())
        result = rollback_to_conditioning(session)

        assert [w.field for w in result.warnings] == ["metadata"]
        assert result.warnings[0].message == "Some unified metadata was lost in rollback"
        assert result.metadata.fields_modified == ["structure", "metadata"]
        assert result.metadata.data_loss is True

    def test_output_detects_as_conditioning(self):
        session = _migrated(migrate_conditioning_workout, sample_conditioning_workout())
        program = rollback_to_conditioning(session).data
        assert detect_workout_format(program) == WorkoutFormat.CONDITIONING


# =============================================================================
# Hybrid
# =============================================================================


@pytest.mark.unit
class TestRollbackToHybrid:
    """Tests for rollback_to_hybrid."""

    def test_block_ids_and_types_preserved(self):
        session = _migrated(migrate_hybrid_workout, sample_hybrid_workout())
        workout = rollback_to_hybrid(session).data

        assert [b["id"] for b in workout["blocks"]] == ["block-1", "block-2"]
        assert [b["type"] for b in workout["blocks"]] == ["exercise", "interval"]

    def test_exercise_block_uses_legacy_keys(self):
        session = _migrated(migrate_hybrid_workout, sample_hybrid_workout())
        exercise = rollback_to_hybrid(session).data["blocks"][0]["exercises"][0]
        assert exercise["id"] == "ex-1"
        assert exercise["name"] == "Push-ups"
        assert exercise["restBetweenSets"] == 30

    def test_rest_message_returns_as_notes(self):
        record = sample_hybrid_workout(blocks=[{"id": "r1", "type": "rest", "duration": 60, "notes": "Breathe"}])
        session = _migrated(migrate_hybrid_workout, record)
        block = rollback_to_hybrid(session).data["blocks"][0]
        assert block == {"id": "r1", "type": "rest", "duration": 60, "notes": "Breathe"}

    def test_no_data_loss(self):
        session = _migrated(migrate_hybrid_workout, sample_hybrid_workout())
        result = rollback_to_hybrid(session)

        assert result.metadata.data_loss is False
        assert result.metadata.fields_modified == ["metadata"]
        assert result.warnings == []

    def test_round_trip(self):
        """migrate -> rollback -> migrate keeps block types, ids and contents."""
        first = _migrated(migrate_hybrid_workout, sample_hybrid_workout())
        legacy = rollback_to_hybrid(first).data

        assert detect_workout_format(legacy) == WorkoutFormat.HYBRID
        second = _migrated(migrate_hybrid_workout, legacy)
        assert second.block_types == first.block_types
        assert second.block_ids == first.block_ids
        assert second.content.blocks == first.content.blocks
        assert second.content.total_duration == first.content.total_duration
        assert second.metadata.equipment == first.metadata.equipment


# =============================================================================
# Agility
# =============================================================================


@pytest.mark.unit
class TestRollbackToAgility:
    """Tests for rollback_to_agility."""

    def test_single_main_phase(self):
        session = _migrated(migrate_agility_workout, sample_agility_workout())
        result = rollback_to_agility(session)
        phases = result.data["phases"]

        assert len(phases) == 1
        assert phases[0]["id"] == "main"
        assert phases[0]["name"] == "Main Phase"
        assert phases[0]["description"] == "Converted from unified format"
        assert phases[0]["order"] == 0

    def test_drills_recover_rest_after(self):
        session = _migrated(migrate_agility_workout, sample_agility_workout())
        drill = rollback_to_agility(session).data["phases"][0]["drills"][0]

        assert drill["id"] == "drill-1"
        assert drill["name"] == "T-Drill"
        assert drill["sets"] == 3
        assert drill["targetTime"] == 12
        assert drill["restAfter"] == 60

    def test_phases_are_merged(self):
        record = {
            "id": "a-1",
            "phases": [
                {"name": "Speed", "restAfter": 90, "drills": [{"id": "d1", "restAfter": 30}]},
                {"name": "Cool", "drills": [{"id": "d2"}]},
            ],
        }
        session = _migrated(migrate_agility_workout, record)
        drills = rollback_to_agility(session).data["phases"][0]["drills"]

        assert [d["id"] for d in drills] == ["d1", "d2"]
        assert drills[0]["restAfter"] == 30
        assert "restAfter" not in drills[1]

    def test_warning_and_metadata(self):
        session = _migrated(migrate_agility_workout, sample_agility_workout())
        result = rollback_to_agility(session)

        assert [w.message for w in result.warnings] == ["Phase structure was simplified during rollback"]
        assert result.metadata.fields_modified == ["phases", "metadata"]
        assert result.metadata.data_loss is True
        assert "phases[].restAfter" in result.metadata.dropped_fields

    def test_output_detects_as_agility(self):
        session = _migrated(migrate_agility_workout, sample_agility_workout())
        assert detect_workout_format(rollback_to_agility(session).data) == WorkoutFormat.AGILITY


# =============================================================================
# rollback_migration
# =============================================================================


@pytest.mark.unit
class TestRollbackMigration:
    """Tests for the rollback dispatcher."""

    @pytest.mark.parametrize("target", ["strength", "conditioning", "hybrid", "agility"])
    def test_accepts_camel_case_dict(self, target):
        result = rollback_migration(sample_unified_workout(target), target)
        assert result.success
        assert isinstance(result.data, dict)
        assert result.data["id"] == f"unified-{target}-1"
        assert result.metadata.source_type == WorkoutFormat(target)

    def test_accepts_enum_target(self):
        session = _migrated(migrate_hybrid_workout, sample_hybrid_workout())
        assert rollback_migration(session, WorkoutFormat.HYBRID).success

    @pytest.mark.parametrize("target", ["yoga", "unified", "unknown"])
    def test_unsupported_target(self, target):
        result = rollback_migration(sample_unified_workout("strength"), target)

        assert not result.success
        assert result.data is None
        assert result.error_codes == [ErrorCode.ROLLBACK_ERROR]
        assert result.errors[0].message.startswith("Rollback failed: ")

    def test_invalid_session(self):
        result = rollback_migration({"foo": 1}, "strength")

        assert not result.success
        assert result.error_codes == [ErrorCode.ROLLBACK_ERROR]
        assert result.metadata.source_type == WorkoutFormat.STRENGTH

    def test_legacy_record_is_not_a_session(self):
        result = rollback_migration(sample_strength_workout(), "strength")
        assert not result.success

    @pytest.mark.parametrize(
        "rollback,target",
        [
            (rollback_to_strength, WorkoutFormat.STRENGTH),
            (rollback_to_conditioning, WorkoutFormat.CONDITIONING),
            (rollback_to_hybrid, WorkoutFormat.HYBRID),
            (rollback_to_agility, WorkoutFormat.AGILITY),
        ],
    )
    def test_per_format_rollback_never_raises(self, rollback, target):
        result = rollback({"id": "broken", "content": "nope"})

        assert not result.success
        assert result.error_codes == [ErrorCode.ROLLBACK_ERROR]
        assert result.metadata.source_type == target
