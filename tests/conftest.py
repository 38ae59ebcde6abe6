"""
Shared pytest fixtures: fake ports, sample records and use cases.

Usage:
    def test_something(fake_control, progress_recorder):
        fake_control.paused = True
        ...
"""

import pytest

from application.use_cases import BatchMigrateUseCase, RollbackWorkoutsUseCase
from backend.settings import get_settings
from domain.samples import (
    sample_agility_workout,
    sample_conditioning_workout,
    sample_hybrid_workout,
    sample_strength_workout,
)
from tests.fakes import FakeMigrationControl, ProgressRecorder


@pytest.fixture
def fake_control():
    """Fresh FakeMigrationControl; neither paused nor cancelled."""
    control = FakeMigrationControl()
    yield control
    control.reset()


@pytest.fixture
def progress_recorder():
    return ProgressRecorder()


@pytest.fixture
def batch_use_case():
    """BatchMigrateUseCase that never sleeps between batches."""
    return BatchMigrateUseCase(batch_pause_seconds=0, pause_poll_seconds=0)


@pytest.fixture
def rollback_use_case():
    return RollbackWorkoutsUseCase(yield_seconds=0)


@pytest.fixture
def legacy_records():
    """One record of each legacy format."""
    return [
        sample_strength_workout(),
        sample_conditioning_workout(),
        sample_hybrid_workout(),
        sample_agility_workout(),
    ]


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
