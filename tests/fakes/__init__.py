"""
Fake implementations for testing.

This package provides in-memory fakes for the application ports so the batch
and rollback use cases can be exercised without a host UI or real timing.

Features:
- FakeMigrationControl implements the MigrationControl Protocol
- Scripted pause/resume/cancel behaviour
- ProgressRecorder collects every progress snapshot

Usage:
    from tests.fakes import FakeMigrationControl, ProgressRecorder

    control = FakeMigrationControl(paused=True, resume_after=2)
    recorder = ProgressRecorder()
    result = await use_case.execute(records, on_progress=recorder, control=control)
"""

from tests.fakes.migration_control import FakeMigrationControl, ProgressRecorder

__all__ = [
    "FakeMigrationControl",
    "ProgressRecorder",
]
