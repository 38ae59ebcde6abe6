"""
Migration Control Interface (Port).

Defines how a batch run learns that its host wants it to pause or stop. The
batch loop polls both flags before every record, so an implementation only
has to answer two questions; it never needs to call into the run.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class MigrationControl(Protocol):
    """Cooperative pause/cancel signal for a batch migration."""

    def is_paused(self) -> bool:
        """
        Whether processing should be suspended.

        While True the batch loop waits before the next record; partial
        progress is kept.
        """
        ...

    def is_cancelled(self) -> bool:
        """
        Whether the run should stop before starting the next record.

        A conversion already in progress always finishes.
        """
        ...
