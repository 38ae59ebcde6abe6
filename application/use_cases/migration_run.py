"""
State machine for a single batch migration run.

    idle -> running -> paused <-> running -> completed | cancelled | failed

``MigrationRun`` implements the ``MigrationControl`` port, so a host can hold
one, call ``pause()``/``resume()``/``cancel()`` on it, and hand it to
``BatchMigrateUseCase``. It can also wrap another control (for example a UI
adapter) and honour both. A finished run is ``reset()`` before it is reused.
"""

import logging
from enum import Enum
from typing import Dict, FrozenSet, Optional

from application.ports import MigrationControl

logger = logging.getLogger(__name__)


class RunStatus(str, Enum):
    """Lifecycle states of a batch run."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (RunStatus.COMPLETED, RunStatus.CANCELLED, RunStatus.FAILED)


_TRANSITIONS: Dict[RunStatus, FrozenSet[RunStatus]] = {
    RunStatus.IDLE: frozenset({RunStatus.RUNNING}),
    RunStatus.RUNNING: frozenset(
        {RunStatus.PAUSED, RunStatus.COMPLETED, RunStatus.CANCELLED, RunStatus.FAILED}
    ),
    RunStatus.PAUSED: frozenset({RunStatus.RUNNING, RunStatus.CANCELLED}),
    RunStatus.COMPLETED: frozenset(),
    RunStatus.CANCELLED: frozenset(),
    RunStatus.FAILED: frozenset(),
}


class InvalidRunTransition(ValueError):
    """Raised when a run is moved to a state it cannot reach."""

    def __init__(self, current: RunStatus, target: RunStatus):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move migration run from {current.value} to {target.value}")


class MigrationRun:
    """
    Pause/cancel flags plus the status of one run.

    Flags are plain attributes read at the batch loop's polling points, so
    setting them from a progress callback or another task is safe under
    asyncio's cooperative scheduling.

    Usage:
        >>> run = MigrationRun()
        >>> run.pause()
        >>> run.is_paused()
        True
        >>> run.resume()
        >>> run.cancel()
        >>> run.is_cancelled()
        True
    """

    def __init__(self, control: Optional[MigrationControl] = None) -> None:
        self._control = control
        self._paused = False
        self._cancelled = False
        self._status = RunStatus.IDLE

    @property
    def status(self) -> RunStatus:
        return self._status

    # -------------------------------------------------------------------------
    # MigrationControl
    # -------------------------------------------------------------------------

    def is_paused(self) -> bool:
        if self._paused:
            return True
        return self._control is not None and self._control.is_paused()

    def is_cancelled(self) -> bool:
        if self._cancelled:
            return True
        return self._control is not None and self._control.is_cancelled()

    # -------------------------------------------------------------------------
    # Host commands
    # -------------------------------------------------------------------------

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def cancel(self) -> None:
        self._cancelled = True

    # -------------------------------------------------------------------------
    # Lifecycle (driven by the batch loop)
    # -------------------------------------------------------------------------

    def transition(self, target: RunStatus) -> None:
        """Move to ``target``; raises ``InvalidRunTransition`` if not allowed."""
        if target not in _TRANSITIONS[self._status]:
            raise InvalidRunTransition(self._status, target)
        logger.debug(f"Migration run {self._status.value} -> {target.value}")
        self._status = target

    def reset(self) -> None:
        """Clear the pause/cancel flags and return to idle for another run."""
        logger.debug(f"Migration run reset from {self._status.value}")
        self._paused = False
        self._cancelled = False
        self._status = RunStatus.IDLE
