"""
Interfaces (Ports) for the workout migration engine.

This package defines the abstract interfaces the application layer needs
from its host. The engine has no storage of its own, so the only port is the
pause/cancel signal a batch run polls.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the use cases need)
- Adapters: Whatever the host provides (a UI, a CLI signal handler, a test fake)

Usage:
    from application.ports import MigrationControl

    class StopButton:
        def __init__(self):
            self.pressed = False

        def is_paused(self) -> bool:
            return False

        def is_cancelled(self) -> bool:
            return self.pressed
"""

from application.ports.migration_control import MigrationControl

__all__ = [
    "MigrationControl",
]
