"""
Non-blocking in-flight guard for fetch operations.
"""

import logging
from enum import Enum

log = logging.getLogger(__name__)


class GuardState(Enum):
    """States of an operation guard."""

    IDLE = "idle"
    BUSY = "busy"


class OperationGuard:
    """
    Two-state guard that admits one run of an operation at a time.

    Unlike a lock, a caller that finds the guard busy is turned away instead of
    queued; it has to start the whole operation again later.
    """

    def __init__(self, name: str):
        self.name = name
        self._state = GuardState.IDLE

    @property
    def state(self) -> GuardState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state is GuardState.BUSY

    def try_start(self) -> bool:
        """Moves to BUSY and returns True, or returns False if already BUSY."""
        if self._state is GuardState.BUSY:
            return False
        self._state = GuardState.BUSY
        log.debug(f"Operation '{self.name}' started.")
        return True

    def finish(self) -> None:
        """Returns the guard to IDLE."""
        self._state = GuardState.IDLE
        log.debug(f"Operation '{self.name}' finished.")
