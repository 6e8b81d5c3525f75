"""
In-flight guard for mutating actions.

Rejects a second invocation of the same action (double-click on delete,
resubmitted form) while the first is still waiting on the backend.
"""

import threading
from contextlib import contextmanager
from typing import Iterator, Set


class ActionBusyError(Exception):
    """Raised when an action is invoked while already in flight."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Action '{action}' is already in progress")


class ActionGuard:
    """Tracks which named actions are currently running."""

    def __init__(self):
        self._in_flight: Set[str] = set()
        self._lock = threading.Lock()

    def is_busy(self, action: str) -> bool:
        with self._lock:
            return action in self._in_flight

    @property
    def busy_actions(self) -> Set[str]:
        with self._lock:
            return set(self._in_flight)

    @contextmanager
    def hold(self, action: str) -> Iterator[None]:
        """
        Mark ``action`` as running for the duration of the block.

        Raises:
            ActionBusyError: the action is already running
        """
        with self._lock:
            if action in self._in_flight:
                raise ActionBusyError(action)
            self._in_flight.add(action)
        try:
            yield
        finally:
            with self._lock:
                self._in_flight.discard(action)
