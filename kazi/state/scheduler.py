"""
Cooperative Timer Scheduler.

The dashboard has a handful of delayed actions: message auto-clear,
resend countdown, redirect after login, logout after account deletion.
Each is a named task; scheduling a task under a name that is already
pending replaces it, so a newer message is never cleared by the timer of
an older one.

Tasks do not run on their own thread. The owner calls ``run_due()``
(the Flask app does so at the start of every request for the client),
which runs every task whose deadline has passed on the caller's thread.

Usage:
    scheduler = Scheduler()
    scheduler.schedule(TIMER_MESSAGE, 5.0, store.clear_message)
    ...
    scheduler.run_due()
"""

import itertools
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

# Well-known timer names
TIMER_MESSAGE = "message"
TIMER_REDIRECT = "redirect"
TIMER_LOGOUT = "logout"
TIMER_RESEND = "resend-countdown"


@dataclass(order=True)
class ScheduledTask:
    """A callback due at ``due`` on the scheduler's clock."""
    due: float
    seq: int
    name: str = field(compare=False)
    callback: Callable[[], None] = field(compare=False, repr=False)


class Scheduler:
    """
    Named, cancellable, cooperatively-run timers.

    Args:
        clock: Monotonic clock in seconds; tests pass a manual clock.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._tasks: Dict[str, ScheduledTask] = {}
        self._seq = itertools.count()
        self._lock = threading.RLock()

    def now(self) -> float:
        return self._clock()

    def schedule(self, name: str, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        """Schedule ``callback`` after ``delay`` seconds, superseding any task named ``name``."""
        with self._lock:
            task = ScheduledTask(
                due=self._clock() + max(0.0, delay),
                seq=next(self._seq),
                name=name,
                callback=callback,
            )
            if name in self._tasks:
                logger.debug(f"Timer '{name}' superseded")
            self._tasks[name] = task
            return task

    def cancel(self, name: str) -> bool:
        """Cancel the pending task ``name``. Returns True if one was pending."""
        with self._lock:
            return self._tasks.pop(name, None) is not None

    def is_pending(self, name: str) -> bool:
        with self._lock:
            return name in self._tasks

    def remaining(self, name: str) -> float:
        """Seconds until ``name`` fires; 0.0 when nothing is pending."""
        with self._lock:
            task = self._tasks.get(name)
            if task is None:
                return 0.0
            return max(0.0, task.due - self._clock())

    def pending(self) -> List[str]:
        """Names of pending tasks in due order."""
        with self._lock:
            return [task.name for task in sorted(self._tasks.values())]

    def _pop_next_due(self) -> Optional[ScheduledTask]:
        with self._lock:
            now = self._clock()
            due = [task for task in self._tasks.values() if task.due <= now]
            if not due:
                return None
            task = min(due)
            del self._tasks[task.name]
            return task

    def run_due(self) -> int:
        """
        Run every task whose deadline has passed, earliest first.

        Callbacks run outside the scheduler lock and may schedule new tasks;
        those run in the same pass if they are already due.

        Returns:
            Number of callbacks executed.
        """
        executed = 0
        while True:
            task = self._pop_next_due()
            if task is None:
                return executed
            executed += 1
            try:
                task.callback()
            except Exception:
                logger.exception(f"Timer '{task.name}' callback failed")
