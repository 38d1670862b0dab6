"""
Delayed callbacks for timed presentation phases.

The session only needs one operation: run a callback once after a delay,
with a handle that can cancel it. Anything implementing the Scheduler
protocol can be injected (tests use a manually advanced scheduler).
"""

import threading
from typing import Callable, Protocol


class ScheduledCall(Protocol):
    """Handle to a pending callback."""

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Runs a callback once after a delay."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        ...


class ThreadingScheduler:
    """Scheduler backed by daemon threading.Timer instances."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer
