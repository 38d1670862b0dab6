"""
Response timing for screening sessions.

Measures the seconds between entry into the response phase and the
submission of an answer. Uses time.monotonic so system clock adjustments
during a test cannot produce negative or inflated durations.
"""

import time
from typing import Callable, Optional

from app.core.screening.errors import InvalidStateError

Clock = Callable[[], float]


class TimingRecorder:
    """
    Stopwatch for a single question's response phase.

    Usage:
        recorder = TimingRecorder()
        recorder.start()       # entering the response phase
        ...
        seconds = recorder.stop()  # on submission

    Calling start() again before stop() resets the start point. stop()
    without a prior start() raises InvalidStateError. After stop() the
    recorder is idle until the next start().
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock: Clock = clock or time.monotonic
        self._started_at: Optional[float] = None

    @property
    def is_running(self) -> bool:
        return self._started_at is not None

    def start(self) -> None:
        """Mark the start of the response phase (idempotent reset)."""
        self._started_at = self._clock()

    def stop(self) -> float:
        """
        Stop timing and return elapsed seconds.

        Returns:
            Elapsed seconds since the last start(), never negative.

        Raises:
            InvalidStateError: If start() has not been called.
        """
        if self._started_at is None:
            raise InvalidStateError("Timing recorder stopped without being started")
        elapsed = self._clock() - self._started_at
        self._started_at = None
        return max(0.0, elapsed)
