"""Block clock.

Deadlines are pure predicates on `now()`; nothing sleeps or schedules.
"""

import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> int: ...


class SystemClock:
    """Wall clock truncated to whole seconds."""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Clock that only moves when told to, for tests and local simulation."""

    def __init__(self, start: int = 1_700_000_000) -> None:
        self._now = start

    def now(self) -> int:
        return self._now

    def increase(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError(f"Cannot move the clock backwards by {seconds}s")
        self._now += seconds
        return self._now

    def set(self, timestamp: int) -> None:
        if timestamp < self._now:
            raise ValueError(f"Cannot move the clock backwards to {timestamp}")
        self._now = timestamp
