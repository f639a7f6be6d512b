"""
Clock and timer used by the engine to enforce the time budget.
"""

import time
from typing import Protocol


class Clock(Protocol):
    """Source of wall-clock time in seconds."""

    def now(self) -> float: ...


class SystemClock:
    """Clock backed by time.time()."""

    def now(self) -> float:
        return time.time()


class Timer:
    """
    Measures the time spent since it was started against a budget.

    :param clock: The clock to read time from.
    :param budget: Budget in seconds.
    """

    def __init__(self, clock: Clock, budget: float):
        if budget <= 0:
            raise ValueError("budget must be positive")

        self.clock = clock
        self.budget = budget
        self.started_at: float = clock.now()

    def elapsed(self) -> float:
        return self.clock.now() - self.started_at

    def exceeded(self) -> bool:
        """True once more than the budget has passed since start."""
        return self.elapsed() > self.budget
