"""
Test cases for the clock and timer.
"""

import time
import unittest

from .clock import SystemClock, Timer


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.time = start

    def now(self) -> float:
        return self.time


class TestTimer(unittest.TestCase):
    """Test the time budget timer."""

    def test_budget_must_be_positive(self):
        """Test creating a timer without budget."""
        with self.assertRaises(ValueError):
            Timer(FakeClock(), 0)
        with self.assertRaises(ValueError):
            Timer(FakeClock(), -1)

    def test_exceeded(self):
        """Test the budget is exceeded only after more than the budget passed."""
        clock = FakeClock()
        timer = Timer(clock, 1.0)

        self.assertFalse(timer.exceeded())
        clock.time += 1.0
        self.assertFalse(timer.exceeded())
        clock.time += 0.01
        self.assertTrue(timer.exceeded())
        self.assertAlmostEqual(timer.elapsed(), 1.01)

    def test_system_clock(self):
        """Test the system clock follows wall-clock time."""
        clock = SystemClock()
        before = time.time()
        now = clock.now()
        self.assertGreaterEqual(now, before)
        self.assertLessEqual(now, time.time())


if __name__ == "__main__":
    unittest.main()
