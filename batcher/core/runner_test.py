"""
Test cases for the thread runner.
"""

import asyncio
import time
import unittest

from .runner import SmallRunner, go_func


def add(a, b):
    return a + b


def fail():
    raise ValueError("runner failure")


async def async_add(a, b):
    await asyncio.sleep(0.01)
    return a + b


def slow():
    time.sleep(0.5)


class TestSmallRunner(unittest.TestCase):
    """Test running functions in the background."""

    def test_sync_result(self):
        """Test getting the result of a function."""
        runner = go_func(add, 2, b=3)
        self.assertEqual(runner.get_results(timeout=5), 5)

    def test_async_result(self):
        """Test coroutines run in their own event loop."""
        runner = go_func(async_add, 1, 2)
        self.assertEqual(runner.get_results(timeout=5), 3)

    def test_error_is_raised(self):
        """Test errors of the task are raised by get_results."""
        runner = go_func(fail)
        with self.assertRaises(ValueError) as context:
            runner.get_results(timeout=5)
        self.assertEqual(str(context.exception), "runner failure")

    def test_timeout(self):
        """Test waiting for a slow task."""
        runner = go_func(slow)
        with self.assertRaises(TimeoutError):
            runner.get_results(timeout=0.05)
        runner.join()

    def test_thread_name(self):
        """Test the thread is named after the task."""
        runner = SmallRunner(add, 1, 1)
        self.assertEqual(runner.name, "add")
        self.assertTrue(runner.daemon)


if __name__ == "__main__":
    unittest.main()
