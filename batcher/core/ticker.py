"""
Threadsafe Ticker - Mirrors Go time.Ticker.
Runs a task at a fixed interval on a background thread.
"""

import threading
import time
from datetime import timedelta
from typing import Any, Callable, Dict, Optional

from .runner import SmallRunner, go_func
from ..helper.logging import get_logger

logger = get_logger(__name__)


class Ticker:
    """
    Manages the background execution of a task at a fixed interval.
    The scheduling loop itself runs in a SmallRunner thread.
    """

    def __init__(
        self,
        interval: timedelta,
        task: Callable[..., Any],
        *args: Any,
        **kwargs: Any,
    ):
        """
        Initializes the Ticker.

        :param interval: The time delta between consecutive task executions.
        :param task: The synchronous or asynchronous function to execute.
        :param args: Positional arguments to pass to the task function.
        :param kwargs: Keyword arguments to pass to the task function.
        """
        if interval.total_seconds() <= 0:
            raise ValueError("Interval must be a positive timedelta.")

        self.interval_seconds: float = interval.total_seconds()
        self._task: Callable[..., Any] = task
        self._args: Any = args
        self._kwargs: Dict[str, Any] = kwargs
        self._runner: Optional[SmallRunner] = None
        self._stop_event = threading.Event()

        logger.debug(
            "Ticker created", task=task.__name__, interval=self.interval_seconds
        )

    def _ticker_function(self) -> None:
        """
        The loop executed by the runner thread.
        Sleeps for what is left of the interval after each run.
        """
        logger.info(
            f"Ticker {self._task.__name__} started, interval {self.interval_seconds}s."
        )

        while not self._stop_event.is_set():
            start_time = time.monotonic()

            try:
                runner = go_func(self._task, *self._args, **self._kwargs)
                runner.get_results()
            except Exception as e:
                logger.error(
                    f"Ticker {self._task.__name__}: Scheduled task failed", error=e
                )

            elapsed_time = time.monotonic() - start_time
            sleep_duration = self.interval_seconds - elapsed_time

            if sleep_duration > 0:
                # Returns early once stop() sets the event
                self._stop_event.wait(sleep_duration)
            else:
                logger.warning(
                    f"Scheduled task took too long ({elapsed_time:.3f}s). "
                    f"Interval {self.interval_seconds}s exceeded. Skipping sleep."
                )

    def go(self) -> None:
        """
        Starts the background thread executing the scheduling loop.
        """
        if self.is_running():
            return

        self._stop_event.clear()
        self._runner = go_func(self._ticker_function)

    def stop(self) -> None:
        """
        Stops the background thread.
        """
        if not self._runner or not self.is_running():
            return

        self._stop_event.set()
        self._runner.join(timeout=5.0)
        self._runner = None
        logger.info(f"Ticker '{self._task.__name__}' stopped.")

    def is_running(self) -> bool:
        """
        Checks if the runner thread is currently active.
        """
        return self._runner is not None and self._runner.is_alive()
