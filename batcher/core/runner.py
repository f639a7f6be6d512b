"""
Thread runner - Go-like background execution with a result slot.
"""

import asyncio
import inspect
import queue
import threading
from typing import Any, Callable, Optional

from ..helper.logging import get_logger

logger = get_logger(__name__)


class SmallRunner(threading.Thread):
    """
    A lightweight, thread-based runner for background work that shares
    state with the batcher (like the cleanup sweep).

    :param task: The synchronous or asynchronous function to execute.
    :param args: Arguments to pass to the task function.
    """

    def __init__(
        self,
        task: Callable[..., Any],
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(name=task.__name__, daemon=True)
        self.task = task
        self.args = args
        self.kwargs = kwargs
        self.is_async = inspect.iscoroutinefunction(task)
        self._result_queue: queue.Queue[Any] = queue.Queue(maxsize=1)

    def go(self) -> None:
        """Starts the SmallRunner thread in the background."""
        self.start()

    def run(self) -> None:
        """
        The main execution method for the thread.
        Coroutines get their own event loop.
        """
        try:
            if self.is_async:
                result = asyncio.run(self.task(*self.args, **self.kwargs))
            else:
                result = self.task(*self.args, **self.kwargs)

            self._result_queue.put(result)
        except Exception as e:
            logger.error(f"SmallRunner {self.name} task failed", error=e)
            self._result_queue.put(e)

    def get_results(self, timeout: Optional[float] = None) -> Any:
        """
        Waits for the thread to complete and returns the result.

        :param timeout: Time in seconds to wait for the result. If None, waits indefinitely.
        :returns: The result returned by the executed task function.
        :raises TimeoutError: If the result is not available within the specified timeout.
        :raises Exception: If the task execution in the thread failed.
        """
        self.join(timeout=timeout)

        if self.is_alive():
            raise TimeoutError(f"small runner timed out after {timeout} seconds")

        try:
            result = self._result_queue.get(block=False)
        except queue.Empty:
            return None

        if isinstance(result, Exception):
            raise result

        return result


def go_func(func: Callable[..., Any], *args: Any, **kwargs: Any) -> SmallRunner:
    """
    Go-like async function execution.

    :param func: The function to execute.
    :param args: Positional arguments for the function.
    :param kwargs: Keyword arguments for the function.
    :returns: A running SmallRunner instance.
    """
    runner = SmallRunner(func, *args, **kwargs)
    runner.go()
    return runner
