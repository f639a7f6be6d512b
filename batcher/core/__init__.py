"""
Core components of the batcher: queues, progress reporting and background runners.
"""

from .clock import Clock, SystemClock, Timer
from .progress import format_interval, format_progress_message, percentage
from .queue import BatchQueue, DurableQueue, MemoryQueue
from .runner import SmallRunner, go_func
from .ticker import Ticker

__all__ = [
    "Clock",
    "SystemClock",
    "Timer",
    "format_interval",
    "format_progress_message",
    "percentage",
    "BatchQueue",
    "DurableQueue",
    "MemoryQueue",
    "SmallRunner",
    "go_func",
    "Ticker",
]
