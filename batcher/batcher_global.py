"""
Shared state of the Batcher mixins.
"""

import threading
from typing import Callable, Dict, Optional, Set, Tuple

from .core.clock import Clock, SystemClock
from .core.queue import BatchQueue, DurableQueue, MemoryQueue
from .core.ticker import Ticker
from .database.interfaces import BatchStore, QueueStore, SequenceStore
from .helper.database import Database
from .helper.error import BatcherError
from .helper.logging import get_logger
from .helper.token import get_token
from .model.batch import Batch, EngineState
from .model.batch_set import BatchSet, QueueKind
from .model.cleanup import CleanupSettings
from .model.task import Task

logger = get_logger(__name__)

# Seconds a progressive step may run before it suspends.
DEFAULT_TIME_BUDGET = 1.0


class BatcherGlobalMixin:
    def __init__(self):
        self.secret: str = ""
        self.clock: Clock = SystemClock()
        self.time_budget: float = DEFAULT_TIME_BUDGET

        # The active batch, None between engine invocations
        self.batch: Optional[Batch] = None
        self.state: EngineState = EngineState.IDLE

        # Storage
        self.database: Optional[Database] = None
        self.queue_store: QueueStore
        self.batch_store: BatchStore
        self.sequence_store: SequenceStore

        # Queue objects by (kind, name)
        self._queues: Dict[Tuple[QueueKind, str], BatchQueue] = {}

        # Task registry
        self.tasks: Dict[str, Task] = {}
        self.loaders: Dict[str, Callable[..., None]] = {}
        self.loaded_groups: Set[str] = set()
        self.task_mutex: threading.RLock = threading.RLock()

        # Cleanup
        self.cleanup_settings: CleanupSettings = CleanupSettings()
        self.cleanup_ticker: Optional[Ticker] = None

    def initialise(
        self,
        queue_store: QueueStore,
        batch_store: BatchStore,
        sequence_store: SequenceStore,
    ):
        self.queue_store = queue_store
        self.batch_store = batch_store
        self.sequence_store = sequence_store

    def next_id(self, existing_id: int = 0) -> int:
        """
        Issue a new batch id.

        :raises BatcherError: If the sequence store fails.
        """
        try:
            return self.sequence_store.next_id(existing_id)
        except Exception as e:
            raise BatcherError("issuing batch id", e)

    def token(self, batch_id: int) -> str:
        """Access token of a batch for this batcher's secret."""
        return get_token(batch_id, self.secret)

    def _queue(self, batch_set: BatchSet) -> Optional[BatchQueue]:
        """Return the queue of a batch set, None if it was not populated yet."""
        if batch_set.queue is None:
            return None

        key = (batch_set.queue.kind, batch_set.queue.name)
        queue = self._queues.get(key)
        if queue is None:
            if batch_set.queue.kind == QueueKind.MEMORY:
                queue = MemoryQueue(batch_set.queue.name)
            else:
                queue = DurableQueue(batch_set.queue.name, self.queue_store)
            self._queues[key] = queue

        return queue

    def _forget_queue(self, batch_set: BatchSet) -> None:
        if batch_set.queue is not None:
            self._queues.pop((batch_set.queue.kind, batch_set.queue.name), None)
