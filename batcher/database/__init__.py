"""
Storage for the batcher: PostgreSQL handlers and in-memory stores.
"""

from .interfaces import BatchStore, QueueStore, SequenceStore
from .db_queue import QueueDBHandler
from .db_batch import BatchDBHandler
from .db_sequence import SequenceDBHandler
from .memory import MemoryBatchStore, MemoryQueueStore, MemorySequenceStore

__all__ = [
    "BatchStore",
    "QueueStore",
    "SequenceStore",
    "QueueDBHandler",
    "BatchDBHandler",
    "SequenceDBHandler",
    "MemoryBatchStore",
    "MemoryQueueStore",
    "MemorySequenceStore",
]
