"""
Work queues holding the pending operations of a batch set.

Both variants share the claim/delete contract: claim returns the oldest
item without removing it, so an operation asking for another pass is
claimed again until it is deleted.
"""

import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from ..database.interfaces import QueueStore
from ..helper.error import BatcherError
from ..helper.logging import get_logger
from ..model.operation import Operation
from ..model.queue_item import QueueItem

logger = get_logger(__name__)


class BatchQueue(ABC):
    """
    Queue of operations for one batch set, identified by name.
    """

    def __init__(self, name: str):
        self.name: str = name

    @abstractmethod
    def create(self) -> None:
        """Prepare the storage of the queue. Calling it twice is harmless."""

    @abstractmethod
    def enqueue(self, operation: Operation) -> bool:
        """Append an operation at the tail of the queue."""

    @abstractmethod
    def claim(self) -> Optional[QueueItem]:
        """Return the oldest item without removing it, None if the queue is empty."""

    @abstractmethod
    def delete(self, item: QueueItem) -> None:
        """Remove an item. Deleting a missing item is not an error."""

    @abstractmethod
    def release(self, item: QueueItem) -> bool:
        """Reset the lease of an item."""

    @abstractmethod
    def count(self) -> int:
        """Best-effort number of items."""

    @abstractmethod
    def drain_all(self) -> List[Operation]:
        """Return every remaining operation in order without removing it."""

    @abstractmethod
    def destroy(self) -> None:
        """Remove every item of the queue."""


class MemoryQueue(BatchQueue):
    """
    Queue kept in an ordered in-process dictionary.
    Used by synchronous batches which never leave the current process.
    """

    def __init__(self, name: str):
        super().__init__(name)
        self._items: Dict[int, QueueItem] = {}
        self._id_sequence: int = 0
        self._lock = threading.Lock()

    def create(self) -> None:
        pass

    def enqueue(self, operation: Operation) -> bool:
        with self._lock:
            self._id_sequence += 1
            item = QueueItem(
                id=self._id_sequence,
                name=self.name,
                data=operation,
                created_at=datetime.now(),
            )
            self._items[item.id] = item
        return True

    def claim(self) -> Optional[QueueItem]:
        with self._lock:
            for item in self._items.values():
                return item
        return None

    def delete(self, item: QueueItem) -> None:
        with self._lock:
            self._items.pop(item.id, None)

    def release(self, item: QueueItem) -> bool:
        with self._lock:
            stored = self._items.get(item.id)
            if stored is not None and stored.expire != 0:
                stored.expire = 0
                return True
        return False

    def count(self) -> int:
        return len(self._items)

    def drain_all(self) -> List[Operation]:
        with self._lock:
            return [item.data for item in self._items.values()]

    def destroy(self) -> None:
        with self._lock:
            self._items.clear()
            self._id_sequence = 0


class DurableQueue(BatchQueue):
    """
    Queue persisted through a QueueStore so it survives across requests.
    All queues share the store, items are told apart by queue name.
    """

    def __init__(self, name: str, store: QueueStore):
        super().__init__(name)
        self.store = store

    def create(self) -> None:
        # Shared storage is prepared when the store is created.
        pass

    def enqueue(self, operation: Operation) -> bool:
        try:
            self.store.insert_item(self.name, operation)
            return True
        except Exception as e:
            raise BatcherError(f"enqueue into {self.name}", e)

    def claim(self) -> Optional[QueueItem]:
        try:
            return self.store.select_oldest_item(self.name)
        except Exception as e:
            raise BatcherError(f"claim from {self.name}", e)

    def delete(self, item: QueueItem) -> None:
        try:
            self.store.delete_item(item.id)
        except Exception as e:
            raise BatcherError(f"delete item {item.id}", e)

    def release(self, item: QueueItem) -> bool:
        try:
            return self.store.release_item(item.id)
        except Exception as e:
            raise BatcherError(f"release item {item.id}", e)

    def count(self) -> int:
        try:
            return self.store.count_items(self.name)
        except Exception as e:
            raise BatcherError(f"count items of {self.name}", e)

    def drain_all(self) -> List[Operation]:
        try:
            return [item.data for item in self.store.select_all_items(self.name)]
        except Exception as e:
            raise BatcherError(f"select items of {self.name}", e)

    def destroy(self) -> None:
        try:
            deleted = self.store.delete_queue(self.name)
            logger.debug("Queue destroyed", queue=self.name, deleted=deleted)
        except Exception as e:
            raise BatcherError(f"delete queue {self.name}", e)
