"""
In-memory stores for the batcher.

They implement the same interfaces as the PostgreSQL handlers and keep
everything in the current process. Checkpoints are stored as JSON text so
they behave like the database rows.
"""

import json
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from ..model.operation import Operation
from ..model.queue_item import QueueItem


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class MemoryQueueStore:
    """
    Queue items of all queues in one ordered dictionary.
    """

    def __init__(self):
        self._items: Dict[int, QueueItem] = {}
        self._last_id: int = 0
        self._lock = threading.Lock()

    def insert_item(self, name: str, operation: Operation) -> QueueItem:
        with self._lock:
            self._last_id += 1
            item = QueueItem(
                id=self._last_id,
                name=name,
                data=Operation.from_dict(json.loads(json.dumps(operation.to_dict()))),
                created_at=_utcnow(),
            )
            self._items[item.id] = item
            return item

    def select_oldest_item(self, name: str) -> Optional[QueueItem]:
        with self._lock:
            for item in self._items.values():
                if item.name == name:
                    return item
        return None

    def delete_item(self, item_id: int) -> None:
        with self._lock:
            self._items.pop(item_id, None)

    def release_item(self, item_id: int) -> bool:
        with self._lock:
            item = self._items.get(item_id)
            if item is not None and item.expire != 0:
                item.expire = 0
                return True
        return False

    def count_items(self, name: str) -> int:
        with self._lock:
            return sum(1 for item in self._items.values() if item.name == name)

    def select_all_items(self, name: str) -> List[QueueItem]:
        with self._lock:
            return [item for item in self._items.values() if item.name == name]

    def delete_queue(self, name: str) -> int:
        with self._lock:
            ids = [item.id for item in self._items.values() if item.name == name]
            for item_id in ids:
                del self._items[item_id]
            return len(ids)

    def delete_stale_items(self, older_than: timedelta) -> int:
        cutoff_time = _utcnow() - older_than
        with self._lock:
            ids = [
                item.id for item in self._items.values() if item.created_at < cutoff_time
            ]
            for item_id in ids:
                del self._items[item_id]
            return len(ids)


@dataclass
class BatchRow:
    """Stored checkpoint of one batch."""

    id: int
    token: str
    data: str
    created_at: datetime = field(default_factory=_utcnow)


class MemoryBatchStore:
    """
    Checkpoints kept in a dictionary keyed by batch id.
    """

    def __init__(self):
        self.rows: Dict[int, BatchRow] = {}
        self._lock = threading.Lock()

    def insert_batch(self, batch_id: int, token: str, data: Dict[str, Any]) -> None:
        with self._lock:
            if batch_id in self.rows:
                raise ValueError(f"batch {batch_id} already exists")
            self.rows[batch_id] = BatchRow(batch_id, token, json.dumps(data))

    def select_batch(self, batch_id: int, token: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            row = self.rows.get(batch_id)
            if row is None or row.token != token:
                return None
            return json.loads(row.data)

    def update_batch(self, batch_id: int, data: Dict[str, Any]) -> None:
        with self._lock:
            row = self.rows.get(batch_id)
            if row is None:
                raise LookupError(f"batch {batch_id} not found")
            row.data = json.dumps(data)

    def delete_batch(self, batch_id: int) -> None:
        with self._lock:
            self.rows.pop(batch_id, None)

    def delete_stale_batches(self, older_than: timedelta) -> int:
        cutoff_time = _utcnow() - older_than
        with self._lock:
            ids = [row.id for row in self.rows.values() if row.created_at < cutoff_time]
            for batch_id in ids:
                del self.rows[batch_id]
            return len(ids)


class MemorySequenceStore:
    """
    Batch id counter of the current process.
    """

    def __init__(self):
        self._value: int = 0
        self._lock = threading.Lock()

    def next_id(self, existing_id: int = 0) -> int:
        with self._lock:
            self._value = max(self._value, existing_id) + 1
            return self._value
