"""
Typed interfaces for the storage used by the batcher.

The PostgreSQL handlers and the in-memory stores both implement these,
so the batcher works the same against either.
"""

from datetime import timedelta
from typing import Any, Dict, List, Optional, Protocol

from ..model.operation import Operation
from ..model.queue_item import QueueItem


class QueueStore(Protocol):
    """Row store of queue items shared by all durable queues."""

    def insert_item(self, name: str, operation: Operation) -> QueueItem:
        """Append an item to the queue with the given name.

        Item ids increase strictly in insertion order.
        """

    def select_oldest_item(self, name: str) -> Optional[QueueItem]:
        """Return the item with the lowest id of a queue, None if it is empty."""

    def delete_item(self, item_id: int) -> None:
        """Delete an item by id. Missing items are ignored."""

    def release_item(self, item_id: int) -> bool:
        """Reset the lease of an item, True if a lease was reset."""

    def count_items(self, name: str) -> int:
        """Return the number of items of a queue."""

    def select_all_items(self, name: str) -> List[QueueItem]:
        """Return all items of a queue ordered by id."""

    def delete_queue(self, name: str) -> int:
        """Delete all items of a queue and return how many were deleted."""

    def delete_stale_items(self, older_than: timedelta) -> int:
        """Delete items created longer ago than older_than."""


class BatchStore(Protocol):
    """Checkpoint store of running progressive batches."""

    def insert_batch(self, batch_id: int, token: str, data: Dict[str, Any]) -> None:
        """Store the checkpoint of a new batch."""

    def select_batch(self, batch_id: int, token: str) -> Optional[Dict[str, Any]]:
        """Return the checkpoint of a batch.

        A wrong token returns None exactly like a missing batch.
        """

    def update_batch(self, batch_id: int, data: Dict[str, Any]) -> None:
        """Replace the checkpoint of a batch."""

    def delete_batch(self, batch_id: int) -> None:
        """Delete the checkpoint of a batch."""

    def delete_stale_batches(self, older_than: timedelta) -> int:
        """Delete checkpoints created longer ago than older_than."""


class SequenceStore(Protocol):
    """Issuer of unique batch ids."""

    def next_id(self, existing_id: int = 0) -> int:
        """Return an id larger than any id issued before and than existing_id."""
