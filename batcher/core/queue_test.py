"""
Test cases for the work queues.
"""

import unittest

from .queue import BatchQueue, DurableQueue, MemoryQueue
from ..database.memory import MemoryQueueStore
from ..model.operation import Operation


class QueueContractMixin:
    """Tests every queue implementation has to pass."""

    def new_queue(self, name: str) -> BatchQueue:
        raise NotImplementedError

    def setUp(self):
        """Set up an empty queue."""
        self.queue = self.new_queue("batcher:1:1")
        self.queue.create()

    def test_claim_empty(self):
        """Test claiming from an empty queue."""
        self.assertIsNone(self.queue.claim())
        self.assertEqual(self.queue.count(), 0)

    def test_fifo(self):
        """Test claim always returns the oldest remaining item."""
        for index in range(3):
            self.assertTrue(self.queue.enqueue(Operation("op", (index,))))

        seen = []
        while True:
            item = self.queue.claim()
            if item is None:
                break
            seen.append(item.data.arguments[0])
            self.queue.delete(item)

        self.assertEqual(seen, [0, 1, 2])

    def test_ids_increase(self):
        """Test item ids increase in insertion order."""
        self.queue.enqueue(Operation("op", (1,)))
        first = self.queue.claim()
        self.queue.delete(first)
        self.queue.enqueue(Operation("op", (2,)))
        second = self.queue.claim()

        self.assertGreater(second.id, first.id)

    def test_repeatable_claim(self):
        """Test claiming twice without delete returns the same item."""
        self.queue.enqueue(Operation("op", ("a",)))
        self.queue.enqueue(Operation("op", ("b",)))

        first = self.queue.claim()
        second = self.queue.claim()

        self.assertEqual(first.id, second.id)
        self.assertEqual(first.data, second.data)
        self.assertEqual(self.queue.count(), 2)

    def test_delete_is_idempotent(self):
        """Test deleting an item twice is not an error."""
        self.queue.enqueue(Operation("op", ()))
        item = self.queue.claim()

        self.queue.delete(item)
        self.queue.delete(item)

        self.assertEqual(self.queue.count(), 0)

    def test_release_without_lease(self):
        """Test releasing an item without lease changes nothing."""
        self.queue.enqueue(Operation("op", ()))
        item = self.queue.claim()

        self.assertFalse(self.queue.release(item))
        self.assertEqual(self.queue.claim().id, item.id)

    def test_drain_all_keeps_items(self):
        """Test drain_all returns all operations in order without removing them."""
        operations = [Operation("op", (index,)) for index in range(3)]
        for operation in operations:
            self.queue.enqueue(operation)

        self.assertEqual(self.queue.drain_all(), operations)
        self.assertEqual(self.queue.count(), 3)

    def test_destroy(self):
        """Test destroy removes all items."""
        self.queue.enqueue(Operation("op", ()))
        self.queue.enqueue(Operation("op", ()))

        self.queue.destroy()

        self.assertEqual(self.queue.count(), 0)
        self.assertIsNone(self.queue.claim())

    def test_create_twice(self):
        """Test create is idempotent."""
        self.queue.enqueue(Operation("op", ()))
        self.queue.create()
        self.assertEqual(self.queue.count(), 1)


class TestMemoryQueue(QueueContractMixin, unittest.TestCase):
    """Test the in-process queue."""

    def new_queue(self, name: str) -> BatchQueue:
        return MemoryQueue(name)

    def test_destroy_resets_ids(self):
        """Test ids start over after destroy."""
        self.queue.enqueue(Operation("op", ()))
        self.queue.destroy()
        self.queue.enqueue(Operation("op", ()))

        self.assertEqual(self.queue.claim().id, 1)

    def test_release_with_lease(self):
        """Test releasing an item with a lease resets it."""
        self.queue.enqueue(Operation("op", ()))
        item = self.queue.claim()
        item.expire = 100

        self.assertTrue(self.queue.release(item))
        self.assertEqual(self.queue.claim().expire, 0)


class TestDurableQueue(QueueContractMixin, unittest.TestCase):
    """Test the store backed queue."""

    def new_queue(self, name: str) -> BatchQueue:
        self.store = MemoryQueueStore()
        return DurableQueue(name, self.store)

    def test_queues_are_separated_by_name(self):
        """Test queues sharing a store only see their own items."""
        other = DurableQueue("batcher:1:2", self.store)
        self.queue.enqueue(Operation("op", ("mine",)))
        other.enqueue(Operation("op", ("other",)))

        self.assertEqual(self.queue.claim().data.arguments, ("mine",))
        self.assertEqual(other.claim().data.arguments, ("other",))

        other.destroy()
        self.assertEqual(self.queue.count(), 1)
        self.assertEqual(other.count(), 0)


if __name__ == "__main__":
    unittest.main()
