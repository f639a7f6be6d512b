"""
Test for Queue Database Handler using testcontainers.
"""

import unittest
from datetime import timedelta

from .db_queue import QueueDBHandler
from ..helper.error import BatcherError
from ..helper.test_database import DatabaseTestMixin
from ..model.operation import Operation


class TestQueueDBHandler(DatabaseTestMixin, unittest.TestCase):
    """Test QueueDBHandler against PostgreSQL."""

    @classmethod
    def setUpClass(cls):
        super().setup_class()

    @classmethod
    def tearDownClass(cls):
        super().teardown_class()

    def setUp(self):
        super().setup_method()
        self.handler = QueueDBHandler(self.db, with_table_drop=True)

    def tearDown(self):
        super().teardown_method()

    def test_new_queue_db_handler(self):
        """Test the handler creates its table."""
        self.assertIsNotNone(self.handler.db.instance)
        self.assertTrue(self.handler.check_table_existance())

    def test_new_queue_db_handler_with_nil_database(self):
        """Test creating a handler without database."""
        with self.assertRaises(AttributeError):
            QueueDBHandler(None, with_table_drop=True)  # type: ignore

    def test_insert_item(self):
        """Test inserting an item returns it with its id."""
        item = self.handler.insert_item("batcher:1:1", Operation("collect", (1, "a")))

        self.assertGreater(item.id, 0)
        self.assertEqual(item.name, "batcher:1:1")
        self.assertEqual(item.data, Operation("collect", (1, "a")))
        self.assertEqual(item.expire, 0)

    def test_select_oldest_item(self):
        """Test the oldest item is returned and stays in the queue."""
        first = self.handler.insert_item("batcher:1:1", Operation("collect", (1,)))
        self.handler.insert_item("batcher:1:1", Operation("collect", (2,)))

        oldest = self.handler.select_oldest_item("batcher:1:1")
        again = self.handler.select_oldest_item("batcher:1:1")

        self.assertEqual(oldest.id, first.id)
        self.assertEqual(again.id, first.id)
        self.assertEqual(self.handler.count_items("batcher:1:1"), 2)

    def test_select_oldest_item_empty(self):
        """Test selecting from an empty queue."""
        self.assertIsNone(self.handler.select_oldest_item("batcher:1:1"))

    def test_delete_item(self):
        """Test deleting an item, twice."""
        item = self.handler.insert_item("batcher:1:1", Operation("collect", (1,)))

        self.handler.delete_item(item.id)
        self.handler.delete_item(item.id)

        self.assertEqual(self.handler.count_items("batcher:1:1"), 0)

    def test_release_item(self):
        """Test releasing an item without lease."""
        item = self.handler.insert_item("batcher:1:1", Operation("collect", (1,)))
        self.assertFalse(self.handler.release_item(item.id))
        self.assertFalse(self.handler.release_item(item.id + 100))

    def test_select_all_items(self):
        """Test all items of one queue are returned in order."""
        for index in range(3):
            self.handler.insert_item("batcher:1:1", Operation("collect", (index,)))
        self.handler.insert_item("batcher:1:2", Operation("collect", (9,)))

        items = self.handler.select_all_items("batcher:1:1")

        self.assertEqual([item.data.arguments for item in items], [(0,), (1,), (2,)])

    def test_delete_queue(self):
        """Test deleting a queue keeps the other queues."""
        self.handler.insert_item("batcher:1:1", Operation("collect", (1,)))
        self.handler.insert_item("batcher:1:1", Operation("collect", (2,)))
        self.handler.insert_item("batcher:1:2", Operation("collect", (3,)))

        self.assertEqual(self.handler.delete_queue("batcher:1:1"), 2)
        self.assertEqual(self.handler.count_items("batcher:1:1"), 0)
        self.assertEqual(self.handler.count_items("batcher:1:2"), 1)

    def test_delete_stale_items(self):
        """Test only items older than the retention are deleted."""
        self.handler.insert_item("batcher:1:1", Operation("collect", (1,)))

        self.assertEqual(self.handler.delete_stale_items(timedelta(days=1)), 0)
        self.assertEqual(self.handler.delete_stale_items(timedelta(seconds=-60)), 1)
        self.assertEqual(self.handler.count_items("batcher:1:1"), 0)

    def test_insert_item_not_serializable(self):
        """Test operations must carry JSON arguments."""
        with self.assertRaises(BatcherError) as context:
            self.handler.insert_item("batcher:1:1", Operation("collect", (object(),)))
        self.assertIsInstance(context.exception.original, TypeError)


if __name__ == "__main__":
    unittest.main()
