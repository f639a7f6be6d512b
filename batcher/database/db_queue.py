"""
Queue database handler for the batcher.
Stores the items of all durable queues in the batch_queue table through the
SQL functions in sql/queue.sql.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from psycopg.rows import dict_row

from ..helper.database import Database
from ..helper.error import BatcherError
from ..helper.sql import SQLLoader, run_ddl
from ..model.operation import Operation
from ..model.queue_item import QueueItem


class QueueDBHandler:
    """
    Queue database handler.
    """

    def __init__(self, db_connection: Database, with_table_drop: bool = False):
        """
        Initialize queue database handler.
        Loads the SQL functions and creates the table if needed.
        """
        self.db: Database = db_connection

        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        sql_loader: SQLLoader = SQLLoader()
        sql_loader.load_queue_sql(self.db.instance, force=with_table_drop)

        if with_table_drop:
            self.drop_table()

        self.create_table()

    def check_table_existance(self) -> bool:
        """Check if the batch_queue table exists."""
        return self.db.check_table_existence("batch_queue")

    def create_table(self) -> None:
        """Create batch_queue table using SQL init function."""
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        run_ddl(self.db.instance, "SELECT init_batch_queue();")

    def drop_table(self) -> None:
        """Drop batch_queue table with DDL deadlock protection."""
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        run_ddl(self.db.instance, "DROP TABLE IF EXISTS batch_queue CASCADE;")

    def insert_item(self, name: str, operation: Operation) -> QueueItem:
        """
        Insert an item at the tail of a queue.
        """
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        try:
            with self.db.instance.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    "SELECT * FROM insert_queue_item(%s, %s);",
                    (name, json.dumps(operation.to_dict())),
                )
                row = cur.fetchone()
            self.db.instance.commit()
        except Exception as e:
            self.db.instance.rollback()
            raise BatcherError(f"inserting item into queue {name}", e)

        if row is None:
            raise BatcherError(
                "inserting queue item", RuntimeError("no row returned")
            )
        return QueueItem.from_row(row)

    def select_oldest_item(self, name: str) -> Optional[QueueItem]:
        """
        Select the item with the lowest id of a queue without removing it.
        """
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        with self.db.instance.cursor(row_factory=dict_row) as cur:
            cur.execute("SELECT * FROM select_oldest_queue_item(%s);", (name,))
            row = cur.fetchone()
        self.db.instance.commit()

        return QueueItem.from_row(row) if row else None

    def delete_item(self, item_id: int) -> None:
        """
        Delete an item by id.
        """
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        try:
            with self.db.instance.cursor() as cur:
                cur.execute("SELECT delete_queue_item(%s);", (item_id,))
            self.db.instance.commit()
        except Exception as e:
            self.db.instance.rollback()
            raise BatcherError(f"deleting queue item {item_id}", e)

    def release_item(self, item_id: int) -> bool:
        """
        Reset the lease of an item.
        """
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        with self.db.instance.cursor() as cur:
            cur.execute("SELECT release_queue_item(%s);", (item_id,))
            result = cur.fetchone()
        self.db.instance.commit()

        return bool(result[0]) if result else False

    def count_items(self, name: str) -> int:
        """
        Count the items of a queue.
        """
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        with self.db.instance.cursor() as cur:
            cur.execute("SELECT count_queue_items(%s);", (name,))
            result = cur.fetchone()
        self.db.instance.commit()

        return int(result[0]) if result else 0

    def select_all_items(self, name: str) -> List[QueueItem]:
        """
        Select all items of a queue in insertion order.
        """
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        with self.db.instance.cursor(row_factory=dict_row) as cur:
            cur.execute("SELECT * FROM select_all_queue_items(%s);", (name,))
            rows = cur.fetchall()
        self.db.instance.commit()

        return [QueueItem.from_row(row) for row in rows]

    def delete_queue(self, name: str) -> int:
        """
        Delete all items of a queue.
        """
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        try:
            with self.db.instance.cursor() as cur:
                cur.execute("SELECT delete_queue(%s);", (name,))
                result = cur.fetchone()
            self.db.instance.commit()
        except Exception as e:
            self.db.instance.rollback()
            raise BatcherError(f"deleting queue {name}", e)

        return result[0] if result else 0

    def delete_stale_items(self, older_than: timedelta) -> int:
        """
        Delete items of abandoned batches created before the cutoff.
        """
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        cutoff_time = datetime.now(timezone.utc).replace(tzinfo=None) - older_than

        try:
            with self.db.instance.cursor() as cur:
                cur.execute("SELECT delete_stale_queue_items(%s);", (cutoff_time,))
                result = cur.fetchone()
            self.db.instance.commit()
        except Exception as e:
            self.db.instance.rollback()
            raise BatcherError("deleting stale queue items", e)

        return result[0] if result else 0
