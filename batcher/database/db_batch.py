"""
Batch database handler for the batcher.
Stores the checkpoints of progressive batches in the batch table.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from psycopg.rows import dict_row

from ..helper.database import Database
from ..helper.error import BatcherError
from ..helper.sql import SQLLoader, run_ddl


class BatchDBHandler:
    """
    Batch checkpoint database handler.
    Checkpoints are only readable with the token they were stored with.
    """

    def __init__(self, db_connection: Database, with_table_drop: bool = False):
        self.db: Database = db_connection

        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        sql_loader: SQLLoader = SQLLoader()
        sql_loader.load_batch_sql(self.db.instance, force=with_table_drop)

        if with_table_drop:
            self.drop_table()

        self.create_table()

    def check_table_existance(self) -> bool:
        """Check if the batch table exists."""
        return self.db.check_table_existence("batch")

    def create_table(self) -> None:
        """Create batch table using SQL init function."""
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        run_ddl(self.db.instance, "SELECT init_batch();")

    def drop_table(self) -> None:
        """Drop batch table with DDL deadlock protection."""
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        run_ddl(self.db.instance, "DROP TABLE IF EXISTS batch CASCADE;")

    def insert_batch(self, batch_id: int, token: str, data: Dict[str, Any]) -> None:
        """
        Insert the first checkpoint of a batch.
        """
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        try:
            with self.db.instance.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    "SELECT * FROM insert_batch(%s, %s, %s);",
                    (batch_id, token, json.dumps(data)),
                )
                row = cur.fetchone()
            self.db.instance.commit()
        except Exception as e:
            self.db.instance.rollback()
            raise BatcherError(f"inserting batch {batch_id}", e)

        if row is None:
            raise BatcherError(
                f"inserting batch {batch_id}", RuntimeError("no row returned")
            )

    def select_batch(self, batch_id: int, token: str) -> Optional[Dict[str, Any]]:
        """
        Select the checkpoint of a batch by id and token.
        """
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        with self.db.instance.cursor(row_factory=dict_row) as cur:
            cur.execute("SELECT * FROM select_batch(%s, %s);", (batch_id, token))
            row = cur.fetchone()
        self.db.instance.commit()

        if row is None:
            return None

        data = row.get("output_data")
        if isinstance(data, str):
            data = json.loads(data)
        return data

    def update_batch(self, batch_id: int, data: Dict[str, Any]) -> None:
        """
        Replace the checkpoint of a batch.
        """
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        try:
            with self.db.instance.cursor() as cur:
                cur.execute(
                    "SELECT update_batch(%s, %s);", (batch_id, json.dumps(data))
                )
                result = cur.fetchone()
            self.db.instance.commit()
        except Exception as e:
            self.db.instance.rollback()
            raise BatcherError(f"updating batch {batch_id}", e)

        if not result or not result[0]:
            raise BatcherError(
                f"updating batch {batch_id}", LookupError("batch not found")
            )

    def delete_batch(self, batch_id: int) -> None:
        """
        Delete the checkpoint of a batch.
        """
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        try:
            with self.db.instance.cursor() as cur:
                cur.execute("SELECT delete_batch(%s);", (batch_id,))
            self.db.instance.commit()
        except Exception as e:
            self.db.instance.rollback()
            raise BatcherError(f"deleting batch {batch_id}", e)

    def delete_stale_batches(self, older_than: timedelta) -> int:
        """
        Delete checkpoints of batches created before the cutoff.
        """
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        cutoff_time = datetime.now(timezone.utc).replace(tzinfo=None) - older_than

        try:
            with self.db.instance.cursor() as cur:
                cur.execute("SELECT delete_stale_batches(%s);", (cutoff_time,))
                result = cur.fetchone()
            self.db.instance.commit()
        except Exception as e:
            self.db.instance.rollback()
            raise BatcherError("deleting stale batches", e)

        return result[0] if result else 0
