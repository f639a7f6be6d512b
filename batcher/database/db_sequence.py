"""
Sequence database handler for the batcher.
Issues batch ids from the batch_id_seq sequence.
"""

from ..helper.database import Database
from ..helper.error import BatcherError
from ..helper.sql import SQLLoader, run_ddl


class SequenceDBHandler:
    """
    Batch id sequence handler.
    Ids are never reused, even when an existing id is passed in that is
    ahead of the sequence.
    """

    def __init__(self, db_connection: Database, with_table_drop: bool = False):
        self.db: Database = db_connection

        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        sql_loader: SQLLoader = SQLLoader()
        sql_loader.load_sequence_sql(self.db.instance, force=with_table_drop)

        if with_table_drop:
            self.drop_sequence()

        self.create_sequence()

    def create_sequence(self) -> None:
        """Create the id sequence using SQL init function."""
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        run_ddl(self.db.instance, "SELECT init_batch_sequence();")

    def drop_sequence(self) -> None:
        """Drop the id sequence."""
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        run_ddl(self.db.instance, "DROP SEQUENCE IF EXISTS batch_id_seq;")

    def next_id(self, existing_id: int = 0) -> int:
        """
        Get the next batch id.

        :param existing_id: Largest id known to exist, the result is larger.
        :returns: A new unique batch id.
        """
        if self.db.instance is None:
            raise ValueError("Database connection is not established")

        try:
            with self.db.instance.cursor() as cur:
                cur.execute("SELECT next_batch_id(%s);", (existing_id,))
                result = cur.fetchone()
            self.db.instance.commit()
        except Exception as e:
            self.db.instance.rollback()
            raise BatcherError("getting next batch id", e)

        if not result:
            raise BatcherError("getting next batch id", RuntimeError("no id returned"))
        return int(result[0])
