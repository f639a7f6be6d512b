"""
SQL loading for the batcher.
Installs the SQL functions shipped in batcher/sql into the connected database.
"""

import os
import time
import threading
from typing import List, Optional
from psycopg import Connection, errors
from pathlib import Path

from .logging import get_logger

logger = get_logger(__name__)

# Global lock for DDL operations to prevent concurrent DDL deadlocks
_DDL_LOCK = threading.RLock()


def run_ddl(conn: Connection, sql_statement: str, max_retries: int = 3) -> None:
    """
    Executes DDL under a process lock, retrying on deadlocks or serialization errors.

    :param conn: The Psycopg 3 connection object.
    :param sql_statement: The DDL to execute (e.g., DROP FUNCTION, CREATE TABLE).
    """

    with _DDL_LOCK:
        for attempt in range(max_retries):
            try:
                conn.rollback()
                with conn.cursor() as cur:
                    cur.execute(sql_statement.encode("utf-8"))
                conn.commit()
                return
            except (errors.DeadlockDetected, errors.SerializationFailure) as e:
                if attempt < max_retries - 1:
                    logger.warning(f"ddl lock, attempt {attempt + 1}/{max_retries}")
                    time.sleep(0.5)
                else:
                    logger.error(f"ddl failed after {max_retries} retries: {e}")
                    raise
            except Exception as e:
                conn.rollback()
                raise e


class SQLLoader:
    """
    SQL file loader for the queue, batch and sequence functions.
    """

    QUEUE_FUNCTIONS: List[str] = [
        "init_batch_queue",
        "insert_queue_item",
        "select_oldest_queue_item",
        "delete_queue_item",
        "release_queue_item",
        "count_queue_items",
        "select_all_queue_items",
        "delete_queue",
        "delete_stale_queue_items",
    ]
    BATCH_FUNCTIONS: List[str] = [
        "init_batch",
        "insert_batch",
        "update_batch",
        "select_batch",
        "delete_batch",
        "delete_stale_batches",
    ]
    SEQUENCE_FUNCTIONS: List[str] = [
        "init_batch_sequence",
        "next_batch_id",
    ]

    def __init__(self, sql_base_path: Optional[str] = None):
        """
        Initialize with path to SQL files.

        :param sql_base_path: Base path to SQL files. If None, defaults to the package's sql directory.
        """
        if sql_base_path is None:
            current_dir = Path(__file__).parent.parent
            sql_base_path = str(current_dir / "sql")
        self.sql_base_path = sql_base_path

    def load_sql_file(self, file_path: str) -> str:
        """
        Load SQL content from file.

        :param file_path: Path to the SQL file.
        :returns: The content of the SQL file as a string.
        :raises ValueError: If the file does not exist.
        """
        try:
            with open(file_path, "r") as f:
                return f.read()
        except FileNotFoundError:
            raise ValueError(f"SQL file not found: {file_path}")

    def execute_sql_file(self, connection: Connection, file_path: str) -> None:
        """
        Execute SQL file content.

        :param connection: The Psycopg 3 connection object.
        :param file_path: Path to the SQL file.
        :raises ValueError: If the file does not exist.
        """
        sql_content: str = self.load_sql_file(file_path)
        run_ddl(connection, sql_content)

    def check_functions(self, connection: Connection, sql_functions: List[str]) -> bool:
        """
        Check if all SQL functions exist.

        :param connection: The Psycopg 3 connection object.
        :param sql_functions: List of SQL function names to check.
        :returns: True if all functions exist, False otherwise.
        """
        for func_name in sql_functions:
            with connection.cursor() as cur:
                cur.execute(
                    "SELECT EXISTS(SELECT 1 FROM pg_proc WHERE proname = %s);",
                    (func_name,),
                )
                one = cur.fetchone()
                if one is None or not one[0]:
                    return False
        return True

    def load_queue_sql(self, connection: Connection, force: bool = False) -> None:
        """
        Load queue-related SQL functions.

        :param connection: The Psycopg 3 connection object.
        :param force: If True, forces reloading even if functions exist.
        :raises RuntimeError: If not all required queue SQL functions were created.
        """
        self._load(connection, "queue.sql", self.QUEUE_FUNCTIONS, force)

    def load_batch_sql(self, connection: Connection, force: bool = False) -> None:
        """
        Load checkpoint-related SQL functions.

        :param connection: The Psycopg 3 connection object.
        :param force: If True, forces reloading even if functions exist.
        :raises RuntimeError: If not all required batch SQL functions were created.
        """
        self._load(connection, "batch.sql", self.BATCH_FUNCTIONS, force)

    def load_sequence_sql(self, connection: Connection, force: bool = False) -> None:
        """
        Load id sequence SQL functions.

        :param connection: The Psycopg 3 connection object.
        :param force: If True, forces reloading even if functions exist.
        :raises RuntimeError: If not all required sequence SQL functions were created.
        """
        self._load(connection, "sequence.sql", self.SEQUENCE_FUNCTIONS, force)

    def _load(
        self,
        connection: Connection,
        file_name: str,
        sql_functions: List[str],
        force: bool,
    ) -> None:
        if not force:
            if self.check_functions(connection, sql_functions):
                return

        self.execute_sql_file(connection, os.path.join(self.sql_base_path, file_name))

        if not self.check_functions(connection, sql_functions):
            raise RuntimeError(
                f"Not all required SQL functions of {file_name} were created"
            )
