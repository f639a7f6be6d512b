"""
Main Batcher class.
"""

import os
from typing import Optional

from .batcher_cleanup import BatcherCleanupMixin
from .batcher_global import DEFAULT_TIME_BUDGET
from .batcher_page import BatcherPageMixin
from .core.clock import Clock
from .database.db_batch import BatchDBHandler
from .database.db_queue import QueueDBHandler
from .database.db_sequence import SequenceDBHandler
from .database.interfaces import BatchStore, QueueStore, SequenceStore
from .database.memory import MemoryBatchStore, MemoryQueueStore, MemorySequenceStore
from .helper.database import Database, DatabaseConfiguration, new_database
from .helper.logging import get_logger

logger = get_logger(__name__)


def new_batcher(
    secret: str = "",
    clock: Optional[Clock] = None,
    time_budget: float = DEFAULT_TIME_BUDGET,
) -> "Batcher":
    """
    Create a new Batcher keeping batches and queues in memory.
    If the secret is empty, it is taken from environment variable BATCHER_SECRET.
    """
    return Batcher(
        secret,
        MemoryQueueStore(),
        MemoryBatchStore(),
        MemorySequenceStore(),
        clock=clock,
        time_budget=time_budget,
    )


def new_batcher_with_db(
    secret: str = "",
    db_config: Optional[DatabaseConfiguration] = None,
    clock: Optional[Clock] = None,
    time_budget: float = DEFAULT_TIME_BUDGET,
) -> "Batcher":
    """
    Create a new Batcher storing batches and queues in PostgreSQL.
    If db_config is None, uses environment variables for the database connection.
    If the secret is empty, it is taken from environment variable BATCHER_SECRET.

    It takes the db configuration from environment variables if db_config is None.
    - BATCHER_DB_HOST
    - BATCHER_DB_PORT
    - BATCHER_DB_DATABASE
    - BATCHER_DB_USERNAME
    - BATCHER_DB_PASSWORD
    - BATCHER_DB_SCHEMA
    - BATCHER_DB_SSLMODE (optional, defaults to "require")
    - BATCHER_DB_WITH_TABLE_DROP (optional, defaults to "false")
    """
    if db_config is None:
        db_config = DatabaseConfiguration.from_env()

    database: Database = new_database("batcher", db_config, logger)

    batcher = Batcher(
        secret,
        QueueDBHandler(database, db_config.with_table_drop),
        BatchDBHandler(database, db_config.with_table_drop),
        SequenceDBHandler(database, db_config.with_table_drop),
        clock=clock,
        time_budget=time_budget,
    )
    batcher.database = database
    return batcher


class Batcher(
    BatcherPageMixin,
    BatcherCleanupMixin,
):
    """
    Main batch processing class.
    A Batcher holds at most one active batch, several batchers can run
    side by side in one process.
    """

    def __init__(
        self,
        secret: str,
        queue_store: QueueStore,
        batch_store: BatchStore,
        sequence_store: SequenceStore,
        clock: Optional[Clock] = None,
        time_budget: float = DEFAULT_TIME_BUDGET,
    ):
        """
        __init__ is the inner initialization method that's being used for
        new_batcher and new_batcher_with_db.

        :param secret: Secret the access tokens of batches are bound to.
        :param queue_store: Store of the durable queues.
        :param batch_store: Store of the checkpoints.
        :param sequence_store: Issuer of batch ids.
        :param clock: Clock for the time budget, defaults to the system clock.
        :param time_budget: Seconds one progressive step may run.
        """
        super().__init__()

        if time_budget <= 0:
            raise ValueError("time_budget must be positive")

        self.secret = secret or os.getenv("BATCHER_SECRET", "")
        if not self.secret:
            logger.warning("No batcher secret set, batch tokens are guessable")

        if clock is not None:
            self.clock = clock
        self.time_budget = time_budget

        super().initialise(queue_store, batch_store, sequence_store)

        logger.debug("Batcher created", time_budget=time_budget)

    def close(self) -> None:
        """Stop the cleanup ticker and close the database connection."""
        self.stop_cleanup_ticker()

        if self.database is not None:
            self.database.close()
            self.database = None
