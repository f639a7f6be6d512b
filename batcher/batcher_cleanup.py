"""
Cleanup of abandoned batches.
Progressive batches nobody polls anymore leave their checkpoint and queue
rows behind, these are purged once they are older than the retention.
"""

from datetime import timedelta
from typing import Optional, Tuple

from .batcher_global import BatcherGlobalMixin
from .core.ticker import Ticker
from .helper.error import BatcherError
from .helper.logging import get_logger
from .model.cleanup import CleanupSettings

logger = get_logger(__name__)


class BatcherCleanupMixin(BatcherGlobalMixin):
    """
    Mixin class removing stale batches.
    """

    def cleanup_stale(self, retention: Optional[timedelta] = None) -> Tuple[int, int]:
        """
        Delete checkpoints and queue items older than the retention.

        :param retention: Age after which rows are deleted, defaults to the cleanup settings.
        :returns: Number of deleted batches and queue items.
        :raises BatcherError: If deleting fails.
        """
        if retention is None:
            retention = self.cleanup_settings.retention

        try:
            batches = self.batch_store.delete_stale_batches(retention)
        except Exception as e:
            raise BatcherError("deleting stale batches", e)

        try:
            items = self.queue_store.delete_stale_items(retention)
        except Exception as e:
            raise BatcherError("deleting stale queue items", e)

        if batches > 0 or items > 0:
            logger.info("Deleted stale batches", batches=batches, queue_items=items)

        return batches, items

    def start_cleanup_ticker(self, settings: Optional[CleanupSettings] = None) -> None:
        """
        Run cleanup_stale periodically in the background.

        :param settings: Retention and interval, defaults to the current settings.
        :raises BatcherError: If the ticker can not be created.
        """
        if settings is not None:
            self.cleanup_settings = settings

        if self.cleanup_ticker is not None and self.cleanup_ticker.is_running():
            return

        def cleanup_task() -> None:
            try:
                self.cleanup_stale()
            except Exception as e:
                logger.error("Error deleting stale batches", error=e)

        try:
            self.cleanup_ticker = Ticker(
                timedelta(seconds=self.cleanup_settings.poll_interval), cleanup_task
            )
        except Exception as e:
            raise BatcherError("creating cleanup ticker", e)

        logger.info(
            "Starting cleanup ticker...",
            interval=self.cleanup_settings.poll_interval,
        )
        self.cleanup_ticker.go()

    def stop_cleanup_ticker(self) -> None:
        """Stop the background cleanup."""
        if self.cleanup_ticker is not None:
            self.cleanup_ticker.stop()
            self.cleanup_ticker = None
