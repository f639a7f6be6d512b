"""
Polling endpoint handling of the Batcher.
"""

from typing import Union

from .batcher_process import BatcherProcessMixin
from .helper.error import BatcherError, NotFoundError, TransportPreconditionError
from .helper.logging import get_logger
from .helper.url import build_url
from .model.batch import Batch
from .model.report import BatchReport, Progress, ProgressPage

logger = get_logger(__name__)

PAGE_OPS = ("start", "do", "finished")


class BatcherPageMixin(BatcherProcessMixin):
    """
    Mixin class serving the requests of the polling client.
    """

    def load(self, batch_id: int) -> Batch:
        """
        Load the checkpoint of a progressive batch.

        :param batch_id: The id of the batch.
        :returns: The stored batch.
        :raises NotFoundError: If there is no batch with this id for the batcher's secret.
        :raises BatcherError: If the checkpoint can not be read.
        """
        try:
            data = self.batch_store.select_batch(batch_id, self.token(batch_id))
        except Exception as e:
            raise BatcherError(f"loading batch {batch_id}", e)

        if data is None:
            raise NotFoundError(batch_id)

        try:
            return Batch.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise BatcherError(f"decoding batch {batch_id}", e)

    def page(
        self, op: str, batch_id: int, method: str = "GET"
    ) -> Union[ProgressPage, Progress, BatchReport]:
        """
        Handle one request of the polling client.

        - start: returns the progress page the client fills in.
        - do: runs one engine step, POST only.
        - finished: ends the batch and returns the final report.

        The checkpoint is saved after the request unless the batch was finished,
        also when an operation raised.

        :param op: The requested operation.
        :param batch_id: The id of the batch.
        :param method: HTTP method of the request.
        :raises TransportPreconditionError: For unknown ops or a do request without POST.
        :raises NotFoundError: If the batch does not exist.
        """
        if op not in PAGE_OPS:
            raise TransportPreconditionError(f"page {op}", f"Unknown operation: {op}")
        if op == "do" and method.upper() != "POST":
            raise TransportPreconditionError("page do", "HTTP POST is required.")

        self.batch = self.load(batch_id)

        try:
            if op == "start":
                return self._progress_page()
            if op == "do":
                return self._process()
            return self.finish()
        finally:
            if self.batch is not None:
                self._save()

    def _progress_page(self) -> ProgressPage:
        batch = self.batch
        if batch is None:
            raise BatcherError("rendering progress page", RuntimeError("no active batch"))

        current_set = batch.current()
        return ProgressPage(
            title=current_set.title,
            content='<div id="progress"></div>',
            init_message=current_set.init_message,
            error_message=f"{current_set.error_message}<br />{batch.error_message}",
            uri=build_url(batch.url, op="do", id=batch.id),
        )

    def _save(self) -> None:
        """Write the active batch back to its checkpoint and release it."""
        batch = self.batch
        if batch is None:
            return

        self.batch = None
        for batch_set in batch.sets:
            self._forget_queue(batch_set)

        try:
            self.batch_store.update_batch(batch.id, batch.to_dict())
        except Exception as e:
            raise BatcherError(f"saving batch {batch.id}", e)
        logger.debug("Batch saved", batch_id=batch.id, set=batch.current_set)
