"""
Execution engine of the Batcher.

One engine invocation claims operations of the current set one at a time,
advances through the sets as they empty and, in progressive mode, suspends
once the time budget of the invocation is used up.
"""

from types import MappingProxyType
from typing import List, Optional, Union

from .batcher_set import BatcherSetMixin
from .core.clock import Timer
from .core.progress import format_interval, format_progress_message, progress_values
from .helper.error import BatcherError
from .helper.logging import get_logger
from .helper.url import build_url
from .model.batch import EngineState
from .model.batch_set import BatchSet
from .model.context import OperationContext, OperationResult
from .model.operation import Operation
from .model.report import BatchReport, Progress, Redirect, SetReport

logger = get_logger(__name__)


class BatcherProcessMixin(BatcherSetMixin):
    """
    Mixin class starting and running batches.
    """

    def process(
        self,
        redirect: Optional[str] = None,
        progressive: bool = True,
        url: str = "/batch",
        source_url: str = "",
    ) -> Optional[Union[Redirect, BatchReport]]:
        """
        Start processing the active batch.

        Progressive batches are stored as checkpoint and a redirect to the
        start page of the polling endpoint is returned. Synchronous batches
        run to the end right away and return the final report.

        :param redirect: Where to send the client once the batch is finished.
        :param progressive: Whether to process the batch over several requests.
        :param url: Polling endpoint, may already carry a query string.
        :param source_url: Fallback for redirect.
        :returns: The redirect or report, None if no batch was set.
        :raises BatcherError: If the id can not be issued or the checkpoint not be stored.
        """
        if self.batch is None:
            logger.warning("No batch to process")
            return None

        batch = self.batch
        batch.progressive = progressive
        batch.url = url
        batch.source_url = source_url
        batch.redirect = redirect
        batch.current_set = 0

        batch.id = self.next_id()

        for index in range(len(batch.sets)):
            self._populate_queue(index)

        if not progressive:
            logger.info("Processing batch", batch_id=batch.id, sets=len(batch.sets))
            return self._process()

        finished_url = build_url(url, op="finished", id=batch.id)
        batch.error_message = (
            f'Please continue to <a href="{finished_url}">the error page</a>'
        )

        try:
            self.batch_store.insert_batch(batch.id, self.token(batch.id), batch.to_dict())
        except Exception as e:
            raise BatcherError(f"storing batch {batch.id}", e)

        logger.info("Batch stored", batch_id=batch.id, sets=len(batch.sets))

        # The checkpoint is the batch from now on.
        for batch_set in batch.sets:
            self._forget_queue(batch_set)
        self.batch = None
        self.state = EngineState.IDLE

        return Redirect(build_url(url, op="start", id=batch.id))

    def _process(self) -> Union[Progress, BatchReport]:
        """
        Run the engine on the active batch.

        :returns: The progress of a progressive batch, the final report
            of a synchronous one.
        """
        batch = self.batch
        if batch is None:
            raise BatcherError("processing batch", RuntimeError("no active batch"))

        timer: Optional[Timer] = None
        if batch.progressive:
            timer = Timer(self.clock, self.time_budget)

        current_set = batch.current()
        if not current_set.start:
            current_set.start = self.clock.now()

        old_set = current_set
        queue = self._queue(current_set)
        set_changed = True
        finished = 0.0
        task_message = ""
        self.state = EngineState.RUNNING

        while not current_set.success:
            if set_changed:
                self._ensure_group(current_set.group)

            task_message = ""
            finished = 0.0

            item = queue.claim() if queue is not None else None
            if item is not None:
                result = self._invoke(item.data, current_set)
                finished = result.finished
                task_message = result.message

                current_set.sandbox.update(result.sandbox_patch)
                current_set.results.extend(result.results_appended)

                if finished >= 1:
                    # Not counted twice when computing the percentage.
                    finished = 0.0
                    queue.delete(item)
                    current_set.count -= 1
                    current_set.sandbox = {}
            elif current_set.count > 0:
                logger.warning(
                    "Queue is empty before all operations finished",
                    batch_id=batch.id,
                    count=current_set.count,
                )
                current_set.count = 0

            # Sets without operations are passed in one go, submit hooks of
            # control sets may add further sets on the way.
            set_changed = False
            old_set = current_set
            while current_set.count <= 0:
                current_set.success = True
                current_set.elapsed = self.clock.now() - current_set.start
                if not self._next_set():
                    break

                current_set = batch.current()
                current_set.start = self.clock.now()
                set_changed = True

            queue = self._queue(current_set)

            if timer is not None and timer.exceeded():
                current_set.elapsed = self.clock.now() - current_set.start
                self.state = EngineState.SUSPENDED
                logger.debug(
                    "Batch suspended",
                    batch_id=batch.id,
                    set=batch.current_set,
                    count=current_set.count,
                )
                break

        if current_set.success:
            self.state = EngineState.DONE

        if not batch.progressive:
            return self.finish()

        if set_changed and current_set.queue is not None:
            # Processing continues with a fresh set.
            remaining = current_set.count
            total = current_set.total
            message_template = current_set.init_message
            task_message = ""
        else:
            remaining = old_set.count
            total = old_set.total
            message_template = old_set.progress_message

        current = total - remaining + finished
        values = progress_values(total, remaining, current, current_set.elapsed)

        message = format_progress_message(message_template, values)
        if message:
            message += "<br />"
        if task_message:
            message += task_message

        return Progress(percentage=values["@percentage"], message=message)

    def _invoke(self, operation: Operation, batch_set: BatchSet) -> OperationResult:
        """
        Call an operation with its arguments and a read-only context.
        Exceptions of the operation are passed on unchanged.
        """
        task = self._resolve_task(operation.task_name)
        context = OperationContext(
            sandbox=MappingProxyType(dict(batch_set.sandbox)),
            results=tuple(batch_set.results),
            batch_id=self.batch.id if self.batch else 0,
            set_index=self.batch.current_set if self.batch else 0,
        )

        try:
            result = task.task(*operation.arguments, context)
        except Exception as e:
            batch_set.elapsed = self.clock.now() - batch_set.start
            logger.error(
                f"Operation {operation.task_name} failed",
                error=e,
                batch_id=context.batch_id,
            )
            raise

        if result is None:
            return OperationResult()
        if not isinstance(result, OperationResult):
            raise BatcherError(
                f"calling {operation.task_name}",
                TypeError(
                    f"operation returned {type(result).__name__}, "
                    "expected OperationResult or None"
                ),
            )
        return result

    def _next_set(self) -> bool:
        """
        Advance to the next set and run its submit hook.

        :returns: False if the current set is the last one.
        """
        batch = self.batch
        if batch is None or not batch.has_next_set():
            return False

        self.state = EngineState.SET_TRANSITION
        batch.current_set += 1
        current_set = batch.current()
        logger.debug("Next batch set", batch_id=batch.id, set=batch.current_set)

        if current_set.submit_hook is not None:
            self._ensure_group(current_set.group)
            hook = self._resolve_task(current_set.submit_hook)
            hook.task(self)

        self.state = EngineState.RUNNING
        return True

    def finish(self) -> BatchReport:
        """
        End the active batch.

        Calls the finished callback of every set with
        (success, results, remaining operations, elapsed), deletes the
        checkpoint and the queues and clears the active batch.

        :returns: The final report, with the redirect for progressive batches.
        """
        batch = self.batch
        if batch is None:
            raise BatcherError("finishing batch", RuntimeError("no active batch"))

        reports: List[SetReport] = []
        for batch_set in batch.sets:
            self._ensure_group(batch_set.group)

            queue = self._queue(batch_set)
            operations = queue.drain_all() if queue is not None else []
            elapsed = format_interval(batch_set.elapsed)

            if batch_set.finished is not None:
                callback = self._resolve_task(batch_set.finished)
                callback.task(
                    batch_set.success, list(batch_set.results), operations, elapsed
                )

            reports.append(
                SetReport(
                    title=batch_set.title,
                    success=batch_set.success,
                    results=list(batch_set.results),
                    operations=operations,
                    elapsed=elapsed,
                )
            )

        if batch.progressive:
            try:
                self.batch_store.delete_batch(batch.id)
            except Exception as e:
                raise BatcherError(f"deleting batch {batch.id}", e)

        for batch_set in batch.sets:
            queue = self._queue(batch_set)
            if queue is not None:
                queue.destroy()
            self._forget_queue(batch_set)

        self.batch = None
        self.state = EngineState.IDLE

        redirect: Optional[Redirect] = None
        if batch.progressive:
            redirect = Redirect(
                build_url(batch.redirect or batch.source_url, op="finish", id=batch.id)
            )

        report = BatchReport(batch_id=batch.id, sets=reports, redirect=redirect)
        logger.info("Batch finished", batch_id=batch.id, success=report.success)
        return report
