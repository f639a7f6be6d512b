"""
Batch set submission for the Batcher.
"""

from typing import Any, Callable, Optional, Sequence, Union

from .batcher_task import BatcherTaskMixin
from .helper.error import BatcherError
from .helper.logging import get_logger
from .helper.task import check_operation_arguments
from .model.batch import Batch, EngineState
from .model.batch_set import (
    DEFAULT_ERROR_MESSAGE,
    DEFAULT_INIT_MESSAGE,
    DEFAULT_PROGRESS_MESSAGE,
    DEFAULT_TITLE,
    BatchSet,
    QueueDescriptor,
    QueueKind,
    new_batch_set,
)
from .model.operation import Operation, OperationDefinition

logger = get_logger(__name__)


class BatcherSetMixin(BatcherTaskMixin):
    """
    Mixin class adding batch sets to the active batch.
    """

    def batch_set(
        self,
        operations: Sequence[OperationDefinition],
        title: str = DEFAULT_TITLE,
        init_message: str = DEFAULT_INIT_MESSAGE,
        progress_message: str = DEFAULT_PROGRESS_MESSAGE,
        error_message: str = DEFAULT_ERROR_MESSAGE,
        finished: Optional[Union[Callable[..., Any], str]] = None,
        group: Optional[str] = None,
        submit_hook: Optional[Union[Callable[..., Any], str]] = None,
    ) -> BatchSet:
        """
        Add a batch set to the active batch, creating the batch if needed.

        Functions given as operations, finished callback or submit hook are
        registered as tasks under their function name. While the batch is
        running, the set is inserted right after the current set and its
        operations are queued at once.

        :param operations: Operations or (task, arguments) pairs.
        :param title: Title of the progress page.
        :param init_message: Message shown before the first step of the set.
        :param progress_message: Message template with @current, @remaining,
            @total, @percentage, @estimate and @elapsed placeholders.
        :param error_message: Message shown when processing fails.
        :param finished: Callback called with (success, results, operations, elapsed).
        :param group: Handler group whose loader registers the set's tasks.
        :param submit_hook: Task called with the batcher when processing reaches the set.
        :returns: The new batch set.
        :raises ValueError: If an operation definition is invalid.
        """
        definitions = [self._register_definition(op) for op in operations]
        if callable(finished):
            finished = self._register_callable(finished)
        if callable(submit_hook):
            submit_hook = self._register_callable(submit_hook)

        batch_set = new_batch_set(
            definitions,
            title=title,
            init_message=init_message,
            progress_message=progress_message,
            error_message=error_message,
            finished=finished,
            group=group,
            submit_hook=submit_hook,
        )

        for operation in batch_set.operations or []:
            task = self.tasks.get(operation.task_name)
            if task is not None:
                check_operation_arguments(task.task, len(operation.arguments))

        if self.batch is None:
            self.batch = Batch()
            self.state = EngineState.IDLE

        if not self.batch.running:
            self.batch.sets.append(batch_set)
            logger.debug("Batch set added", title=title, total=batch_set.total)
        else:
            index = self.batch.current_set + 1
            self.batch.sets.insert(index, batch_set)
            self._populate_queue(index)
            logger.debug(
                "Batch set inserted into running batch",
                batch_id=self.batch.id,
                index=index,
                total=batch_set.total,
            )

        return batch_set

    def _register_definition(self, definition: OperationDefinition) -> OperationDefinition:
        if isinstance(definition, Operation):
            return definition

        if len(definition) == 2 and callable(definition[0]):
            return (self._register_callable(definition[0]), definition[1])

        return definition

    def _populate_queue(self, index: int) -> None:
        """
        Move the operations of a set into its queue.
        Progressive batches use durable queues, synchronous ones memory queues.
        """
        if self.batch is None:
            raise BatcherError("populating queue", RuntimeError("no active batch"))

        batch_set = self.batch.sets[index]
        if batch_set.operations is None:
            return

        if batch_set.queue is None:
            self.batch.queue_serial += 1
            batch_set.queue = QueueDescriptor(
                name=f"batcher:{self.batch.id}:{self.batch.queue_serial}",
                kind=QueueKind.DURABLE if self.batch.progressive else QueueKind.MEMORY,
            )

        queue = self._queue(batch_set)
        if queue is None:
            raise BatcherError("populating queue", RuntimeError("set has no queue"))

        queue.create()
        for operation in batch_set.operations:
            queue.enqueue(operation)

        batch_set.operations = None
