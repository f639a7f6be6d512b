"""
Batch set model for the batcher.
A batch set is one ordered group of operations with its own progress
messages, results and finished callback.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ..helper.task import get_task_name_from_interface
from .operation import Operation, OperationDefinition, new_operation


DEFAULT_TITLE = "Processing"
DEFAULT_INIT_MESSAGE = "Initializing."
DEFAULT_PROGRESS_MESSAGE = "Completed @current of @total."
DEFAULT_ERROR_MESSAGE = "An error has occurred."


class QueueKind(str, Enum):
    """Queue backends a batch set can be stored in."""

    DURABLE = "durable"
    MEMORY = "memory"


class BatchSetType(str, Enum):
    """
    Tag of a serialized batch set.
    Control sets carry a submit hook and usually no operations.
    """

    OPERATIONS = "operations"
    CONTROL = "control"


@dataclass(frozen=True)
class QueueDescriptor:
    """Name and backend of the queue holding a set's operations."""

    name: str
    kind: QueueKind = QueueKind.DURABLE

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "kind": self.kind.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QueueDescriptor":
        return cls(name=data["name"], kind=QueueKind(data.get("kind", "durable")))


@dataclass
class BatchSet:
    """
    BatchSet is the unit of sequencing inside a batch.

    `total` is fixed at creation, `count` only decreases and `success`
    only ever goes from False to True.
    """

    operations: Optional[List[Operation]] = field(default_factory=list)
    queue: Optional[QueueDescriptor] = None
    total: int = 0
    count: int = 0
    sandbox: Dict[str, Any] = field(default_factory=dict)
    results: List[Any] = field(default_factory=list)
    success: bool = False
    start: float = 0.0
    elapsed: float = 0.0

    title: str = DEFAULT_TITLE
    init_message: str = DEFAULT_INIT_MESSAGE
    progress_message: str = DEFAULT_PROGRESS_MESSAGE
    error_message: str = DEFAULT_ERROR_MESSAGE

    finished: Optional[str] = None
    group: Optional[str] = None
    submit_hook: Optional[str] = None

    @property
    def type(self) -> BatchSetType:
        if self.submit_hook is not None:
            return BatchSetType.CONTROL
        return BatchSetType.OPERATIONS

    def to_dict(self) -> Dict[str, Any]:
        """Convert batch set to dictionary for serialization."""
        return {
            "type": self.type.value,
            "operations": (
                [operation.to_dict() for operation in self.operations]
                if self.operations is not None
                else None
            ),
            "queue": self.queue.to_dict() if self.queue else None,
            "total": self.total,
            "count": self.count,
            "sandbox": self.sandbox,
            "results": self.results,
            "success": self.success,
            "start": self.start,
            "elapsed": self.elapsed,
            "title": self.title,
            "init_message": self.init_message,
            "progress_message": self.progress_message,
            "error_message": self.error_message,
            "finished": self.finished,
            "group": self.group,
            "submit_hook": self.submit_hook,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BatchSet":
        """
        Create batch set from dictionary.

        :raises ValueError: If the set type is unknown.
        """
        set_type = BatchSetType(data.get("type", BatchSetType.OPERATIONS.value))

        operations_value = data.get("operations")
        batch_set = cls(
            operations=(
                [Operation.from_dict(operation) for operation in operations_value]
                if operations_value is not None
                else None
            ),
            queue=QueueDescriptor.from_dict(data["queue"]) if data.get("queue") else None,
            total=data.get("total", 0),
            count=data.get("count", 0),
            sandbox=data.get("sandbox") or {},
            results=data.get("results") or [],
            success=data.get("success", False),
            start=data.get("start", 0.0),
            elapsed=data.get("elapsed", 0.0),
            title=data.get("title", DEFAULT_TITLE),
            init_message=data.get("init_message", DEFAULT_INIT_MESSAGE),
            progress_message=data.get("progress_message", DEFAULT_PROGRESS_MESSAGE),
            error_message=data.get("error_message", DEFAULT_ERROR_MESSAGE),
            finished=data.get("finished"),
            group=data.get("group"),
            submit_hook=data.get("submit_hook"),
        )

        if set_type == BatchSetType.CONTROL and batch_set.submit_hook is None:
            raise ValueError("control set without submit hook")

        return batch_set


def _to_operation(definition: OperationDefinition) -> Operation:
    if isinstance(definition, Operation):
        return definition

    if len(definition) != 2:
        raise ValueError(
            "operation must be a (task, arguments) pair, "
            f"got {len(definition)} values"
        )

    task, arguments = definition
    if isinstance(arguments, (str, bytes)) or not isinstance(arguments, Sequence):
        raise ValueError("operation arguments must be a list")

    return new_operation(task, arguments)


def new_batch_set(
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
    Create a new batch set from operation definitions.

    Operation definitions are Operation instances or (task, arguments) pairs
    where task is a function or a registered task name.

    :returns: New batch set with total and count set to the number of operations.
    :raises ValueError: If an operation definition is invalid.
    """
    if operations is None:
        raise ValueError("operations are required")

    converted: List[Operation] = [_to_operation(op) for op in operations]

    return BatchSet(
        operations=converted,
        total=len(converted),
        count=len(converted),
        title=title,
        init_message=init_message,
        progress_message=progress_message,
        error_message=error_message,
        finished=get_task_name_from_interface(finished) if finished else None,
        group=group,
        submit_hook=(
            get_task_name_from_interface(submit_hook) if submit_hook else None
        ),
    )
