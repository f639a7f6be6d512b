"""
Operation model for the batcher.
An operation is one named callback plus the arguments it is called with.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple, Union, Callable

from ..helper.task import get_task_name_from_interface


@dataclass(frozen=True)
class Operation:
    """
    Operation represents one unit of work enqueued for a batch set.
    The arguments must be JSON serializable for progressive batches.
    """

    task_name: str
    arguments: Tuple[Any, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Convert operation to dictionary for serialization."""
        return {
            "task_name": self.task_name,
            "arguments": list(self.arguments),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Operation":
        """Create operation from dictionary."""
        return cls(
            task_name=data["task_name"],
            arguments=tuple(data.get("arguments", [])),
        )


OperationDefinition = Union[
    Operation,
    Tuple[Union[Callable[..., Any], str], Sequence[Any]],
    List[Any],
]


def new_operation(
    task: Union[Callable[..., Any], str], arguments: Sequence[Any] = ()
) -> Operation:
    """
    Create a new operation from a task function or task name.

    :param task: The task function or its registered name.
    :param arguments: Positional arguments passed before the context.
    :returns: New operation.
    :raises ValueError: If the task name is empty or too long.
    """
    task_name: str = get_task_name_from_interface(task)
    if not task_name or len(task_name) > 100:
        raise ValueError("task name must have a length between 1 and 100")

    return Operation(task_name=task_name, arguments=tuple(arguments))
