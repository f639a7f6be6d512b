"""
Task helper functions for the batcher.
Validation and naming of the callables registered as batch handlers.
"""

import inspect
from typing import Any, Callable


def check_valid_task(task: Any) -> None:
    """
    Check if the provided task is a valid function.

    :param task: The task function to validate.
    :raises ValueError: If the task is invalid.
    """
    if task is None:
        raise ValueError("task must not be None")

    if not callable(task):
        raise ValueError(f"task must be a function, got {type(task).__name__}")


def check_operation_arguments(task: Callable[..., Any], argument_count: int) -> None:
    """
    Check that an operation task accepts its arguments plus the trailing context.

    :param task: The operation function to validate.
    :param argument_count: Number of declared operation arguments.
    :raises ValueError: If the task cannot be called with argument_count + 1 positional values.
    """
    check_valid_task(task)

    try:
        sig = inspect.signature(task)
    except (TypeError, ValueError):
        # Builtins without signature metadata are accepted as they are.
        return

    try:
        sig.bind(*([None] * (argument_count + 1)))
    except TypeError as e:
        raise ValueError(
            f"task {get_task_name_from_function(task)} cannot take "
            f"{argument_count} arguments and a context: {e}"
        )


def get_task_name_from_function(task: Callable[..., Any]) -> str:
    """
    Get the name of the function from the provided task.

    :param task: The task function to inspect.
    :returns: The name of the task function as a string.
    """
    check_valid_task(task)

    if hasattr(task, "__name__"):
        return task.__name__
    elif hasattr(task, "__class__"):
        return task.__class__.__name__
    else:
        return str(task)


def get_task_name_from_interface(task: Any) -> str:
    """
    Get the name of the task from the provided interface.
    Handles both string and function inputs.

    :param task: The task, either as a string or a callable function.
    :returns: The name of the task as a string.
    """
    if isinstance(task, str):
        return task

    return get_task_name_from_function(task)
