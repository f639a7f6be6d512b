"""
Task model for the batcher.
A task is a function registered under a name so checkpoints can refer to it.
"""

from dataclasses import dataclass
from typing import Callable, Any

from ..helper.error import BatcherError
from ..helper.task import check_valid_task, get_task_name_from_function


@dataclass
class Task:
    """
    Task represents a registered operation, finished callback or submit hook.
    """

    task: Callable[..., Any]
    name: str = ""


def new_task(task: Callable[..., Any]) -> Task:
    """
    Create a new task named after its function.
    """
    try:
        task_name = get_task_name_from_function(task)
        return new_task_with_name(task, task_name)
    except Exception as e:
        raise BatcherError("creating task", e)


def new_task_with_name(task: Callable[..., Any], task_name: str) -> Task:
    """
    Create a new task with specified name.
    """
    if not task_name or len(task_name) > 100:
        raise ValueError("task_name must have a length between 1 and 100")

    check_valid_task(task)

    return Task(task=task, name=task_name)
