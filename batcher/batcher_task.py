"""
Task-related methods of the Batcher.
Operations, finished callbacks and submit hooks are looked up by name
in the task registry.
"""

from typing import Any, Callable, Optional, TypeVar

from .batcher_global import BatcherGlobalMixin
from .helper.error import BatcherError
from .helper.logging import get_logger
from .model.task import Task, new_task, new_task_with_name

logger = get_logger(__name__)

# TypeVar for maintaining function type through decorator
F = TypeVar("F", bound=Callable[..., Any])


class BatcherTaskMixin(BatcherGlobalMixin):
    """
    Mixin class containing task-related methods for the Batcher.
    """

    def __init__(self):
        super().__init__()

    def add_task(self, task: Callable[..., Any]) -> Task:
        """
        Add a new task to the batcher.
        The task name is generated from the function name.

        :param task: The task function to add
        :return: The newly created task
        :raises RuntimeError: If task creation fails or task already exists
        """
        try:
            new_task_obj = new_task(task)
        except Exception as e:
            raise RuntimeError(f"Error creating new task: {str(e)}")

        return self._register(new_task_obj)

    def add_task_with_name(self, task: Callable[..., Any], name: str) -> Task:
        """
        Add a new task with a specific name to the batcher.

        :param task: The task function to add
        :param name: The specific name for the task
        :return: The newly created task
        :raises RuntimeError: If task creation fails or task already exists
        """
        try:
            new_task_obj = new_task_with_name(task, name)
        except Exception as e:
            raise RuntimeError(f"Error creating new task: {str(e)}")

        return self._register(new_task_obj)

    def task(self) -> Callable[[F], F]:
        """
        Decorator to register a task function with the batcher using the function name.
        This is equivalent to calling add_task().

        Usage:
            @batcher.task()
            def import_rows(offset, context):
                return OperationResult(results_appended=[offset])

        :return: The decorator function that preserves the original function's type
        """

        def decorator(func: F) -> F:
            self.add_task(func)
            return func

        return decorator

    def task_with_name(self, name: str) -> Callable[[F], F]:
        """
        Decorator to register a task function under a custom name.
        This is equivalent to calling add_task_with_name().

        :param name: The name to register the task under.
        :return: The decorator function that preserves the original function's type
        """

        def decorator(func: F) -> F:
            self.add_task_with_name(func, name)
            return func

        return decorator

    def add_loader(self, group: str, loader: Callable[..., None]) -> None:
        """
        Add a loader registering the tasks of a handler group.
        The loader is called with the batcher the first time a set of
        that group is processed.

        :param group: The handler group name.
        :param loader: Function taking the batcher and registering tasks.
        :raises RuntimeError: If a loader for the group already exists.
        """
        with self.task_mutex:
            if group in self.loaders:
                raise RuntimeError(f"Loader already exists: {group}")
            self.loaders[group] = loader

        logger.debug("Loader added", group=group)

    def _register(self, task: Task) -> Task:
        with self.task_mutex:
            if task.name in self.tasks:
                raise RuntimeError(f"Task already exists: {task.name}")
            self.tasks[task.name] = task

        logger.debug(f"Task added: {task.name}")
        return task

    def _register_callable(self, func: Callable[..., Any]) -> str:
        """
        Register a function passed directly to batch_set.
        The same function can be passed again, another one with the same name not.
        """
        name = func.__name__
        with self.task_mutex:
            existing = self.tasks.get(name)
            if existing is not None:
                if existing.task != func:
                    raise BatcherError(
                        "registering task",
                        ValueError(f"another task is registered as {name}"),
                    )
                return name

            self._register(new_task(func))
        return name

    def _ensure_group(self, group: Optional[str]) -> None:
        """Run the loader of a handler group once."""
        if group is None:
            return

        with self.task_mutex:
            if group in self.loaded_groups:
                return

            loader = self.loaders.get(group)
            if loader is None:
                logger.warning("No loader for handler group", group=group)
                return

            self.loaded_groups.add(group)

        try:
            loader(self)
        except Exception as e:
            with self.task_mutex:
                self.loaded_groups.discard(group)
            raise BatcherError(f"loading handler group {group}", e)

        logger.debug("Handler group loaded", group=group)

    def _resolve_task(self, name: str) -> Task:
        """
        Look up a registered task.

        :raises BatcherError: If no task is registered under the name.
        """
        task = self.tasks.get(name)
        if task is None:
            raise BatcherError("resolving task", LookupError(f"unknown task: {name}"))
        return task
