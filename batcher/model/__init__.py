"""
Model package for the batcher.

Contains data models and domain objects for the batch system.
"""

from .operation import Operation, OperationDefinition, new_operation
from .queue_item import QueueItem
from .batch_set import (
    BatchSet,
    BatchSetType,
    QueueDescriptor,
    QueueKind,
    new_batch_set,
)
from .batch import Batch, EngineState, CHECKPOINT_VERSION
from .context import OperationContext, OperationResult
from .report import BatchReport, Progress, ProgressPage, Redirect, SetReport
from .task import Task, new_task, new_task_with_name
from .cleanup import CleanupSettings

__all__ = [
    # Operation related
    "Operation",
    "OperationDefinition",
    "new_operation",
    "QueueItem",
    # Batch related
    "BatchSet",
    "BatchSetType",
    "QueueDescriptor",
    "QueueKind",
    "new_batch_set",
    "Batch",
    "EngineState",
    "CHECKPOINT_VERSION",
    # Operation calls
    "OperationContext",
    "OperationResult",
    # Reports
    "BatchReport",
    "Progress",
    "ProgressPage",
    "Redirect",
    "SetReport",
    # Task related
    "Task",
    "new_task",
    "new_task_with_name",
    # Cleanup
    "CleanupSettings",
]
