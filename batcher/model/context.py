"""
Operation context and result models for the batcher.

Operations get a read-only view of their set's state and report back
through an OperationResult which the engine merges.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple


@dataclass(frozen=True)
class OperationContext:
    """
    Read-only context passed as the last argument of every operation call.

    :param sandbox: Scratch state of the current operation, empty on the first call.
    :param results: Results gathered by the set so far.
    :param batch_id: Id of the running batch.
    :param set_index: Index of the set the operation belongs to.
    """

    sandbox: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    results: Tuple[Any, ...] = ()
    batch_id: int = 0
    set_index: int = 0


@dataclass
class OperationResult:
    """
    What an operation reports after one call.

    `finished` below 1 asks for another call of the same operation,
    `sandbox_patch` is merged into the sandbox and `results_appended`
    is added to the set's results.
    """

    finished: float = 1.0
    message: str = ""
    sandbox_patch: Dict[str, Any] = field(default_factory=dict)
    results_appended: List[Any] = field(default_factory=list)

    def __post_init__(self):
        if not 0 <= self.finished <= 1:
            raise ValueError(f"finished must be between 0 and 1, got {self.finished}")
