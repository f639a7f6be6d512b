"""
Batch model for the batcher.
The batch is the serializable job state persisted between polling requests.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .batch_set import BatchSet


# Version of the checkpoint document written by to_dict.
CHECKPOINT_VERSION = 1


class EngineState(str, Enum):
    """States of the execution engine for one batch."""

    IDLE = "IDLE"
    RUNNING = "RUNNING"
    SET_TRANSITION = "SET_TRANSITION"
    DONE = "DONE"
    SUSPENDED = "SUSPENDED"


@dataclass
class Batch:
    """
    Batch represents the whole multi-set job submitted by one caller.
    `current_set` never decreases and indexes a valid set until the batch is done.
    """

    id: int = 0
    sets: List[BatchSet] = field(default_factory=list)
    current_set: int = 0
    progressive: bool = True
    url: str = "/batch"
    source_url: str = ""
    redirect: Optional[str] = None
    error_message: str = ""
    # Number of queues created so far, used to name the next one.
    queue_serial: int = 0

    @property
    def running(self) -> bool:
        """A batch is running once it has been given an id."""
        return self.id > 0

    def current(self) -> BatchSet:
        """Return the batch set being processed."""
        return self.sets[self.current_set]

    def has_next_set(self) -> bool:
        return self.current_set + 1 < len(self.sets)

    def to_dict(self) -> Dict[str, Any]:
        """Convert batch to a versioned checkpoint document."""
        return {
            "version": CHECKPOINT_VERSION,
            "id": self.id,
            "sets": [batch_set.to_dict() for batch_set in self.sets],
            "current_set": self.current_set,
            "progressive": self.progressive,
            "url": self.url,
            "source_url": self.source_url,
            "redirect": self.redirect,
            "error_message": self.error_message,
            "queue_serial": self.queue_serial,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Batch":
        """
        Create batch from a checkpoint document.

        :raises ValueError: If the document version is not supported.
        """
        version = data.get("version")
        if version != CHECKPOINT_VERSION:
            raise ValueError(f"unsupported checkpoint version: {version}")

        return cls(
            id=data.get("id", 0),
            sets=[BatchSet.from_dict(batch_set) for batch_set in data.get("sets", [])],
            current_set=data.get("current_set", 0),
            progressive=data.get("progressive", True),
            url=data.get("url", "/batch"),
            source_url=data.get("source_url", ""),
            redirect=data.get("redirect"),
            error_message=data.get("error_message", ""),
            queue_serial=data.get("queue_serial", 0),
        )
