"""
Report models returned to the polling transport.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .operation import Operation


@dataclass(frozen=True)
class Redirect:
    """Instruction to send the client to another URL."""

    url: str


@dataclass(frozen=True)
class ProgressPage:
    """Render-ready descriptor of the progress page the polling widget fills in."""

    title: str
    content: str
    init_message: str
    error_message: str
    uri: str


@dataclass(frozen=True)
class Progress:
    """Result of one processing step."""

    percentage: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON response of a polling step."""
        return {
            "status": True,
            "percentage": self.percentage,
            "message": self.message,
        }


@dataclass
class SetReport:
    """Outcome of one batch set."""

    title: str
    success: bool
    results: List[Any] = field(default_factory=list)
    operations: List[Operation] = field(default_factory=list)
    elapsed: str = ""


@dataclass
class BatchReport:
    """
    Outcome of a finished batch.
    `redirect` is only set for progressive batches.
    """

    batch_id: int
    sets: List[SetReport] = field(default_factory=list)
    redirect: Optional[Redirect] = None

    @property
    def success(self) -> bool:
        return all(set_report.success for set_report in self.sets)
