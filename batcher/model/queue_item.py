"""
Queue item model for the batcher.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from .operation import Operation


@dataclass
class QueueItem:
    """
    QueueItem is one stored operation of a named queue.
    Items are only referenced by the engine through what claim() returns.
    """

    id: int
    name: str
    data: Operation
    expire: int = 0
    created_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "QueueItem":
        """Create queue item from database row. Supports both output_* and raw column names."""
        data_value = row.get("output_data", row.get("data"))
        if isinstance(data_value, str):
            data_value = json.loads(data_value)

        return cls(
            id=row.get("output_id", row.get("id", 0)),
            name=row.get("output_name", row.get("name", "")),
            data=Operation.from_dict(data_value or {}),
            expire=row.get("output_expire", row.get("expire", 0)),
            created_at=row.get(
                "output_created_at", row.get("created_at", datetime.now())
            ),
        )
