"""
Cleanup settings for the batcher.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict


@dataclass
class CleanupSettings:
    """
    Settings of the stale batch sweep.
    """

    retention_seconds: int = 864000  # Ten days before abandoned batches are purged
    poll_interval: float = 3600.0  # Seconds between sweeps

    @property
    def retention(self) -> timedelta:
        return timedelta(seconds=self.retention_seconds)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CleanupSettings":
        """
        Create CleanupSettings instance from dictionary.

        :param data: Dictionary containing settings data
        :return: CleanupSettings instance
        """
        return cls(
            retention_seconds=data.get("retention_seconds", 864000),
            poll_interval=data.get("poll_interval", 3600.0),
        )
