"""
Cache data models.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class CacheEntry:
    """Timestamped cache payload."""

    timestamp: int
    payload: Any

    def is_fresh(self, now: int, max_age_ms: float) -> bool:
        """Check the entry age against a caller-supplied budget."""
        return now - self.timestamp <= max_age_ms

    def to_dict(self) -> Dict[str, Any]:
        return {"timestamp": self.timestamp, "payload": self.payload}

    @classmethod
    def from_dict(cls, data: Any) -> "CacheEntry":
        """
        Build an entry from its serialized form.

        Raises:
            ValueError: If the timestamp is missing or not numeric
        """
        if not isinstance(data, dict):
            raise ValueError("Cache entry must be an object")
        timestamp = data.get("timestamp")
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise ValueError(f"Invalid cache timestamp: {timestamp!r}")
        return cls(timestamp=timestamp, payload=data.get("payload"))
