"""
Monitoring point data models.

Contains DTOs for per-point statistics and aggregated point sets.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class PointStats:
    """Observation span and sample count of one monitoring point."""

    min: Optional[str] = None
    max: Optional[str] = None
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"min": self.min, "max": self.max, "count": self.count}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PointStats":
        count = data.get("count", 0)
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise ValueError(f"Invalid sample count: {count!r}")
        return cls(min=data.get("min"), max=data.get("max"), count=count)


@dataclass
class PointsResult:
    """Representative rows and statistics for a set of monitoring points."""

    rows: List[Dict[str, Any]] = field(default_factory=list)
    stats: Dict[str, PointStats] = field(default_factory=dict)
    unparsed_dates: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dictionary."""
        return {
            "rows": self.rows,
            "stats": {code: st.to_dict() for code, st in self.stats.items()},
            "unparsed_dates": self.unparsed_dates,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "PointsResult":
        """
        Rebuild a result from its serialized form.

        Raises:
            ValueError: If the payload is structurally invalid
        """
        if not isinstance(data, dict):
            raise ValueError("Points payload must be an object")
        rows = data.get("rows")
        stats = data.get("stats") or {}
        if not isinstance(rows, list) or not isinstance(stats, dict):
            raise ValueError("Points payload must hold a rows list and a stats object")
        if not all(isinstance(row, dict) for row in rows):
            raise ValueError("Every point row must be an object")
        unparsed = data.get("unparsed_dates", 0)
        if isinstance(unparsed, bool) or not isinstance(unparsed, int) or unparsed < 0:
            raise ValueError(f"Invalid unparsed date count: {unparsed!r}")
        return cls(
            rows=rows,
            stats={
                str(code): PointStats.from_dict(st)
                for code, st in stats.items()
                if isinstance(st, dict)
            },
            unparsed_dates=unparsed,
        )
