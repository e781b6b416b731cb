"""
Point aggregation module.

Groups flat observation rows by monitoring-point code into one
representative row per point plus per-point date span and sample count.
"""

import logging
import math
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from ..core import DateUtils, constants
from ..core.date_utils import EPOCH_SENTINEL
from ..models import PointStats, PointsResult


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _format_coordinate(value: float) -> str:
    """Render a coordinate the way the grid-point keys were always written."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


class PointAggregator:
    """Aggregate observation rows per monitoring point."""

    def __init__(
        self,
        date_utils: Optional[DateUtils] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize point aggregator.

        Args:
            date_utils: Date parser shared with the rest of the pipeline
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.date_utils = date_utils or DateUtils(logger=self.logger)

    def aggregate(
        self,
        rows: Iterable[Dict[str, Any]],
        code_field: str,
        x_field: str = constants.X_FIELD,
        y_field: str = constants.Y_FIELD,
        date_field: str = constants.DATE_FIELD
    ) -> PointsResult:
        """
        Reduce observation rows to representatives and statistics.

        The first row seen for a code becomes its representative; later rows
        only update the statistics. Rows without a code or with non-numeric
        coordinates are skipped.

        Args:
            rows: Observation rows in source order
            code_field: Column holding the monitoring-point code
            x_field: Column holding the x / longitude coordinate
            y_field: Column holding the y / latitude coordinate
            date_field: Column holding the observation date

        Returns:
            PointsResult with representatives in first-seen order
        """
        representatives: Dict[str, Dict[str, Any]] = {}
        stats: Dict[str, PointStats] = {}
        # Parsed min/max per code, kept alongside the original strings
        bounds: Dict[str, List[Optional[datetime]]] = {}
        unparsed = 0
        skipped = 0

        for row in rows:
            raw_code = row.get(code_field)
            if not raw_code:
                skipped += 1
                continue
            if not _is_number(row.get(x_field)) or not _is_number(row.get(y_field)):
                skipped += 1
                continue

            code = str(raw_code)
            if code not in representatives:
                representatives[code] = row

            raw_date = row.get(date_field)
            date_str = str(raw_date) if raw_date not in (None, "") else None

            if code not in stats:
                stats[code] = PointStats(min=date_str, max=date_str, count=0)
                bounds[code] = [None, None]
            point = stats[code]
            point.count += 1

            if date_str is None:
                continue

            parsed = self.date_utils.try_parse_observation_date(date_str)
            if parsed is None:
                unparsed += 1
                parsed = EPOCH_SENTINEL

            current = bounds[code]
            if current[0] is None or parsed < current[0]:
                point.min = date_str
                current[0] = parsed
            if current[1] is None or parsed > current[1]:
                point.max = date_str
                current[1] = parsed

        if skipped:
            self.logger.debug(f"Skipped {skipped} rows without code or coordinates")
        if unparsed:
            self.logger.debug(f"{unparsed} observation dates fell back to the epoch sentinel")

        self.logger.info(
            f"Aggregated {sum(st.count for st in stats.values())} rows into "
            f"{len(representatives)} points"
        )
        return PointsResult(
            rows=list(representatives.values()),
            stats=stats,
            unparsed_dates=unparsed,
        )

    def aggregate_grid_points(
        self,
        rows: Iterable[Dict[str, Any]],
        lat_field: str = constants.METEO_LAT_FIELD,
        lon_field: str = constants.METEO_LON_FIELD,
        time_field: str = constants.METEO_TIME_FIELD
    ) -> List[Dict[str, Any]]:
        """
        De-duplicate meteorological grid rows by coordinate.

        Args:
            rows: Grid rows carrying latitude, longitude and a timestamp

        Returns:
            One row per distinct (lat, lon), keyed by a "lat,lon" code
        """
        points: Dict[str, Dict[str, Any]] = {}
        for row in rows:
            lat = _to_float(row.get(lat_field))
            lon = _to_float(row.get(lon_field))
            if lat is None or lon is None:
                continue
            key = f"{_format_coordinate(lat)},{_format_coordinate(lon)}"
            if key not in points:
                points[key] = {
                    "codigo": key,
                    lat_field: lat,
                    lon_field: lon,
                    constants.DATE_FIELD: row.get(time_field),
                }

        self.logger.info(f"Found {len(points)} distinct grid points")
        return list(points.values())
