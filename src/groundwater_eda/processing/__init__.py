"""
Data processing module for the groundwater EDA pipeline.

Provides per-point aggregation and coordinate normalization.
"""

import logging
from typing import Dict, Any, List, Optional

from ..core import DateUtils, constants
from ..models import PointsResult
from .aggregator import PointAggregator
from .coordinates import CoordinateNormalizer, normalize_coordinates


class DataProcessor:
    """
    Unified data processor combining aggregation and coordinate resolution.

    This class provides a convenient interface to all processing operations.
    """

    def __init__(
        self,
        normalizer: Optional[CoordinateNormalizer] = None,
        date_utils: Optional[DateUtils] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize data processor.

        Args:
            normalizer: Coordinate normalizer (legacy grid by default)
            date_utils: Date parser for observation dates
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.normalizer = normalizer or CoordinateNormalizer(logger=logger)
        self.aggregator = PointAggregator(date_utils=date_utils, logger=logger)

    def aggregate_points(self, rows: List[Dict[str, Any]], code_field: str) -> PointsResult:
        """
        Aggregate observation rows per point and resolve each point's location.

        Args:
            rows: Observation rows
            code_field: Column holding the monitoring-point code

        Returns:
            PointsResult whose rows carry "lat"/"lon" (None when unresolvable)
        """
        result = self.aggregator.aggregate(rows, code_field)
        result.rows = self.attach_coordinates(result.rows)
        return result

    def aggregate_grid_points(self, rows: List[Dict[str, Any]]) -> PointsResult:
        """
        De-duplicate meteorological grid rows; no statistics are kept.

        Args:
            rows: Grid rows with lat/long/Time

        Returns:
            PointsResult with empty stats
        """
        points = self.aggregator.aggregate_grid_points(rows)
        for point in points:
            latlon = self.normalizer.normalize(
                point.get(constants.METEO_LON_FIELD),
                point.get(constants.METEO_LAT_FIELD),
            )
            point["lat"], point["lon"] = latlon if latlon else (None, None)
        return PointsResult(rows=points)

    def attach_coordinates(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Return copies of rows enriched with resolved "lat" and "lon".

        Args:
            rows: Rows carrying coord_x_m / coord_y_m

        Returns:
            New row dictionaries
        """
        resolved = []
        unresolved = 0
        for row in rows:
            latlon = self.normalizer.normalize(
                row.get(constants.X_FIELD), row.get(constants.Y_FIELD)
            )
            if latlon is None:
                unresolved += 1
            enriched = dict(row)
            enriched["lat"], enriched["lon"] = latlon if latlon else (None, None)
            resolved.append(enriched)

        if unresolved:
            self.logger.debug(f"{unresolved} points have no resolvable location")
        return resolved


__all__ = [
    "PointAggregator",
    "CoordinateNormalizer",
    "normalize_coordinates",
    "DataProcessor",
]
