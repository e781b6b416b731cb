"""
Coordinate normalization module.

Source tables mix two untagged encodings: legacy projected grid metres and
geographic degrees. The frame is inferred from magnitude.

Known limitation: a legacy-grid coordinate below 1000 m on both axes would be
read as degrees. Real survey coordinates never fall in that range.
"""

import logging
import math
from typing import Any, Optional, Tuple

from pyproj import Transformer
from pyproj.exceptions import ProjError

from ..core import constants

LatLon = Tuple[float, float]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class CoordinateNormalizer:
    """Convert projected or geographic coordinate pairs to (lat, lon)."""

    def __init__(
        self,
        source_crs: str = constants.LEGACY_GRID_CRS,
        threshold: float = constants.PROJECTED_MAGNITUDE_THRESHOLD,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the normalizer.

        Args:
            source_crs: PROJ definition of the projected grid
            threshold: Magnitude above which a pair is treated as metres
            logger: Logger instance
        """
        self.source_crs = source_crs
        self.threshold = threshold
        self.logger = logger or logging.getLogger(__name__)
        self._transformer: Optional[Transformer] = None

    @property
    def transformer(self) -> Transformer:
        """Projected grid to WGS84 transformer, built on first use."""
        if self._transformer is None:
            self._transformer = Transformer.from_crs(
                self.source_crs, constants.GEOGRAPHIC_CRS, always_xy=True
            )
        return self._transformer

    def is_projected(self, x: float, y: float) -> bool:
        return abs(x) > self.threshold or abs(y) > self.threshold

    def project(self, x: float, y: float) -> Optional[LatLon]:
        """
        Project grid metres to geographic degrees.

        Returns:
            (lat, lon) or None if the transform fails or is not finite
        """
        try:
            lon, lat = self.transformer.transform(x, y)
        except (ProjError, ValueError, TypeError, OverflowError) as e:
            self.logger.debug(f"Projection failed for ({x}, {y}): {e}")
            return None
        if math.isfinite(lat) and math.isfinite(lon):
            return float(lat), float(lon)
        return None

    def normalize(self, x: Any, y: Any) -> Optional[LatLon]:
        """
        Resolve a coordinate pair to (lat, lon).

        Args:
            x: Easting in metres or longitude in degrees
            y: Northing in metres or latitude in degrees

        Returns:
            (lat, lon), or None when no plausible interpretation applies
        """
        if not _is_number(x) or not _is_number(y):
            return None

        if self.is_projected(x, y):
            return self.project(x, y)

        if abs(y) <= 90 and abs(x) <= 180:
            return y, x

        return None


_default_normalizer: Optional[CoordinateNormalizer] = None


def normalize_coordinates(x: Any, y: Any) -> Optional[LatLon]:
    """Normalize a pair using the default legacy grid definition."""
    global _default_normalizer
    if _default_normalizer is None:
        _default_normalizer = CoordinateNormalizer()
    return _default_normalizer.normalize(x, y)
