"""
Point loading service.

Entry point for presentation code: serves point sets and region lists from
the cache when fresh, otherwise fetches, aggregates and repopulates the
cache. Overlapping loads of the same key are not de-duplicated; each one
fetches and the last write wins.
"""

import logging
import unicodedata
from typing import Any, Dict, List, Optional, Tuple

from ..cache import CacheStore
from ..core import constants
from ..models import PointsResult, VariableConfig
from ..processing import DataProcessor
from .cancellation import CancellationToken, LoadCancelled
from .data_fetcher import DataFetcher


def points_cache_key(variable: str, region: str) -> str:
    """Cache key of the point set for a variable and region filter."""
    return f"{constants.POINTS_NAMESPACE}:{variable}:{region}"


def regions_cache_key(variable: str) -> str:
    """Cache key of the region labels available for a variable."""
    return f"{constants.REGIONS_NAMESPACE}:{variable}"


def _collation_key(label: str) -> Tuple[str, str]:
    """Accent and case insensitive ordering, ties broken by the raw label."""
    decomposed = unicodedata.normalize("NFKD", label)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return base.casefold(), label


class PointLoader:
    """Load monitoring points and region labels through the cache."""

    def __init__(
        self,
        data_fetcher: DataFetcher,
        cache_store: CacheStore,
        processor: Optional[DataProcessor] = None,
        points_max_age_ms: float = constants.POINTS_MAX_AGE_MS,
        regions_max_age_ms: float = constants.REGIONS_MAX_AGE_MS,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize point loader.

        Args:
            data_fetcher: Backend fetcher
            cache_store: Shared cache instance
            processor: Aggregation and coordinate processing
            points_max_age_ms: Max age of cached point sets
            regions_max_age_ms: Max age of cached region lists
            logger: Logger instance
        """
        self.data_fetcher = data_fetcher
        self.cache = cache_store
        self.logger = logger or logging.getLogger(__name__)
        self.processor = processor or DataProcessor(logger=logger)
        self.points_max_age_ms = points_max_age_ms
        self.regions_max_age_ms = regions_max_age_ms

    def _read_points(self, key: str) -> Optional[PointsResult]:
        cached = self.cache.read(key, self.points_max_age_ms)
        if cached is None:
            return None
        try:
            result = PointsResult.from_dict(cached)
        except (TypeError, ValueError) as e:
            self.logger.debug(f"Discarding malformed cached points '{key}': {e}")
            return None
        return result if result.rows else None

    def load_points(
        self,
        variable: str,
        region: str = constants.ALL_REGIONS,
        cancel_token: Optional[CancellationToken] = None
    ) -> Optional[PointsResult]:
        """
        Load representative rows and per-point statistics.

        Args:
            variable: Enumerated variable name (``meteo`` for grid points)
            region: Aquifer system label or the "all" sentinel
            cancel_token: Lets the caller abandon the load

        Returns:
            PointsResult, or None if the load was cancelled

        Raises:
            ValueError: If the variable is unknown
            requests.exceptions.RequestException: If the backend fails
        """
        if variable == constants.METEO_VARIABLE:
            return self.load_meteo_points(cancel_token)

        cfg = VariableConfig.for_variable(variable)
        region = region or constants.ALL_REGIONS
        key = points_cache_key(variable, region)

        cached = self._read_points(key)
        if cached is not None:
            self.logger.info(f"Serving {len(cached.rows)} {variable} points from cache")
            return cached

        try:
            rows = self.data_fetcher.fetch_variable_data(variable, region, cancel_token)
        except LoadCancelled:
            self.logger.info(f"Discarding cancelled {variable} load")
            return None

        result = self.processor.aggregate_points(rows, cfg.code_field)
        self.cache.write(key, result.to_dict())
        return result

    def load_meteo_points(
        self,
        cancel_token: Optional[CancellationToken] = None
    ) -> Optional[PointsResult]:
        """
        Load distinct meteorological grid points.

        Returns:
            PointsResult without statistics, or None if cancelled
        """
        cached = self._read_points(constants.METEO_POINTS_KEY)
        if cached is not None:
            return cached

        try:
            rows = self.data_fetcher.fetch_meteo_rows(cancel_token)
        except LoadCancelled:
            self.logger.info("Discarding cancelled meteo load")
            return None

        result = self.processor.aggregate_grid_points(rows)
        self.cache.write(constants.METEO_POINTS_KEY, result.to_dict())
        return result

    def load_regions(
        self,
        variable: str,
        cancel_token: Optional[CancellationToken] = None
    ) -> Optional[List[str]]:
        """
        Load the sorted aquifer-system labels available for a variable.

        Args:
            variable: Enumerated variable name
            cancel_token: Lets the caller abandon the load

        Returns:
            Sorted unique labels ([] when the variable has no regions),
            or None if the load was cancelled
        """
        if variable == constants.METEO_VARIABLE:
            return []
        cfg = VariableConfig.for_variable(variable)
        if not cfg.supports_regions:
            return []

        key = regions_cache_key(variable)
        cached = self.cache.read(key, self.regions_max_age_ms)
        if isinstance(cached, list) and cached:
            return cached

        try:
            distinct = self.data_fetcher.fetch_distinct_regions(variable, cancel_token)
        except LoadCancelled:
            self.logger.info(f"Discarding cancelled {variable} region load")
            return None

        labels = sorted({str(v).strip() for v in distinct}, key=_collation_key)
        self.cache.write(key, labels)
        return labels

    def load_history(
        self,
        variable: str,
        code: str,
        region: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None
    ) -> Optional[List[Dict[str, Any]]]:
        """
        Load a point's full observation history (not cached).

        Returns:
            Rows ordered by date, or None if cancelled
        """
        try:
            return self.data_fetcher.fetch_history(variable, code, region, cancel_token)
        except LoadCancelled:
            return None

    @staticmethod
    def row_code(row: Dict[str, Any], variable: str) -> Optional[str]:
        if variable == constants.METEO_VARIABLE:
            code = row.get("codigo")
        else:
            code = row.get(VariableConfig.for_variable(variable).code_field)
        return str(code) if code else None

    @staticmethod
    def in_region(row: Dict[str, Any], variable: str, region: Optional[str]) -> bool:
        if variable == constants.METEO_VARIABLE:
            return True
        if not region or region == constants.ALL_REGIONS:
            return True
        if not VariableConfig.for_variable(variable).supports_regions:
            return True
        return row.get(constants.REGION_FIELD) == region

    def point_codes(
        self,
        result: PointsResult,
        variable: str,
        region: Optional[str] = None
    ) -> List[str]:
        """
        List the unique point codes of a result, restricted to a region.

        Returns:
            Codes sorted accent and case insensitively
        """
        codes = set()
        for row in result.rows:
            code = self.row_code(row, variable)
            if code and self.in_region(row, variable, region):
                codes.add(code)
        return sorted(codes, key=_collation_key)

    def locate_point(
        self,
        result: PointsResult,
        variable: str,
        code: str,
        region: Optional[str] = None
    ) -> Optional[Tuple[float, float]]:
        """
        Find the (lat, lon) of a point's representative row.

        Returns:
            (lat, lon), or None if the code is unknown or has no location
        """
        for row in result.rows:
            if self.row_code(row, variable) != code:
                continue
            # Rows without a region label are located regardless of the filter
            if row.get(constants.REGION_FIELD) and not self.in_region(row, variable, region):
                continue
            lat, lon = row.get("lat"), row.get("lon")
            if lat is None or lon is None:
                return None
            return lat, lon
        return None

    def invalidate(self, variable: Optional[str] = None) -> None:
        """
        Drop cached data for one variable, or everything.

        Args:
            variable: Variable whose points and regions to drop; None clears all
        """
        if variable is None:
            self.cache.clear()
            return
        if variable == constants.METEO_VARIABLE:
            self.cache.clear(constants.METEO_POINTS_KEY)
            return
        self.cache.clear(f"{constants.POINTS_NAMESPACE}:{variable}:")
        self.cache.clear(regions_cache_key(variable))
