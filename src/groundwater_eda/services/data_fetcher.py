"""
Data fetching service for monitoring observations.

Builds the backend queries for each variable and drains them page by page.
"""

import logging
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ..core import constants
from ..models import VariableConfig
from .cancellation import CancellationToken
from .paginator import fetch_all

if TYPE_CHECKING:
    from ..api import RestAPI
    from ..api.query import TableQuery


class DataFetcher:
    """Fetch observation rows from the tabular backend."""

    def __init__(
        self,
        api_client: "RestAPI",
        page_size: int = constants.DEFAULT_PAGE_SIZE,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize data fetcher.

        Args:
            api_client: API client instance
            page_size: Rows requested per page
            logger: Logger instance
        """
        self.api_client = api_client
        self.page_size = page_size
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def _applies_region(cfg: VariableConfig, region: Optional[str]) -> bool:
        return bool(region) and region != constants.ALL_REGIONS and cfg.supports_regions

    def _with_region(
        self,
        query: "TableQuery",
        cfg: VariableConfig,
        region: Optional[str]
    ) -> "TableQuery":
        if self._applies_region(cfg, region):
            return query.eq(constants.REGION_FIELD, region)
        return query

    def fetch_variable_data(
        self,
        variable: str,
        region: str = constants.ALL_REGIONS,
        cancel_token: Optional[CancellationToken] = None
    ) -> List[Dict[str, Any]]:
        """
        Fetch every observation of a variable, optionally within one region.

        Args:
            variable: Enumerated variable name
            region: Aquifer system label or the "all" sentinel
            cancel_token: Checked after each page

        Returns:
            Observation rows with id, date, coordinates and code columns
        """
        cfg = VariableConfig.for_variable(variable)
        self.logger.info(f"Fetching {variable} observations (region: {region})")

        def build() -> "TableQuery":
            query = self.api_client.table(cfg.table, cfg.select_columns)
            return self._with_region(query, cfg, region)

        rows = fetch_all(build, self.page_size, cancel_token)
        self.logger.info(f"Retrieved {len(rows)} {variable} rows")
        return rows

    def fetch_distinct_regions(
        self,
        variable: str,
        cancel_token: Optional[CancellationToken] = None
    ) -> List[str]:
        """
        Fetch the distinct aquifer-system labels present for a variable.

        Args:
            variable: Enumerated variable name
            cancel_token: Checked after each page

        Returns:
            Unique non-empty labels in first-seen order
        """
        cfg = VariableConfig.for_variable(variable)
        if not cfg.supports_regions:
            return []

        def build() -> "TableQuery":
            return (
                self.api_client.table(cfg.table, constants.REGION_FIELD)
                .not_null(constants.REGION_FIELD)
            )

        rows = fetch_all(build, self.page_size, cancel_token)
        seen: Dict[str, None] = {}
        for row in rows:
            label = row.get(constants.REGION_FIELD)
            if label:
                seen.setdefault(label, None)
        return list(seen.keys())

    def fetch_history(
        self,
        variable: str,
        code: str,
        region: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None
    ) -> List[Dict[str, Any]]:
        """
        Fetch the full observation history of one monitoring point.

        Args:
            variable: Enumerated variable name
            code: Monitoring-point code
            region: Optional aquifer system restriction
            cancel_token: Checked after each page

        Returns:
            All columns of the point's rows, oldest first
        """
        cfg = VariableConfig.for_variable(variable)
        self.logger.info(f"Fetching {variable} history for point {code}")

        def build() -> "TableQuery":
            query = (
                self.api_client.table(cfg.table)
                .eq(cfg.code_field, code)
                .order(constants.DATE_FIELD, ascending=True)
            )
            return self._with_region(query, cfg, region)

        return fetch_all(build, self.page_size, cancel_token)

    def fetch_meteo_rows(
        self,
        cancel_token: Optional[CancellationToken] = None
    ) -> List[Dict[str, Any]]:
        """
        Fetch meteorological grid rows that carry both coordinates.

        Args:
            cancel_token: Checked after each page

        Returns:
            Rows with lat, long and Time
        """
        self.logger.info("Fetching meteorological grid points")

        def build() -> "TableQuery":
            return (
                self.api_client.table(
                    constants.METEO_TABLE,
                    f'{constants.METEO_LAT_FIELD},{constants.METEO_LON_FIELD},'
                    f'"{constants.METEO_TIME_FIELD}"'
                )
                .not_null(constants.METEO_LAT_FIELD)
                .not_null(constants.METEO_LON_FIELD)
            )

        return fetch_all(build, self.page_size, cancel_token)
