"""
Main entry point for the groundwater EDA pipeline.

Wires configuration, backend client, cache and loader together and exposes
them through a small command-line interface.
"""

import json
import sys
from typing import Any, Dict, List, Optional

import requests  # type: ignore

from .core import Config, DateUtils, LoggerContext, constants, setup_logger
from .api import RestAPI
from .cache import CacheStore, JsonFileStorage
from .processing import CoordinateNormalizer, DataProcessor
from .services import DataFetcher, PointLoader


class GroundwaterEDAApp:
    """Application facade over the fetch, aggregate and cache pipeline."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize application.

        Args:
            config_file: Path to configuration file
        """
        self.config = Config(config_file)

        self.logger = setup_logger(
            log_file=self.config.log_file,
            log_level=self.config.log_level,
            console_level=self.config.log_console_level,
            library_level=self.config.log_library_level
        )
        self.logger.debug(f"Configuration: {self.config}")

        self.api_client: Optional[RestAPI] = None
        self.cache: Optional[CacheStore] = None
        self.date_utils: Optional[DateUtils] = None
        self.loader: Optional[PointLoader] = None

    def initialize_components(self) -> None:
        """Initialize all application components."""
        if self.loader is not None:
            return
        self.logger.debug("Initializing components...")

        self.api_client = RestAPI(
            base_url=self.config.api_base_url,
            anon_key=self.config.api_anon_key,
            schema=self.config.api_schema,
            timeout=self.config.api_timeout,
            max_retries=self.config.api_max_retries,
            verify_ssl=self.config.api_verify_ssl,
            logger=self.logger
        )

        storage = JsonFileStorage(
            self.config.cache_file,
            max_bytes=self.config.cache_max_bytes,
            enabled=self.config.cache_enabled,
            logger=self.logger
        )
        self.cache = CacheStore(persistent=storage, logger=self.logger)

        self.date_utils = DateUtils(self.config.timezone, logger=self.logger)
        processor = DataProcessor(
            normalizer=CoordinateNormalizer(self.config.source_crs, logger=self.logger),
            date_utils=self.date_utils,
            logger=self.logger
        )

        self.loader = PointLoader(
            data_fetcher=DataFetcher(
                self.api_client,
                page_size=self.config.page_size,
                logger=self.logger
            ),
            cache_store=self.cache,
            processor=processor,
            points_max_age_ms=self.config.points_max_age_ms,
            regions_max_age_ms=self.config.regions_max_age_ms,
            logger=self.logger
        )

    def points(
        self,
        variable: str,
        region: str = constants.ALL_REGIONS,
        code: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Summarize the monitoring points of a variable.

        Args:
            variable: Enumerated variable name
            region: Aquifer system label or the "all" sentinel
            code: Restrict the summary to one point

        Returns:
            One entry per point with location, date span and sample count
        """
        self.initialize_components()
        with LoggerContext(self.logger, f"{variable} point load") as ctx:
            result = self.loader.load_points(variable, region)
            ctx.record(points=len(result.rows), unparsed_dates=result.unparsed_dates)

        summary = []
        for row in result.rows:
            row_code = self.loader.row_code(row, variable)
            if code and row_code != code:
                continue
            if not self.loader.in_region(row, variable, region):
                continue
            st = result.stats.get(row_code)
            summary.append({
                "code": row_code,
                "lat": row.get("lat"),
                "lon": row.get("lon"),
                "first": self.date_utils.format_display_date(st.min) if st else "-",
                "last": self.date_utils.format_display_date(st.max) if st else "-",
                "count": st.count if st else 0,
            })
        if result.unparsed_dates:
            self.logger.warning(
                f"{result.unparsed_dates} observation dates could not be parsed"
            )
        return summary

    def regions(self, variable: str) -> List[str]:
        """List the aquifer systems available for a variable."""
        self.initialize_components()
        return self.loader.load_regions(variable) or []

    def history(self, variable: str, code: str, region: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return a point's observation history."""
        self.initialize_components()
        with LoggerContext(self.logger, f"{variable} history load for {code}") as ctx:
            rows = self.loader.load_history(variable, code, region) or []
            ctx.record(rows=len(rows))
        return rows

    def schema(self) -> List[Dict[str, Any]]:
        """Return the backend column overview."""
        self.initialize_components()
        return self.api_client.get_table_columns()

    def clear_cache(self, variable: Optional[str] = None) -> None:
        """Drop cached data for a variable, or everything."""
        self.initialize_components()
        self.loader.invalidate(variable)
        self.logger.info(f"Cleared cache ({variable or 'all variables'})")

    def close(self) -> None:
        """Release the HTTP session."""
        if self.api_client:
            self.api_client.close()


def build_parser():
    """Build the command-line parser."""
    import argparse

    variables = sorted(constants.VARIABLE_TABLES) + [constants.METEO_VARIABLE]

    parser = argparse.ArgumentParser(
        description="Groundwater EDA data pipeline"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    points = subparsers.add_parser("points", help="Summarize monitoring points")
    points.add_argument("variable", choices=variables)
    points.add_argument("--region", default=constants.ALL_REGIONS, help="Aquifer system filter")
    points.add_argument("--code", default=None, help="Restrict to one point code")

    regions = subparsers.add_parser("regions", help="List aquifer systems of a variable")
    regions.add_argument("variable", choices=sorted(constants.VARIABLE_TABLES))

    history = subparsers.add_parser("history", help="Observation history of one point")
    history.add_argument("variable", choices=sorted(constants.VARIABLE_TABLES))
    history.add_argument("code")
    history.add_argument("--region", default=None, help="Aquifer system filter")

    subparsers.add_parser("schema", help="List backend tables and columns")

    clear = subparsers.add_parser("clear-cache", help="Drop cached data")
    clear.add_argument("variable", nargs="?", default=None, choices=variables)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        app = GroundwaterEDAApp(config_file=args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Configuration error: {e}")
        return 1

    try:
        if args.command == "points":
            output: Any = app.points(args.variable, args.region, args.code)
        elif args.command == "regions":
            output = app.regions(args.variable)
        elif args.command == "history":
            output = app.history(args.variable, args.code, args.region)
        elif args.command == "schema":
            output = app.schema()
        else:
            app.clear_cache(args.variable)
            return 0
    except requests.exceptions.RequestException as e:
        print(f"Failed to load data: {e}")
        return 1
    finally:
        app.close()

    print(json.dumps(output, indent=2, ensure_ascii=False, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
