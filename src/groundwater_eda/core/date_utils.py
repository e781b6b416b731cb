"""
Date and timezone utilities.

Observation dates arrive in several encodings (ISO timestamps, European
DD/MM/YYYY strings, free-form text). All parsing goes through DateUtils so
ordering is consistent across the pipeline.
"""

import logging
import re
from datetime import datetime
from typing import Any, Optional

import pytz
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta
from pytz.tzinfo import BaseTzInfo

from . import constants

ISO_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")
ISO_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")
EUROPEAN_PREFIX = re.compile(r"^(\d{2})/(\d{2})/(\d{4})")

# Unparseable dates collapse onto this instant, so they sort earliest
EPOCH_SENTINEL = datetime(1970, 1, 1, tzinfo=pytz.UTC)


class DateUtils:
    """Utilities for date and timezone handling."""

    def __init__(
        self,
        timezone_str: str = constants.DEFAULT_TIMEZONE,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize date utilities.

        Args:
            timezone_str: Timezone applied to dates that carry no offset
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.timezone = self.parse_timezone(timezone_str)

    @staticmethod
    def parse_timezone(timezone_str: str) -> BaseTzInfo:
        """
        Parse timezone string to pytz timezone object.

        Args:
            timezone_str: Timezone string (e.g., 'Europe/Lisbon', 'UTC')

        Returns:
            pytz timezone object

        Raises:
            ValueError: If timezone is invalid
        """
        try:
            return pytz.timezone(timezone_str)
        except pytz.exceptions.UnknownTimeZoneError:
            raise ValueError(f"Invalid timezone: {timezone_str}")

    def _localize(self, dt: datetime) -> datetime:
        if dt.tzinfo is None:
            return self.timezone.localize(dt)
        return dt

    def _parse_iso(self, value: str) -> Optional[datetime]:
        try:
            parsed = date_parser.isoparse(value)
        except (ValueError, OverflowError):
            return None
        # A bare calendar date is midnight UTC, a naive date-time is local
        if ISO_DATE_ONLY.match(value):
            return pytz.UTC.localize(parsed)
        return self._localize(parsed)

    def _parse_european(self, match: "re.Match") -> Optional[datetime]:
        day, month, year = (int(part) for part in match.groups())
        try:
            # Out-of-range days and months roll over into the next period
            naive = datetime(year, 1, 1) + relativedelta(months=month - 1, days=day - 1)
        except (ValueError, OverflowError):
            return None
        return self._localize(naive)

    def _parse_generic(self, value: str) -> Optional[datetime]:
        try:
            parsed = date_parser.parse(value)
        except (ValueError, OverflowError, TypeError):
            return None
        return self._localize(parsed)

    def try_parse_observation_date(self, value: Any) -> Optional[datetime]:
        """
        Parse an observation date, returning None when no format applies.

        Order of attempts: ISO ``YYYY-MM-DD...`` prefix, ``DD/MM/YYYY``
        prefix, then generic timestamp parsing.

        Args:
            value: Date value as stored in the backend (usually a string)

        Returns:
            Timezone-aware datetime, or None
        """
        if value is None:
            return None
        if isinstance(value, datetime):
            return self._localize(value)

        text = str(value).strip()
        if not text:
            return None

        if ISO_PREFIX.match(text):
            parsed = self._parse_iso(text)
            if parsed is not None:
                return parsed

        match = EUROPEAN_PREFIX.match(text)
        if match:
            parsed = self._parse_european(match)
            if parsed is not None:
                return parsed

        return self._parse_generic(text)

    def parse_observation_date(self, value: Any) -> datetime:
        """
        Parse an observation date, falling back to the epoch sentinel.

        Args:
            value: Date value as stored in the backend

        Returns:
            Timezone-aware datetime; 1970-01-01T00:00Z if unparseable
        """
        parsed = self.try_parse_observation_date(value)
        if parsed is None:
            self.logger.debug(f"Unparseable date {value!r}, using epoch sentinel")
            return EPOCH_SENTINEL
        return parsed

    def format_display_date(self, value: Any) -> str:
        """
        Format an observation date as DD/MM/YYYY in the local timezone.

        Returns "-" for missing values.
        """
        if value is None or value == "":
            return "-"
        parsed = self.parse_observation_date(value)
        return parsed.astimezone(self.timezone).strftime("%d/%m/%Y")
