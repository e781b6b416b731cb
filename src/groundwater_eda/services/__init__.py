"""
Business logic services for the groundwater EDA pipeline.

Services drive backend queries, pagination and cached loading.
"""

from .cancellation import CancellationToken, LoadCancelled
from .paginator import fetch_all
from .data_fetcher import DataFetcher
from .loader import PointLoader, points_cache_key, regions_cache_key

__all__ = [
    "CancellationToken",
    "LoadCancelled",
    "fetch_all",
    "DataFetcher",
    "PointLoader",
    "points_cache_key",
    "regions_cache_key",
]
