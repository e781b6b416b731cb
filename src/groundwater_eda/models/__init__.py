"""
Data models for the groundwater EDA pipeline.

Contains DTOs for variables, per-point statistics and cache entries.
"""

from .variable import VariableConfig
from .point import PointStats, PointsResult
from .cache import CacheEntry

__all__ = [
    "VariableConfig",
    "PointStats",
    "PointsResult",
    "CacheEntry",
]
