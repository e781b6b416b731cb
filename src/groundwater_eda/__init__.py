"""
Groundwater EDA data pipeline

This package fetches groundwater monitoring observations (depth, nitrate,
conductivity, flow, meteorological grid) from a paginated REST backend,
aggregates them per monitoring point and caches the results.
"""

__version__ = "0.1.0"
__description__ = "Data fetch, aggregation and caching for groundwater exploratory analysis"


def __getattr__(name):
    """Lazy import to avoid importing dependencies when not needed."""
    if name == "GroundwaterEDAApp":
        from .main import GroundwaterEDAApp
        return GroundwaterEDAApp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "GroundwaterEDAApp",
]
