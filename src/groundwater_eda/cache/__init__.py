"""
Caching layer for the groundwater EDA pipeline.
"""

from .storage import (
    KeyValueStorage,
    MemoryStorage,
    JsonFileStorage,
    StorageError,
    StorageQuotaExceeded,
    StorageUnavailable,
)
from .store import CacheStore

__all__ = [
    "KeyValueStorage",
    "MemoryStorage",
    "JsonFileStorage",
    "StorageError",
    "StorageQuotaExceeded",
    "StorageUnavailable",
    "CacheStore",
]
