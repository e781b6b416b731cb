"""
Two-tier cache store.

A process-memory tier fronts a persistent key/value tier. Entries are
stamped on write and checked against the caller's max age on every read.
Persistent-tier failures never surface: a failed write leaves the memory
tier correct for the session, and an unreadable entry is a miss.
"""

import copy
import json
import logging
import time
from typing import Any, Callable, Dict, Optional

from ..core import constants
from ..models import CacheEntry
from .storage import KeyValueStorage, StorageError


def _now_ms() -> int:
    return int(time.time() * 1000)


class CacheStore:
    """Memory + persistent cache keyed by query shape."""

    def __init__(
        self,
        persistent: Optional[KeyValueStorage] = None,
        clock: Optional[Callable[[], int]] = None,
        prefix: str = constants.CACHE_STORAGE_PREFIX,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize cache store.

        Args:
            persistent: Persistent storage adapter; None keeps the cache in memory only
            clock: Returns the current time in epoch milliseconds
            prefix: Prefix applied to every persistent key
            logger: Logger instance
        """
        self.persistent = persistent
        self.clock = clock or _now_ms
        self.prefix = prefix
        self.logger = logger or logging.getLogger(__name__)
        self._memory: Dict[str, CacheEntry] = {}

    def read(self, key: str, max_age_ms: float) -> Optional[Any]:
        """
        Read a payload no older than max_age_ms.

        Args:
            key: Cache key
            max_age_ms: Maximum accepted age in milliseconds (inclusive)

        Returns:
            Cached payload, or None on miss, expiry or corruption
        """
        now = self.clock()
        entry = self._memory.get(key)
        if entry is not None and entry.is_fresh(now, max_age_ms):
            return copy.deepcopy(entry.payload)

        entry = self._read_persistent(key)
        if entry is None or not entry.is_fresh(now, max_age_ms):
            return None

        self._memory[key] = entry
        return copy.deepcopy(entry.payload)

    def _read_persistent(self, key: str) -> Optional[CacheEntry]:
        if self.persistent is None:
            return None
        try:
            raw = self.persistent.get_item(self.prefix + key)
        except (StorageError, OSError) as e:
            self.logger.debug(f"Persistent cache unavailable for '{key}': {e}")
            return None
        if not raw:
            return None
        try:
            return CacheEntry.from_dict(json.loads(raw))
        except ValueError as e:
            self.logger.debug(f"Ignoring corrupt cache entry '{key}': {e}")
            return None

    def write(self, key: str, payload: Any) -> None:
        """
        Store a payload in both tiers, stamped with the current time.

        Args:
            key: Cache key
            payload: JSON-serializable value
        """
        entry = CacheEntry(timestamp=self.clock(), payload=copy.deepcopy(payload))
        self._memory[key] = entry

        if self.persistent is None:
            return
        try:
            self.persistent.set_item(self.prefix + key, json.dumps(entry.to_dict()))
        except (StorageError, OSError, TypeError, ValueError) as e:
            self.logger.warning(f"Persistent cache write failed for '{key}': {e}")

    def clear(self, prefix: Optional[str] = None) -> None:
        """
        Remove cached entries from both tiers.

        Args:
            prefix: Only remove keys starting with this prefix; None removes all
        """
        if not prefix:
            self._memory.clear()
        else:
            for key in [k for k in self._memory if k.startswith(prefix)]:
                del self._memory[key]

        if self.persistent is None:
            return
        scope = self.prefix + (prefix or "")
        try:
            for key in self.persistent.keys():
                if key.startswith(scope):
                    self.persistent.remove_item(key)
        except (StorageError, OSError) as e:
            self.logger.warning(f"Persistent cache clear failed for '{scope}': {e}")
