"""
Persistent key/value storage adapters for the cache.

Adapters expose a small string-keyed interface (get/set/remove/keys) with a
capacity ceiling. Writes beyond the ceiling fail with StorageQuotaExceeded.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Union


class StorageError(Exception):
    """Base error raised by storage adapters."""


class StorageQuotaExceeded(StorageError):
    """Write would exceed the storage capacity."""


class StorageUnavailable(StorageError):
    """Storage is disabled or cannot be reached."""


class KeyValueStorage:
    """Interface of a persistent string key/value store."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError


def _size_of(items: Dict[str, str]) -> int:
    return sum(len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in items.items())


class MemoryStorage(KeyValueStorage):
    """Dictionary-backed storage, mainly for tests and ephemeral sessions."""

    def __init__(self, max_bytes: Optional[int] = None):
        """
        Initialize memory storage.

        Args:
            max_bytes: Optional capacity ceiling (keys + values, UTF-8)
        """
        self.max_bytes = max_bytes
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.max_bytes is not None:
            candidate = dict(self._items)
            candidate[key] = value
            if _size_of(candidate) > self.max_bytes:
                raise StorageQuotaExceeded(
                    f"Writing '{key}' exceeds storage capacity of {self.max_bytes} bytes"
                )
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._items.keys())


class JsonFileStorage(KeyValueStorage):
    """
    Storage persisted as a single JSON object file.

    The file is loaded lazily and rewritten atomically on every change.
    A corrupt or unreadable file is treated as empty.
    """

    def __init__(
        self,
        path: Union[str, Path],
        max_bytes: Optional[int] = None,
        enabled: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize file storage.

        Args:
            path: Location of the JSON file
            max_bytes: Capacity ceiling (keys + values, UTF-8); None for unlimited
            enabled: When False every operation raises StorageUnavailable
            logger: Logger instance
        """
        self.path = Path(path)
        self.max_bytes = max_bytes
        self.enabled = enabled
        self.logger = logger or logging.getLogger(__name__)
        self._items: Optional[Dict[str, str]] = None

    def _check_enabled(self) -> None:
        if not self.enabled:
            raise StorageUnavailable(f"Storage at {self.path} is disabled")

    def _load(self) -> Dict[str, str]:
        if self._items is not None:
            return self._items

        items: Dict[str, str] = {}
        if self.path.exists():
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    raw = json.load(f)
                if isinstance(raw, dict):
                    items = {str(k): v for k, v in raw.items() if isinstance(v, str)}
                else:
                    self.logger.warning(f"Ignoring malformed cache file {self.path}")
            except (OSError, ValueError) as e:
                self.logger.warning(f"Could not read cache file {self.path}: {e}")

        self._items = items
        return items

    def _flush(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=self.path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise

    def get_item(self, key: str) -> Optional[str]:
        self._check_enabled()
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        self._check_enabled()
        candidate = dict(self._load())
        candidate[key] = value
        if self.max_bytes is not None and _size_of(candidate) > self.max_bytes:
            raise StorageQuotaExceeded(
                f"Writing '{key}' exceeds storage capacity of {self.max_bytes} bytes"
            )
        self._flush(candidate)
        self._items = candidate

    def remove_item(self, key: str) -> None:
        self._check_enabled()
        items = self._load()
        if key not in items:
            return
        candidate = dict(items)
        del candidate[key]
        self._flush(candidate)
        self._items = candidate

    def keys(self) -> List[str]:
        self._check_enabled()
        return list(self._load().keys())
