"""
Tests for the two-tier cache.
"""

import json
from unittest.mock import Mock

import pytest  # type: ignore

from src.groundwater_eda.cache import (
    CacheStore,
    JsonFileStorage,
    MemoryStorage,
    StorageQuotaExceeded,
    StorageUnavailable,
)


class TestMemoryStorage:
    """Test cases for MemoryStorage."""

    def test_set_get_remove(self):
        storage = MemoryStorage()
        storage.set_item("a", "1")
        assert storage.get_item("a") == "1"
        storage.remove_item("a")
        assert storage.get_item("a") is None
        # Removing a missing key is a no-op
        storage.remove_item("a")

    def test_quota_rejects_oversized_write(self):
        storage = MemoryStorage(max_bytes=10)
        storage.set_item("k", "12345")

        with pytest.raises(StorageQuotaExceeded):
            storage.set_item("k2", "1234567890")

        assert storage.keys() == ["k"]


class TestJsonFileStorage:
    """Test cases for JsonFileStorage."""

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "cache" / "store.json"
        JsonFileStorage(path).set_item("key", "value")

        assert path.exists()
        assert JsonFileStorage(path).get_item("key") == "value"

    def test_remove_item_rewrites_file(self, tmp_path):
        path = tmp_path / "store.json"
        storage = JsonFileStorage(path)
        storage.set_item("a", "1")
        storage.set_item("b", "2")
        storage.remove_item("a")

        assert json.loads(path.read_text(encoding="utf-8")) == {"b": "2"}

    def test_corrupt_file_loads_as_empty(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")

        storage = JsonFileStorage(path)

        assert storage.keys() == []
        storage.set_item("a", "1")
        assert JsonFileStorage(path).get_item("a") == "1"

    def test_disabled_storage_raises(self, tmp_path):
        storage = JsonFileStorage(tmp_path / "store.json", enabled=False)

        with pytest.raises(StorageUnavailable):
            storage.get_item("a")
        with pytest.raises(StorageUnavailable):
            storage.set_item("a", "1")

    def test_quota_leaves_file_untouched(self, tmp_path):
        path = tmp_path / "store.json"
        storage = JsonFileStorage(path, max_bytes=8)
        storage.set_item("a", "1")

        with pytest.raises(StorageQuotaExceeded):
            storage.set_item("b", "x" * 100)

        assert JsonFileStorage(path).keys() == ["a"]


class TestCacheStore:
    """Test cases for CacheStore."""

    @pytest.fixture
    def storage(self):
        return MemoryStorage()

    @pytest.fixture
    def store(self, storage, clock):
        return CacheStore(persistent=storage, clock=clock)

    def test_round_trip_with_unbounded_age(self, store):
        payload = {"rows": [{"codigo": "A"}], "stats": {}}
        store.write("k", payload)

        assert store.read("k", float("inf")) == payload

    def test_payload_is_copied_on_write(self, store):
        payload = {"rows": []}
        store.write("k", payload)
        payload["rows"].append("mutated")

        assert store.read("k", float("inf")) == {"rows": []}

    def test_mutating_a_read_result_does_not_change_the_cache(self, store, storage, clock):
        store.write("k", ["a"])

        store.read("k", 10).append("mutated")

        assert store.read("k", 10) == ["a"]
        promoted = CacheStore(persistent=storage, clock=clock)
        promoted.read("k", 10).append("mutated")
        assert promoted.read("k", 10) == ["a"]

    def test_zero_max_age_only_hits_at_same_instant(self, store, clock):
        store.write("k", [1])

        assert store.read("k", 0) == [1]
        clock.advance(1)
        assert store.read("k", 0) is None

    def test_entry_expires_after_max_age(self, store, clock):
        store.write("k", "v")

        clock.advance(1000)
        assert store.read("k", 1000) == "v"
        clock.advance(1)
        assert store.read("k", 1000) is None

    def test_missing_key_is_a_miss(self, store):
        assert store.read("absent", float("inf")) is None

    def test_persistent_entry_survives_new_store(self, storage, clock):
        CacheStore(persistent=storage, clock=clock).write("k", {"a": 1})

        fresh = CacheStore(persistent=storage, clock=clock)

        assert fresh.read("k", float("inf")) == {"a": 1}

    def test_persistent_keys_are_prefixed(self, store, storage):
        store.write("var_points_v1:nitrato:todos", [])

        assert storage.keys() == ["eda_cache:var_points_v1:nitrato:todos"]
        entry = json.loads(storage.get_item("eda_cache:var_points_v1:nitrato:todos"))
        assert set(entry) == {"timestamp", "payload"}

    def test_persistent_hit_is_promoted_to_memory(self, storage, clock):
        CacheStore(persistent=storage, clock=clock).write("k", "v")
        fresh = CacheStore(persistent=storage, clock=clock)
        fresh.read("k", float("inf"))

        storage.remove_item("eda_cache:k")

        assert fresh.read("k", float("inf")) == "v"

    @pytest.mark.parametrize("raw", [
        "{not json",
        json.dumps({"payload": 1}),
        json.dumps({"timestamp": "yesterday", "payload": 1}),
        json.dumps({"timestamp": True, "payload": 1}),
        json.dumps([1, 2]),
    ])
    def test_corrupt_persistent_entry_is_a_miss(self, storage, clock, raw):
        storage.set_item("eda_cache:k", raw)

        assert CacheStore(persistent=storage, clock=clock).read("k", float("inf")) is None

    def test_persistent_write_failure_keeps_memory(self, clock):
        storage = MemoryStorage(max_bytes=10)
        store = CacheStore(persistent=storage, clock=clock)

        store.write("k", "x" * 100)

        assert store.read("k", float("inf")) == "x" * 100
        assert storage.keys() == []

    def test_unavailable_persistent_tier_is_ignored(self, clock):
        storage = Mock()
        storage.get_item.side_effect = StorageUnavailable("off")
        storage.set_item.side_effect = StorageUnavailable("off")
        storage.keys.side_effect = StorageUnavailable("off")
        store = CacheStore(persistent=storage, clock=clock)

        store.write("k", 1)
        assert store.read("k", float("inf")) == 1
        assert CacheStore(persistent=storage, clock=clock).read("k", float("inf")) is None
        store.clear()

    def test_memory_only_store(self, clock):
        store = CacheStore(clock=clock)
        store.write("k", 1)

        assert store.read("k", float("inf")) == 1

    def test_clear_prefix(self, store, storage):
        for key in ("ns:a", "ns:b", "other:c"):
            store.write(key, key)

        store.clear("ns:")

        assert store.read("ns:a", float("inf")) is None
        assert store.read("ns:b", float("inf")) is None
        assert store.read("other:c", float("inf")) == "other:c"
        assert storage.keys() == ["eda_cache:other:c"]

    def test_clear_all_leaves_foreign_keys(self, store, storage):
        storage.set_item("unrelated", "keep")
        store.write("a", 1)
        store.write("b", 2)

        store.clear()

        assert store.read("a", float("inf")) is None
        assert storage.keys() == ["unrelated"]
