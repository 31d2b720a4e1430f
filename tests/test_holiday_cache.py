import datetime as dt
import json
import os
import tempfile
import unittest
from unittest.mock import patch

from holidate.data.holiday_cache import (
    CacheEntry,
    JsonCacheStore,
    MemoryCacheStore,
    StoreWriteError,
)
from holidate.models import HolidayRecord

UTC = dt.timezone.utc


def _records() -> list[HolidayRecord]:
    items = [
        {
            "date": "2025-01-01",
            "localName": "Neujahr",
            "name": "New Year's Day",
            "countryCode": "DE",
            "fixed": True,
            "global": True,
            "counties": None,
            "launchYear": 1967,
            "types": ["Public"],
        },
        {
            "date": "2025-01-06",
            "localName": "Heilige Drei Könige",
            "name": "Epiphany",
            "countryCode": "DE",
            "fixed": True,
            "global": False,
            "counties": ["DE-BW", "DE-BY", "DE-ST"],
            "launchYear": None,
            "types": ["Public", "Observance"],
        },
    ]
    return [HolidayRecord.from_api(i) for i in items]


class JsonCacheStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.cache_dir = self._tmp.name

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_round_trip_across_instances(self) -> None:
        fetched_at = dt.datetime(2025, 3, 4, 10, 30, tzinfo=UTC)
        JsonCacheStore(self.cache_dir).put("de", 2025, _records(), fetched_at)

        entry = JsonCacheStore(self.cache_dir).get("DE", 2025)

        self.assertIsNotNone(entry)
        assert entry is not None
        self.assertEqual(entry.country_code, "DE")
        self.assertEqual(entry.year, 2025)
        self.assertEqual(entry.fetched_at, fetched_at)
        self.assertEqual(list(entry.records), _records())

    def test_get_missing_key_returns_none(self) -> None:
        store = JsonCacheStore(self.cache_dir)
        self.assertIsNone(store.get("DE", 2025))
        self.assertEqual(os.listdir(self.cache_dir), [])

    def test_put_replaces_entry_and_is_visible_in_process(self) -> None:
        store = JsonCacheStore(self.cache_dir)
        first = dt.datetime(2025, 3, 4, tzinfo=UTC)
        second = dt.datetime(2025, 3, 5, tzinfo=UTC)
        store.put("DE", 2025, _records(), first)
        store.put("DE", 2025, _records()[:1], second)

        entry = store.get("DE", 2025)
        assert entry is not None
        self.assertEqual(entry.fetched_at, second)
        self.assertEqual(len(entry.records), 1)

        reloaded = JsonCacheStore(self.cache_dir).get("DE", 2025)
        assert reloaded is not None
        self.assertEqual(reloaded.fetched_at, second)
        self.assertEqual(len(reloaded.records), 1)

    def test_years_are_stored_independently(self) -> None:
        store = JsonCacheStore(self.cache_dir)
        store.put("DE", 2025, _records(), dt.datetime(2025, 3, 4, tzinfo=UTC))
        self.assertIsNone(JsonCacheStore(self.cache_dir).get("DE", 2026))
        self.assertIsNone(JsonCacheStore(self.cache_dir).get("AT", 2025))

    def test_corrupt_file_is_treated_as_empty(self) -> None:
        path = os.path.join(self.cache_dir, "holidays_de_2025.json")
        with open(path, "w", encoding="utf-8") as fp:
            fp.write("{not json")

        with self.assertLogs("holidate.data.holiday_cache", level="WARNING"):
            self.assertIsNone(JsonCacheStore(self.cache_dir).get("DE", 2025))

    def test_deeply_nested_file_is_treated_as_empty(self) -> None:
        path = os.path.join(self.cache_dir, "holidays_de_2025.json")
        with open(path, "w", encoding="utf-8") as fp:
            fp.write("[" * 200000)

        with self.assertLogs("holidate.data.holiday_cache", level="WARNING"):
            self.assertIsNone(JsonCacheStore(self.cache_dir).get("DE", 2025))

    def test_entry_stored_under_wrong_key_is_treated_as_empty(self) -> None:
        JsonCacheStore(self.cache_dir).put(
            "AT", 2024, _records(), dt.datetime(2025, 3, 4, tzinfo=UTC)
        )
        os.replace(
            os.path.join(self.cache_dir, "holidays_at_2024.json"),
            os.path.join(self.cache_dir, "holidays_de_2025.json"),
        )

        with self.assertLogs("holidate.data.holiday_cache", level="WARNING"):
            self.assertIsNone(JsonCacheStore(self.cache_dir).get("DE", 2025))

    def test_naive_fetched_at_is_stored_as_utc(self) -> None:
        store = JsonCacheStore(self.cache_dir)
        written = store.put("DE", 2025, _records(), dt.datetime(2025, 3, 4, 10, 0))
        reloaded = JsonCacheStore(self.cache_dir).get("DE", 2025)

        expected = dt.datetime(2025, 3, 4, 10, 0, tzinfo=UTC)
        self.assertEqual(written.fetched_at, expected)
        assert reloaded is not None
        self.assertEqual(reloaded.fetched_at, expected)
        self.assertEqual(reloaded, written)

    def test_wrong_shape_is_treated_as_empty(self) -> None:
        path = os.path.join(self.cache_dir, "holidays_de_2025.json")
        with open(path, "w", encoding="utf-8") as fp:
            json.dump({"country_code": "DE", "year": 2025, "records": "x"}, fp)

        with self.assertLogs("holidate.data.holiday_cache", level="WARNING"):
            self.assertIsNone(JsonCacheStore(self.cache_dir).get("DE", 2025))

    def test_write_failure_keeps_in_memory_entry(self) -> None:
        store = JsonCacheStore(self.cache_dir)
        fetched_at = dt.datetime(2025, 3, 4, tzinfo=UTC)
        with patch("holidate.data.holiday_cache.save_json", side_effect=OSError("disk full")):
            with self.assertRaises(StoreWriteError):
                store.put("DE", 2025, _records(), fetched_at)

        entry = store.get("DE", 2025)
        assert entry is not None
        self.assertEqual(entry.fetched_at, fetched_at)
        self.assertIsNone(JsonCacheStore(self.cache_dir).get("DE", 2025))

    def test_no_temporary_files_left_behind(self) -> None:
        JsonCacheStore(self.cache_dir).put(
            "DE", 2025, _records(), dt.datetime(2025, 3, 4, tzinfo=UTC)
        )
        self.assertEqual(os.listdir(self.cache_dir), ["holidays_de_2025.json"])


class MemoryCacheStoreTests(unittest.TestCase):
    def test_put_then_get(self) -> None:
        store = MemoryCacheStore()
        fetched_at = dt.datetime(2025, 3, 4, tzinfo=UTC)
        entry = store.put("de", 2025, _records(), fetched_at)

        self.assertIsInstance(entry, CacheEntry)
        self.assertIs(store.get("DE", 2025), entry)
        self.assertIsNone(store.get("DE", 2024))


if __name__ == "__main__":
    unittest.main()
