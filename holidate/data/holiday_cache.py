from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Protocol, Tuple

from ..models import HolidayRecord
from .cache import load_json, save_json

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, int]


class StoreError(RuntimeError):
    """Base error for the holiday cache store."""

    category = "store"


class StoreUnreadableError(StoreError):
    """A persisted entry could not be read or decoded."""

    category = "unreadable"


class StoreWriteError(StoreError):
    """A persisted entry could not be written."""

    category = "write_failed"


@dataclass(frozen=True)
class CacheEntry:
    country_code: str
    year: int
    records: tuple[HolidayRecord, ...]
    fetched_at: dt.datetime

    @property
    def key(self) -> CacheKey:
        return (self.country_code, self.year)

    def to_dict(self) -> dict[str, Any]:
        return {
            "country_code": self.country_code,
            "year": self.year,
            "fetched_at": self.fetched_at.isoformat(),
            "records": [r.to_dict() for r in self.records],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "CacheEntry":
        if not isinstance(data, dict):
            raise ValueError("cache entry must be an object")
        try:
            country_code = str(data["country_code"])
            year = int(data["year"])
            fetched_at = dt.datetime.fromisoformat(data["fetched_at"])
            raw_records = data["records"]
        except (KeyError, TypeError) as exc:
            raise ValueError(f"cache entry is missing fields: {exc}") from exc
        if not isinstance(raw_records, list):
            raise ValueError("cache entry records must be a list")
        records = tuple(HolidayRecord.from_api(item) for item in raw_records)
        return cls(
            country_code=country_code, year=year, records=records, fetched_at=as_utc(fetched_at)
        )


def normalize_country(country: str) -> str:
    return country.strip().upper()


def as_utc(moment: dt.datetime) -> dt.datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=dt.timezone.utc)
    return moment


class CacheStore(Protocol):
    def get(self, country: str, year: int) -> Optional[CacheEntry]: ...

    def put(
        self,
        country: str,
        year: int,
        records: Iterable[HolidayRecord],
        fetched_at: dt.datetime,
    ) -> CacheEntry: ...


class MemoryCacheStore:
    """Process-local store; nothing survives the process."""

    def __init__(self) -> None:
        self._entries: Dict[CacheKey, CacheEntry] = {}

    def get(self, country: str, year: int) -> Optional[CacheEntry]:
        return self._entries.get((normalize_country(country), year))

    def put(
        self,
        country: str,
        year: int,
        records: Iterable[HolidayRecord],
        fetched_at: dt.datetime,
    ) -> CacheEntry:
        entry = CacheEntry(
            country_code=normalize_country(country),
            year=year,
            records=tuple(records),
            fetched_at=as_utc(fetched_at),
        )
        self._entries[entry.key] = entry
        return entry


class JsonCacheStore(MemoryCacheStore):
    """Write-through store keeping one JSON document per (country, year).

    Entries are read lazily on first access. An unreadable document is
    treated as absent. A failed write still updates the in-memory entry
    before raising ``StoreWriteError``.
    """

    def __init__(self, cache_dir: str) -> None:
        super().__init__()
        self.cache_dir = cache_dir
        self._loaded: set[CacheKey] = set()

    @staticmethod
    def _doc_key(country: str, year: int) -> str:
        return f"holidays_{country.lower()}_{year}"

    def _load(self, key: CacheKey) -> Optional[CacheEntry]:
        country, year = key
        try:
            data = load_json(self.cache_dir, self._doc_key(country, year))
            if data is None:
                return None
            entry = CacheEntry.from_dict(data)
            if entry.key != key:
                raise ValueError(f"cache entry key {entry.key} does not match {key}")
            return entry
        except (OSError, ValueError, RecursionError) as exc:
            err = StoreUnreadableError(f"Cached holidays for {country}/{year} unreadable: {exc}")
            logger.warning("%s; ignoring cached copy", err)
            return None

    def get(self, country: str, year: int) -> Optional[CacheEntry]:
        key = (normalize_country(country), year)
        if key not in self._loaded:
            self._loaded.add(key)
            entry = self._load(key)
            if entry is not None:
                self._entries[key] = entry
        return self._entries.get(key)

    def put(
        self,
        country: str,
        year: int,
        records: Iterable[HolidayRecord],
        fetched_at: dt.datetime,
    ) -> CacheEntry:
        entry = super().put(country, year, records, fetched_at)
        self._loaded.add(entry.key)
        try:
            save_json(self.cache_dir, self._doc_key(*entry.key), entry.to_dict())
        except (OSError, TypeError, ValueError) as exc:
            raise StoreWriteError(
                f"Failed to persist holidays for {entry.country_code}/{entry.year}: {exc}"
            ) from exc
        logger.debug("Persisted %s holidays for %s/%s", len(entry.records), *entry.key)
        return entry


__all__ = [
    "CacheKey",
    "CacheEntry",
    "CacheStore",
    "MemoryCacheStore",
    "JsonCacheStore",
    "StoreError",
    "StoreUnreadableError",
    "StoreWriteError",
    "normalize_country",
    "as_utc",
]
