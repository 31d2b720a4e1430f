from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from .data.holiday_cache import CacheStore, StoreWriteError, normalize_country
from .data.nager_client import SourceError
from .models import HolidayRecord
from .utils.freshness import is_fresh, utc_now

logger = logging.getLogger(__name__)

DEFAULT_MAX_YEARS = 3


class HolidaySource(Protocol):
    def fetch(self, country: str, year: int) -> list[HolidayRecord]: ...


class NoHolidayDataError(RuntimeError):
    """No year in the requested window produced usable holidays."""

    def __init__(self, message: str, cause: Optional[SourceError] = None):
        super().__init__(message)
        self.cause = cause


@dataclass
class QueryStats:
    cache_hits: int = 0
    fetches: int = 0
    stale_fallbacks: int = 0
    failures: list[str] = field(default_factory=list)

    def summary(self) -> str:
        return (
            f"cache hits: {self.cache_hits}, fetches: {self.fetches}, "
            f"stale fallbacks: {self.stale_fallbacks}, failures: {len(self.failures)}"
        )


class QueryEngine:
    """Select upcoming holidays from cached or freshly fetched yearly data."""

    def __init__(
        self,
        store: CacheStore,
        source: HolidaySource,
        *,
        clock: Callable[[], dt.datetime] = utc_now,
        max_years: int = DEFAULT_MAX_YEARS,
    ):
        self.store = store
        self.source = source
        self.clock = clock
        self.max_years = max(1, max_years)
        self.stats = QueryStats()
        self._last_error: Optional[SourceError] = None

    def _records_for_year(self, country: str, year: int) -> Optional[tuple[HolidayRecord, ...]]:
        """Records for one year, or None when the year yields nothing usable."""
        now = self.clock()
        cached = self.store.get(country, year)
        if is_fresh(cached, now):
            assert cached is not None
            self.stats.cache_hits += 1
            logger.info("Using cached holidays for %s/%s", country, year)
            return cached.records

        try:
            fetched = self.source.fetch(country, year)
        except SourceError as exc:
            self.stats.failures.append(f"{country}/{year}: {exc}")
            self._last_error = exc
            if cached is not None:
                self.stats.stale_fallbacks += 1
                logger.warning(
                    "Fetching %s/%s failed (%s); using copy from %s",
                    country,
                    year,
                    exc,
                    cached.fetched_at.isoformat(),
                )
                return cached.records
            logger.warning("Fetching %s/%s failed: %s", country, year, exc)
            return None

        self.stats.fetches += 1
        records = tuple(fetched)
        try:
            self.store.put(country, year, records, now)
        except StoreWriteError as exc:
            logger.warning("%s", exc)
        return records

    def next_holidays(self, country: str, today: dt.date, count: int) -> list[HolidayRecord]:
        """Return up to ``count`` holidays dated on or after ``today``.

        ``self.stats`` describes the most recent call only.
        """
        self._last_error = None
        self.stats = QueryStats()
        if count <= 0:
            return []

        country = normalize_country(country)
        upcoming: list[HolidayRecord] = []

        for offset in range(self.max_years):
            records = self._records_for_year(country, today.year + offset)
            if records is not None:
                upcoming.extend(r for r in records if r.date >= today)
            if len(upcoming) >= count:
                break

        if not upcoming and self._last_error is not None:
            raise NoHolidayDataError(
                f"No holiday data available for {country}: {self._last_error}",
                cause=self._last_error,
            )

        upcoming.sort(key=lambda r: (r.date, r.name))
        return upcoming[:count]


def next_holidays(
    store: CacheStore,
    source: HolidaySource,
    country: str,
    today: dt.date,
    count: int,
    *,
    clock: Callable[[], dt.datetime] = utc_now,
    max_years: int = DEFAULT_MAX_YEARS,
) -> list[HolidayRecord]:
    engine = QueryEngine(store, source, clock=clock, max_years=max_years)
    return engine.next_holidays(country, today, count)


__all__ = [
    "DEFAULT_MAX_YEARS",
    "HolidaySource",
    "NoHolidayDataError",
    "QueryStats",
    "QueryEngine",
    "next_holidays",
]
