from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING, Optional
from zoneinfo import ZoneInfo

if TYPE_CHECKING:
    from ..data.holiday_cache import CacheEntry

REFERENCE_TZ = ZoneInfo("UTC")


def utc_now() -> dt.datetime:
    return dt.datetime.now(tz=REFERENCE_TZ)


def reference_day(moment: dt.datetime) -> dt.date:
    """Calendar day of ``moment`` in the reference zone (naive means UTC)."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=REFERENCE_TZ)
    return moment.astimezone(REFERENCE_TZ).date()


def is_fresh(entry: Optional["CacheEntry"], now: dt.datetime) -> bool:
    """At most one refresh per key per UTC calendar day.

    The rule is per key: other countries or years are fetched regardless.
    """
    if entry is None:
        return False
    return reference_day(entry.fetched_at) == reference_day(now)


__all__ = ["REFERENCE_TZ", "utc_now", "reference_day", "is_fresh"]
