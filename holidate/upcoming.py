from __future__ import annotations

import datetime as dt
import logging
import sys
from typing import Optional, TextIO

from .config import Config, load_config
from .data.holiday_cache import CacheStore, JsonCacheStore, MemoryCacheStore
from .data.nager_client import NagerClient, NagerEndpoint
from .query import NoHolidayDataError, QueryEngine
from .report.console import write_holidays


def build_store(cfg: Config) -> CacheStore:
    if not cfg.cache_enabled:
        return MemoryCacheStore()
    return JsonCacheStore(cfg.cache_dir)


def build_client(cfg: Config) -> NagerClient:
    return NagerClient(NagerEndpoint(cfg.api_base_url), timeout=cfg.request_timeout)


def run_upcoming(
    *,
    country: str,
    count: Optional[int] = None,
    relative_to: Optional[dt.date] = None,
    cache_dir: Optional[str] = None,
    no_cache: bool = False,
    out: Optional[TextIO] = None,
) -> int:
    logger = logging.getLogger(__name__)
    cfg = load_config(
        cache_dir_override=cache_dir,
        cache_enabled_override=False if no_cache else None,
    )
    out = out or sys.stdout
    count = cfg.default_count if count is None else count
    today = relative_to or dt.date.today()

    engine = QueryEngine(build_store(cfg), build_client(cfg), max_years=cfg.max_years)
    try:
        holidays = engine.next_holidays(country, today, count)
    except NoHolidayDataError as exc:
        logger.error("%s", exc)
        return 1
    finally:
        logger.info("Holiday lookup for %s: %s", country.upper(), engine.stats.summary())

    if not holidays:
        logger.warning("No upcoming holidays found for %s on or after %s", country.upper(), today)
    write_holidays(holidays, out)
    return 0


__all__ = ["build_store", "build_client", "run_upcoming"]
