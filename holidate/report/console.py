from __future__ import annotations

from collections.abc import Iterable
from typing import TextIO

from ..models import HolidayRecord


def comma_sep(items: Iterable[object]) -> str:
    return ", ".join(str(i) for i in items)


def format_holiday(holiday: HolidayRecord) -> str:
    counties = comma_sep(holiday.counties or ())
    types = comma_sep(holiday.types)
    return f"{holiday.date.isoformat()} {holiday.name:40} {counties:25} {types}".rstrip()


def write_holidays(holidays: Iterable[HolidayRecord], out: TextIO) -> int:
    n = 0
    for holiday in holidays:
        out.write(format_holiday(holiday) + "\n")
        n += 1
    return n


__all__ = ["comma_sep", "format_holiday", "write_holidays"]
