from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class HolidayType(str, Enum):
    PUBLIC = "Public"
    BANK = "Bank"
    SCHOOL = "School"
    AUTHORITIES = "Authorities"
    OPTIONAL = "Optional"
    OBSERVANCE = "Observance"

    def __str__(self) -> str:
        return self.value


def _require(item: dict[str, Any], key: str, kind: type) -> Any:
    if key not in item:
        raise ValueError(f"missing field {key!r}")
    value = item[key]
    # bool is an int subclass; keep the two apart
    if kind is int and isinstance(value, bool):
        raise ValueError(f"field {key!r} must be int, got bool")
    if not isinstance(value, kind):
        raise ValueError(f"field {key!r} must be {kind.__name__}, got {type(value).__name__}")
    return value


def _optional_strings(value: Any, key: str) -> Optional[tuple[str, ...]]:
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"field {key!r} must be a list of strings or null")
    return tuple(value)


@dataclass(frozen=True)
class HolidayRecord:
    """One public holiday as returned by the Nager.Date API."""

    date: dt.date
    local_name: str
    name: str
    country_code: str
    fixed: bool
    global_: bool
    counties: Optional[tuple[str, ...]]
    launch_year: Optional[int]
    types: tuple[HolidayType, ...]

    @property
    def display_key(self) -> tuple[dt.date, str, str]:
        return (self.date, self.country_code, self.name)

    @classmethod
    def from_api(cls, item: Any) -> "HolidayRecord":
        """Parse one object of the PublicHolidays response.

        Raises ``ValueError`` when the object does not have the expected shape.
        """
        if not isinstance(item, dict):
            raise ValueError(f"holiday item must be an object, got {type(item).__name__}")

        raw_date = _require(item, "date", str)
        try:
            date = dt.date.fromisoformat(raw_date)
        except ValueError as exc:
            raise ValueError(f"invalid holiday date {raw_date!r}") from exc

        launch_year = item.get("launchYear")
        if launch_year is not None and (
            isinstance(launch_year, bool) or not isinstance(launch_year, int)
        ):
            raise ValueError("field 'launchYear' must be int or null")

        raw_types = _require(item, "types", list)
        try:
            types = tuple(HolidayType(t) for t in raw_types)
        except ValueError as exc:
            raise ValueError(f"unknown holiday type in {raw_types!r}") from exc

        return cls(
            date=date,
            local_name=_require(item, "localName", str),
            name=_require(item, "name", str),
            country_code=_require(item, "countryCode", str),
            fixed=_require(item, "fixed", bool),
            global_=_require(item, "global", bool),
            counties=_optional_strings(item.get("counties"), "counties"),
            launch_year=launch_year,
            types=types,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "localName": self.local_name,
            "name": self.name,
            "countryCode": self.country_code,
            "fixed": self.fixed,
            "global": self.global_,
            "counties": list(self.counties) if self.counties is not None else None,
            "launchYear": self.launch_year,
            "types": [t.value for t in self.types],
        }


__all__ = ["HolidayType", "HolidayRecord"]
