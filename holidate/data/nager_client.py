from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from ..models import HolidayRecord

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://date.nager.at"


class SourceError(RuntimeError):
    """Base error for the holiday source."""

    category = "source"


class SourceNotFoundError(SourceError):
    """Unknown country/year combination."""

    category = "not_found"


class SourceUnavailableError(SourceError):
    """Transport failure or unexpected HTTP status."""

    category = "unavailable"


class SourceMalformedError(SourceError):
    """Response body does not have the expected shape."""

    category = "malformed"


@dataclass(frozen=True)
class NagerEndpoint:
    base_url: str = DEFAULT_BASE_URL

    def public_holidays_url(self, year: int, country_code: str) -> str:
        return f"{self.base_url.rstrip('/')}/api/v3/PublicHolidays/{year}/{country_code}"


class NagerClient:
    """Blocking client for the Nager.Date public holiday API.

    One attempt per call; callers decide what to do with a failure.
    """

    def __init__(
        self,
        endpoint: Optional[NagerEndpoint] = None,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        self.endpoint = endpoint or NagerEndpoint()
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        self.timeout = timeout

    def _request(self, url: str) -> requests.Response:
        return self.session.request("GET", url, timeout=self.timeout)

    def fetch(self, country: str, year: int) -> list[HolidayRecord]:
        country_code = country.strip().upper()
        if not country_code:
            raise SourceNotFoundError("Country code is required")

        url = self.endpoint.public_holidays_url(year, country_code)
        logger.info("Fetching holidays for %s/%s", country_code, year)
        try:
            resp = self._request(url)
        except requests.RequestException as exc:
            raise SourceUnavailableError(f"Holiday request failed: {exc}") from exc

        if resp.status_code in (400, 404):
            raise SourceNotFoundError(
                f"No holidays for {country_code}/{year} (HTTP {resp.status_code})"
            )
        if not 200 <= resp.status_code < 300:
            raise SourceUnavailableError(f"Holiday HTTP {resp.status_code}: {resp.text}")

        # unknown country codes come back as 204 with no body
        if resp.status_code == 204 or not (resp.content or b"").strip():
            raise SourceNotFoundError(f"Unknown country code {country_code!r}")

        try:
            data: Any = resp.json()
        except ValueError as exc:
            raise SourceMalformedError("Holiday response is not JSON") from exc

        if not isinstance(data, list):
            raise SourceMalformedError("Holiday response payload is not a list")

        records: list[HolidayRecord] = []
        for item in data:
            try:
                records.append(HolidayRecord.from_api(item))
            except ValueError as exc:
                raise SourceMalformedError(f"Malformed holiday item: {exc}") from exc
        return records


__all__ = [
    "DEFAULT_BASE_URL",
    "NagerEndpoint",
    "NagerClient",
    "SourceError",
    "SourceNotFoundError",
    "SourceUnavailableError",
    "SourceMalformedError",
]
