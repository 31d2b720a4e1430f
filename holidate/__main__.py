from __future__ import annotations

import argparse
import datetime as dt
import logging
import os
import sys

from .upcoming import run_upcoming


def _configure_logging() -> None:
    level_name = os.getenv("LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s - %(message)s")


def _parse_date(value: str) -> dt.date:
    try:
        return dt.date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from exc


def _count_arg(value: str) -> int:
    try:
        n = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if n < 0:
        raise argparse.ArgumentTypeError("count must not be negative")
    return n


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="holidate", description="Show the next public holidays for a country")
    p.add_argument(
        "country_code",
        help="Country code, one of those listed at https://date.nager.at/Country",
    )
    p.add_argument(
        "-n",
        "--number",
        type=_count_arg,
        default=None,
        help="How many holidays to show (default 5)",
    )
    p.add_argument(
        "-r",
        "--relative-to",
        type=_parse_date,
        default=None,
        help="Date relative to which holidays are listed, YYYY-MM-DD (default today)",
    )
    p.add_argument("--cache-dir", type=str, default=None, help="Directory for cached API responses")
    p.add_argument("--no-cache", action="store_true", help="Do not read or write the on-disk cache")
    return p


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    _configure_logging()
    parser = _build_parser()
    ns = parser.parse_args(argv)

    return run_upcoming(
        country=ns.country_code,
        count=ns.number,
        relative_to=ns.relative_to,
        cache_dir=ns.cache_dir,
        no_cache=ns.no_cache,
    )


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
