from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

from dotenv import load_dotenv

from .config_loader import load_yaml_config
from .data.nager_client import DEFAULT_BASE_URL
from .query import DEFAULT_MAX_YEARS


def _from_nested(d: dict[str, Any], path: str, default: Any = None) -> Any:
    current: Any = d
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def default_cache_dir() -> str:
    base = os.getenv("XDG_CACHE_HOME") or os.path.join(os.path.expanduser("~"), ".cache")
    return os.path.join(base, "holidate")


@dataclass(frozen=True)
class Config:
    api_base_url: str = DEFAULT_BASE_URL
    request_timeout: float = 10.0
    cache_dir: str = field(default_factory=default_cache_dir)
    cache_enabled: bool = True
    max_years: int = DEFAULT_MAX_YEARS
    default_count: int = 5


def load_config(
    *,
    cache_dir_override: str | None = None,
    cache_enabled_override: bool | None = None,
) -> Config:
    yaml_cfg = load_yaml_config().raw
    load_dotenv(override=False)

    def from_yaml(path: str, default: Any = None) -> Any:
        return _from_nested(yaml_cfg, path, default)

    def parse_bool(val: Any, default: bool = False) -> bool:
        if isinstance(val, bool):
            return val
        if isinstance(val, str):
            return val.strip().lower() in {"1", "true", "yes", "y", "on"}
        if val is None:
            return default
        return bool(val)

    def parse_int(val: Any, default: int) -> int:
        try:
            return int(val)
        except (TypeError, ValueError):
            return default

    def parse_float(val: Any, default: float) -> float:
        try:
            return float(val)
        except (TypeError, ValueError):
            return default

    def env_bool(key: str, path: str, default: bool) -> bool:
        env_val = os.getenv(key)
        if env_val is not None:
            return parse_bool(env_val, default)
        return parse_bool(from_yaml(path, default), default)

    def env_int(key: str, path: str, default: int) -> int:
        env_val = os.getenv(key)
        if env_val is not None:
            return parse_int(env_val, default)
        return parse_int(from_yaml(path, default), default)

    def env_float(key: str, path: str, default: float) -> float:
        env_val = os.getenv(key)
        if env_val is not None:
            return parse_float(env_val, default)
        return parse_float(from_yaml(path, default), default)

    def env_str(key: str, path: str, default: str) -> str:
        env_val = os.getenv(key)
        if env_val:
            return env_val
        val = from_yaml(path, default)
        if val is None or str(val).strip() == "":
            return default
        return str(val)

    cache_dir = cache_dir_override or env_str("HOLIDATE_CACHE_DIR", "cache.dir", default_cache_dir())
    cache_enabled = (
        cache_enabled_override
        if cache_enabled_override is not None
        else env_bool("HOLIDATE_CACHE_ENABLED", "cache.enabled", True)
    )

    return Config(
        api_base_url=env_str("HOLIDATE_API_BASE_URL", "api.base_url", DEFAULT_BASE_URL),
        request_timeout=env_float("HOLIDATE_TIMEOUT", "api.timeout_seconds", 10.0),
        cache_dir=os.path.expanduser(cache_dir),
        cache_enabled=cache_enabled,
        max_years=max(1, env_int("HOLIDATE_MAX_YEARS", "query.max_years", DEFAULT_MAX_YEARS)),
        default_count=env_int("HOLIDATE_COUNT", "query.count", 5),
    )


__all__ = ["Config", "load_config", "default_cache_dir"]
