from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)


@dataclass
class ConfigData:
    raw: Dict[str, Any]


def load_yaml_config(path: str | None = None) -> ConfigData:
    path = path or os.getenv("HOLIDATE_CONFIG", "config.yaml")
    p = Path(path).expanduser()
    if not p.exists():
        return ConfigData(raw={})

    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", p, exc)
        data = {}

    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not a mapping", p)
        data = {}
    return ConfigData(raw=data)
