from __future__ import annotations

import json
import os
import tempfile
from typing import Any


def _cache_path(cache_dir: str, key: str) -> str:
    return os.path.join(cache_dir, f"{key}.json")


def load_json(cache_dir: str, key: str) -> Any:
    """Return the decoded document stored under ``key``, or None when absent.

    Decoding and read errors propagate (``OSError`` / ``ValueError``).
    """
    path = _cache_path(cache_dir, key)
    if not os.path.exists(path):
        return None
    with open(path, "r", encoding="utf-8") as fp:
        return json.load(fp)


def save_json(cache_dir: str, key: str, payload: Any) -> str:
    """Atomically replace the document stored under ``key``."""
    os.makedirs(cache_dir, exist_ok=True)
    path = _cache_path(cache_dir, key)
    fd, tmp_path = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=cache_dir)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fp:
            json.dump(payload, fp, indent=2, ensure_ascii=False)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
    return path


__all__ = ["load_json", "save_json"]
