from __future__ import annotations

import json
import logging
import os
import re
import threading
from pathlib import Path
from typing import Any

from .config import LOCAL_STORE_DIR

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def _check_key(key: str) -> str:
    if not key or not _KEY_RE.match(key):
        raise ValueError(f"Invalid storage key: {key!r}")
    return key


def _decode(key: str, raw: str | None) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("Discarding unreadable value stored under %r", key)
        return None


class MemoryStore:
    """In-process key-value store holding JSON text, one entry per key."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}
        self._lock = threading.Lock()

    def get_json(self, key: str) -> Any:
        with self._lock:
            raw = self._items.get(_check_key(key))
        return _decode(key, raw)

    def set_json(self, key: str, value: Any) -> None:
        encoded = json.dumps(value, ensure_ascii=False)
        with self._lock:
            self._items[_check_key(key)] = encoded

    def remove_key(self, key: str) -> None:
        with self._lock:
            self._items.pop(_check_key(key), None)


class JsonFileStore:
    """Key-value store persisted as one ``<key>.json`` file per key."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self._lock = threading.Lock()

    def _path(self, key: str) -> Path:
        return self.root / f"{_check_key(key)}.json"

    def get_json(self, key: str) -> Any:
        path = self._path(key)
        with self._lock:
            try:
                raw = path.read_text(encoding="utf-8")
            except FileNotFoundError:
                return None
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Could not read %s: %s", path, exc)
                return None
        return _decode(key, raw)

    def set_json(self, key: str, value: Any) -> None:
        path = self._path(key)
        encoded = json.dumps(value, ensure_ascii=False)
        with self._lock:
            self.root.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(".json.tmp")
            tmp_path.write_text(encoded, encoding="utf-8")
            os.replace(tmp_path, path)

    def remove_key(self, key: str) -> None:
        path = self._path(key)
        with self._lock:
            try:
                path.unlink()
            except FileNotFoundError:
                pass


store = JsonFileStore(LOCAL_STORE_DIR)
