"""Persistent string key-value store holding the shrunk joke cache.

The store mirrors browser local storage: string keys, string values, a size
quota, one JSON file on disk. The record-level helpers (``load``, ``save``,
``clear``) never raise; failures are logged and reported through
``StoreResult`` so the caller can decide whether to care.
"""
from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .config import DEFAULT_QUOTA_BYTES
from .errors import StorageError
from .models import ShrunkRecord

log = logging.getLogger(__name__)

KEY_PREFIX = "jokes:"
TIMESTAMP_SUFFIX = ":timestamp"


def storage_key(category: str) -> str:
    return f"{KEY_PREFIX}{category}"


def timestamp_key(key: str) -> str:
    return f"{key}{TIMESTAMP_SUFFIX}"


@dataclass(frozen=True)
class StoreResult:
    """Outcome of a cache mutation. ``error`` is set only when ``ok`` is False."""

    ok: bool
    error: Optional[StorageError] = None

    @classmethod
    def success(cls) -> "StoreResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: StorageError) -> "StoreResult":
        return cls(ok=False, error=error)


class CacheStore:
    """JSON-file backed string store with a byte quota."""

    def __init__(self, path: Path, quota_bytes: int = DEFAULT_QUOTA_BYTES) -> None:
        self._path = Path(path)
        self._quota = int(quota_bytes)
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    # --- raw string API ------------------------------------------------------

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items().get(key)

    def set_item(self, key: str, value: str) -> None:
        """Write one value. Raises StorageError on quota or I/O failure."""
        with self._lock:
            updated = dict(self._items())
            updated[key] = str(value)
            self._flush(updated, key)

    def remove_item(self, key: str) -> None:
        """Delete one value; a missing key is not an error."""
        with self._lock:
            items = self._items()
            if key not in items:
                return
            updated = dict(items)
            del updated[key]
            self._flush(updated, key)

    def keys(self) -> List[str]:
        with self._lock:
            return sorted(self._items())

    # --- record API ----------------------------------------------------------

    def load(self, key: str) -> Optional[List[ShrunkRecord]]:
        """Return the cached records at ``key``, or None if unset or unreadable."""
        raw = self.get_item(key)
        if raw is None:
            return None
        try:
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise ValueError("cached value is not a list")
            return [ShrunkRecord.from_dict(item) for item in payload]
        except ValueError as exc:
            log.warning("Error loading cached jokes for %s: %s", key, exc)
            return None

    def save(self, key: str, records: Sequence[ShrunkRecord]) -> StoreResult:
        try:
            self.set_item(key, json.dumps([r.to_dict() for r in records], ensure_ascii=False))
        except StorageError as exc:
            log.error("Error saving cached jokes: %s", exc)
            return StoreResult.failure(exc)
        return StoreResult.success()

    def clear(self, key: str) -> StoreResult:
        try:
            self.remove_item(key)
        except StorageError as exc:
            log.error("Error clearing cached jokes: %s", exc)
            return StoreResult.failure(exc)
        return StoreResult.success()

    # --- internals -----------------------------------------------------------

    def _items(self) -> Dict[str, str]:
        # Re-read on every access so several processes share one view.
        return self._read()

    def _read(self) -> Dict[str, str]:
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            # Unreadable backing file behaves like empty storage.
            log.warning("Failed to read cache file %s: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            log.warning("Cache file %s is not a JSON object; ignoring it", self._path)
            return {}
        return {str(k): v for k, v in payload.items() if isinstance(v, str)}

    def _flush(self, items: Dict[str, str], key: str) -> None:
        data = json.dumps(items, ensure_ascii=False, indent=2, sort_keys=True)
        size = len(data.encode("utf-8"))
        if size > self._quota:
            raise StorageError(
                f"Storage quota exceeded ({size} > {self._quota} bytes)", key=key
            )
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(data, encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(f"Failed to write cache file {self._path}: {exc}", key=key) from exc
