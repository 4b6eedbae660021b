from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from filelock import FileLock

from adapters.filesystem.json_utils import load_json_object, write_json_atomic


class SidebarSnapshotRepository:
    """Last fetched sidebar payload, kept on disk for offline rendering."""

    def __init__(self, lock_timeout: float = 10.0) -> None:
        self._lock_timeout = lock_timeout

    def load(self, path: Path) -> dict[str, Any]:
        with self._lock(path):
            return load_json_object(path)

    def save(self, payload: Mapping[str, Any], path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock(path):
            write_json_atomic(path, {"data": list(payload.get("data") or [])})

    def _lock(self, path: Path) -> FileLock:
        return FileLock(str(path.parent / f".{path.stem}.lock"), timeout=self._lock_timeout)
