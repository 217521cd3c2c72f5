"""JSON File Storage: durable per-installation key/value store for the CLI quota.

Invariants:
    - The whole store is one JSON object on disk; missing file == empty store
    - Writes go through a temp file + os.replace, so a crash never leaves a
      half-written store
    - Read errors propagate, except that set_item overwrites a corrupt store;
      DailyUsageTracker decides how to degrade
"""

import json
import os
from pathlib import Path


class JsonFileStorage:
    """UsageStorage backed by a single JSON file."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def is_available(self) -> bool:
        parent = self.path.parent
        if parent.exists():
            return os.access(parent, os.W_OK)
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError:
            return False
        return True

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        os.replace(tmp, self.path)

    def get_item(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except ValueError:
            data = {}
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)
