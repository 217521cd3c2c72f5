"""Daily Usage Tracker: per-installation interpretation quota.

Invariants:
    - Stored shape is {"count": int, "date": str} under STORAGE_KEY
    - A stored date other than today counts as 0 uses
    - record_use never writes once the limit is reached (returns 0)
    - Unavailable, corrupt or raising storage degrades to "0 used, use
      permitted"; nothing is raised to the caller
    - max_uses is clamped to >= 0
"""

import json
import logging
from collections.abc import Callable
from datetime import date

from knowyouremoji.core.repository_protocols import UsageStorage

logger = logging.getLogger(__name__)

STORAGE_KEY = "kye_rate_limit"
DEFAULT_MAX_USES = 3


def _today() -> str:
    return date.today().isoformat()


class DailyUsageTracker:
    """Counts interpretation attempts per calendar day."""

    def __init__(
        self,
        storage: UsageStorage | None,
        max_uses: int = DEFAULT_MAX_USES,
        today: Callable[[], str] = _today,
    ):
        self._storage = storage
        self._max_uses = max(0, max_uses)
        self._today = today

    @property
    def max_uses(self) -> int:
        return self._max_uses

    def _storage_ready(self) -> bool:
        if self._storage is None:
            return False
        try:
            return self._storage.is_available()
        except Exception as e:
            logger.warning(f"Usage storage availability check failed: {e}")
            return False

    def _load(self) -> dict | None:
        if not self._storage_ready():
            return None
        try:
            raw = self._storage.get_item(STORAGE_KEY)
            if not raw:
                return None
            data = json.loads(raw)
        except Exception as e:
            logger.warning(f"Usage data unreadable, treating as unused: {e}")
            return None
        if not isinstance(data, dict):
            return None
        count, day = data.get("count"), data.get("date")
        if isinstance(count, bool) or not isinstance(count, (int, float)):
            return None
        if not isinstance(day, str):
            return None
        return {"count": int(count), "date": day}

    def _save(self, count: int) -> None:
        if not self._storage_ready():
            return
        try:
            self._storage.set_item(
                STORAGE_KEY, json.dumps({"count": count, "date": self._today()}),
            )
        except Exception as e:
            logger.warning(f"Usage data not saved: {e}")

    def used_count(self) -> int:
        data = self._load()
        if data is None or data["date"] != self._today():
            return 0
        return data["count"]

    def can_use(self) -> bool:
        return self.used_count() < self._max_uses

    def remaining_uses(self) -> int:
        return max(0, self._max_uses - self.used_count())

    def record_use(self) -> int:
        """Count one use; returns remaining uses, 0 without writing at the limit."""
        if not self.can_use():
            return 0
        new_count = self.used_count() + 1
        self._save(new_count)
        return self._max_uses - new_count

    def reset(self) -> None:
        if not self._storage_ready():
            return
        try:
            self._storage.remove_item(STORAGE_KEY)
        except Exception as e:
            logger.warning(f"Usage data not reset: {e}")
