"""Redis Cache: optional JSON key/value cache over redis.asyncio.

Invariants:
    - is_available() gates every operation; unconfigured means get -> None,
      set/delete -> False, set_detached -> None
    - Read/write failures are logged at ERROR and reported as a miss / False,
      never raised
    - Values are JSON-encoded on write and decoded on read

Design Decisions:
    - set_detached schedules the write as a task and returns it; the response
      path never awaits it, tests may
    - Detached tasks are held in a set until done so they are not collected
      mid-flight
"""

import asyncio
import json
import logging
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class RedisCache:
    """Best-effort cache; an absent URL turns every call into a no-op."""

    def __init__(self, url: str | None = None, client=None):
        self.url = url
        if client is not None:
            self._client = client
        elif url:
            self._client = redis.Redis.from_url(url, decode_responses=True)
        else:
            self._client = None
        self._pending: set[asyncio.Task] = set()

    def is_available(self) -> bool:
        return self._client is not None

    async def get(self, key: str) -> Any | None:
        if not self.is_available():
            return None
        try:
            data = await self._client.get(key)
            if data is None:
                return None
            return json.loads(data)
        except (RedisError, OSError, ValueError) as e:
            logger.error(f"Cache read failed: {e}", extra={"cache_key": key})
            return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        if not self.is_available():
            return False
        try:
            payload = json.dumps(value, ensure_ascii=False)
            if ttl:
                await self._client.setex(key, ttl, payload)
            else:
                await self._client.set(key, payload)
            return True
        except (RedisError, OSError, TypeError, ValueError) as e:
            logger.error(f"Cache write failed: {e}", extra={"cache_key": key})
            return False

    async def delete(self, key: str) -> bool:
        if not self.is_available():
            return False
        try:
            await self._client.delete(key)
            return True
        except (RedisError, OSError) as e:
            logger.error(f"Cache delete failed: {e}", extra={"cache_key": key})
            return False

    def set_detached(
        self, key: str, value: Any, ttl: int | None = None,
    ) -> asyncio.Task | None:
        """Schedule a write without waiting for it; outcome is only logged."""
        if not self.is_available():
            return None
        task = asyncio.create_task(self._write_and_log(key, value, ttl))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _write_and_log(self, key: str, value: Any, ttl: int | None) -> bool:
        stored = await self.set(key, value, ttl)
        if stored:
            logger.debug("Cache write stored", extra={"cache_key": key})
        return stored

    async def close(self) -> None:
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        if self._client is not None and hasattr(self._client, "aclose"):
            await self._client.aclose()
