"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core never imports from infrastructure; dependency arrows point inward only
    - Optional collaborators expose is_available(); every other operation has
      a defined no-op/absent result when it returns False
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test doubles need no base class
    - UsageStorage is sync (local durable store); KeyValueCache and
      ModelClient are async (network IO)
"""

import asyncio
from collections.abc import AsyncIterator
from typing import Any, Protocol

from knowyouremoji.core.errors import ErrorContext


class UsageStorage(Protocol):
    """Durable per-installation key/value store used by the quota tracker."""
    def is_available(self) -> bool: ...
    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class KeyValueCache(Protocol):
    """External cache; absent configuration makes every call a no-op."""
    def is_available(self) -> bool: ...
    async def get(self, key: str) -> Any | None: ...
    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool: ...
    async def delete(self, key: str) -> bool: ...
    def set_detached(
        self, key: str, value: Any, ttl: int | None = None,
    ) -> asyncio.Task | None: ...


class ModelClient(Protocol):
    """One request/reply exchange with the external language model."""
    async def complete(
        self, system: str, prompt: str, context: ErrorContext | None = None,
    ) -> str: ...
    def stream(
        self, system: str, prompt: str, context: ErrorContext | None = None,
    ) -> AsyncIterator[str]: ...