"""Cache Keys: deterministic request hashing and namespaced cache keys.

Invariants:
    - hash_interpretation_request is pure: same (message, platform, context)
      always yields the same string
    - The hash walks UTF-16 code units so keys match across clients that
      share the cache
    - Every key carries the "kye:" namespace

Design Decisions:
    - 31-multiplier rolling hash truncated to signed 32-bit; not collision
      resistant, only used as a cache key
"""

from enum import Enum

from knowyouremoji.core.domain_types import MessagePlatform, RelationshipContext

CACHE_NAMESPACE = "kye"
_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


class CachePrefix(str, Enum):
    EMOJI = "emoji"
    INTERPRETATION = "interpretation"
    ALL_EMOJIS = "all_emojis"


# seconds
DEFAULT_TTL: dict[CachePrefix, int] = {
    CachePrefix.EMOJI: 3600,
    CachePrefix.INTERPRETATION: 86400,
    CachePrefix.ALL_EMOJIS: 3600,
}


def get_cache_key(prefix: CachePrefix, identifier: str | None = None) -> str:
    """kye:<prefix> or kye:<prefix>:<identifier>."""
    key = f"{CACHE_NAMESPACE}:{prefix.value}"
    return f"{key}:{identifier}" if identifier else key


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def _utf16_units(text: str):
    data = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def hash_interpretation_request(
    message: str,
    platform: MessagePlatform | str | None = None,
    context: RelationshipContext | str | None = None,
) -> str:
    """Base-36 rolling hash of "message|platform|context"."""
    platform_value = platform.value if isinstance(platform, Enum) else (platform or "")
    context_value = context.value if isinstance(context, Enum) else (context or "")
    source = f"{message}|{platform_value}|{context_value}"

    h = 0
    for unit in _utf16_units(source):
        h = _to_int32((h << 5) - h + unit)
    return _base36(abs(h))


def interpretation_cache_key(
    message: str, platform: MessagePlatform, context: RelationshipContext,
) -> str:
    return get_cache_key(
        CachePrefix.INTERPRETATION,
        hash_interpretation_request(message, platform, context),
    )
