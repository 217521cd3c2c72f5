"""Emoji Extraction: grapheme-aware emoji detection with positions.

Invariants:
    - One ExtractedEmoji per extended grapheme cluster, so ZWJ sequences
      (👨‍👩‍👧‍👦), skin-tone sequences (👍🏽) and flags (🇧🇷) are single occurrences
    - ExtractedEmoji.index is the code-point offset into the original str
    - grapheme_length counts user-perceived characters, not code points or
      UTF-16 units
    - Pure functions, no IO

Design Decisions:
    - regex over re: stdlib re has no \\X or Unicode emoji properties
"""

from dataclasses import dataclass

import regex

_GRAPHEME = regex.compile(r"\X")
_PICTOGRAPHIC = regex.compile(r"[\p{Extended_Pictographic}\p{Emoji_Presentation}]")
_FLAG = regex.compile(r"\p{Regional_Indicator}{2}")
_KEYCAP = regex.compile(r"[0-9#*]\uFE0F?\u20E3")


@dataclass(frozen=True)
class ExtractedEmoji:
    """One emoji occurrence in a message."""
    character: str
    index: int


def is_emoji_cluster(cluster: str) -> bool:
    """True if a grapheme cluster renders as an emoji."""
    return bool(
        _PICTOGRAPHIC.search(cluster)
        or _FLAG.match(cluster)
        or _KEYCAP.match(cluster)
    )


def extract_emojis_with_positions(message: str) -> list[ExtractedEmoji]:
    """Every emoji grapheme cluster in message, in order, with its offset."""
    return [
        ExtractedEmoji(character=match.group(), index=match.start())
        for match in _GRAPHEME.finditer(message)
        if is_emoji_cluster(match.group())
    ]


def contains_emoji(message: str) -> bool:
    return any(
        is_emoji_cluster(match.group()) for match in _GRAPHEME.finditer(message)
    )


def grapheme_length(text: str) -> int:
    """Number of extended grapheme clusters in text."""
    return sum(1 for _ in _GRAPHEME.finditer(text))
