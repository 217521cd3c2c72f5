"""Content Repository: JSON-file emoji and combo records, memoized in memory.

Invariants:
    - First access reads every *.json file of the directory in sorted filename order
    - A file that fails to read or parse is logged at ERROR and skipped; the
      remaining files still load
    - Missing directory == zero records, no error
    - The loaded list is published with one assignment; concurrent first loads
      may repeat work but never expose a partial list
    - clear() drops the memoized list; the next access reloads from disk

Design Decisions:
    - Records stay untyped dicts: the validator owns shape checking, the
      repository only serves what is on disk
    - ContentStore is built once per process (lifespan / CLI) and passed
      explicitly; no module-level caches
"""

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from knowyouremoji.core.domain_types import ComboSlug, EmojiSlug
from knowyouremoji.core.emoji_extraction import ExtractedEmoji
from knowyouremoji.schemas.content import ComboSummary, EmojiSummary

logger = logging.getLogger(__name__)

DEFAULT_RELATED_LIMIT = 6


def load_records(directory: Path | str) -> list[dict]:
    """Parse every *.json file in directory; unreadable files are skipped."""
    path = Path(directory)
    if not path.is_dir():
        return []

    records = []
    for file in sorted(path.glob("*.json")):
        try:
            data = json.loads(file.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Skipping unreadable content file: {e}", extra={"file": str(file)})
            continue
        if not isinstance(data, dict):
            logger.error("Skipping content file without a JSON object", extra={"file": str(file)})
            continue
        records.append(data)
    return records


def _lower(value) -> str:
    return value.lower() if isinstance(value, str) else ""


class _RecordRepository:
    """Shared load/query logic over one content directory."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)
        self._records: list[dict] | None = None

    def all(self) -> list[dict]:
        records = self._records
        if records is None:
            records = load_records(self.directory)
            self._records = records
            logger.info(
                f"Loaded {len(records)} records", extra={"path": str(self.directory)},
            )
        return records

    def clear(self) -> None:
        self._records = None

    def get(self, slug: str) -> dict | None:
        return next((r for r in self.all() if r.get("slug") == slug), None)

    def by_category(self, category: str) -> list[dict]:
        return [r for r in self.all() if r.get("category") == category]

    def categories(self) -> list[str]:
        return list(dict.fromkeys(
            r["category"] for r in self.all() if isinstance(r.get("category"), str)
        ))

    def slugs(self) -> list[str]:
        return [r["slug"] for r in self.all() if isinstance(r.get("slug"), str)]

    def count(self) -> int:
        return len(self.all())

    def related_records(self, slug: str, limit: int = DEFAULT_RELATED_LIMIT) -> list[dict]:
        """Same category as slug, excluding slug itself, at most limit."""
        anchor = self.get(slug)
        if anchor is None or limit <= 0:
            return []
        same = [
            r for r in self.all()
            if r.get("category") == anchor.get("category") and r.get("slug") != slug
        ]
        return same[:limit]


class EmojiRepository(_RecordRepository):
    """Emoji records keyed by slug."""

    def search(self, query: str) -> list[dict]:
        """Case-insensitive match on name, shortName and slug; raw match on character."""
        needle = query.lower()
        return [
            r for r in self.all()
            if needle in _lower(r.get("name"))
            or needle in _lower(r.get("shortName"))
            or (isinstance(r.get("character"), str) and query in r["character"])
            or needle in _lower(r.get("slug"))
        ]

    def summaries(self, records: Iterable[dict] | None = None) -> list[EmojiSummary]:
        source = self.all() if records is None else records
        return [EmojiSummary.from_record(r) for r in source]

    def related(
        self, slug: EmojiSlug, limit: int = DEFAULT_RELATED_LIMIT,
    ) -> list[EmojiSummary]:
        return self.summaries(self.related_records(slug, limit))

    def search_summaries(self, query: str, limit: int) -> list[EmojiSummary]:
        """Quick search over name, character, category, tldr and slug."""
        summaries = self.summaries()
        needle = query.lower()
        if not needle:
            return summaries[:limit]
        matches = [
            s for s in summaries
            if needle in s.name.lower()
            or needle in s.character
            or needle in s.category.lower()
            or needle in s.tldr.lower()
            or needle in s.slug.lower()
        ]
        return matches[:limit]


class ComboRepository(_RecordRepository):
    """Combo records keyed by slug."""

    def search(self, query: str) -> list[dict]:
        """Case-insensitive match on name, meaning, description, slug and tags; raw match on combo."""
        needle = query.lower()

        def matches(r: dict) -> bool:
            tags = r.get("tags")
            return (
                needle in _lower(r.get("name"))
                or (isinstance(r.get("combo"), str) and query in r["combo"])
                or needle in _lower(r.get("meaning"))
                or needle in _lower(r.get("description"))
                or needle in _lower(r.get("slug"))
                or (isinstance(tags, list) and any(needle in _lower(t) for t in tags))
            )

        return [r for r in self.all() if matches(r)]

    def by_emoji(self, emoji_slug: EmojiSlug) -> list[dict]:
        """Combos whose emojis[] contains emoji_slug."""
        return [
            r for r in self.all()
            if isinstance(r.get("emojis"), list) and emoji_slug in r["emojis"]
        ]

    def summaries(self, records: Iterable[dict] | None = None) -> list[ComboSummary]:
        source = self.all() if records is None else records
        return [ComboSummary.from_record(r) for r in source]

    def related(
        self, slug: ComboSlug, limit: int = DEFAULT_RELATED_LIMIT,
    ) -> list[ComboSummary]:
        return self.summaries(self.related_records(slug, limit))


class ContentStore:
    """Both repositories plus the memoized character -> slug lookup."""

    def __init__(self, emojis_dir: Path | str, combos_dir: Path | str):
        self.emojis = EmojiRepository(emojis_dir)
        self.combos = ComboRepository(combos_dir)
        self._slug_by_character: dict[str, EmojiSlug] | None = None

    def _character_index(self) -> dict[str, EmojiSlug]:
        index = self._slug_by_character
        if index is None:
            index = {}
            for r in self.emojis.all():
                character, slug = r.get("character"), r.get("slug")
                if isinstance(character, str) and isinstance(slug, str):
                    index.setdefault(character, EmojiSlug(slug))
            self._slug_by_character = index
        return index

    def slug_for_character(self, character: str) -> EmojiSlug | None:
        return self._character_index().get(character)

    def slug_map(self, extracted: Iterable[ExtractedEmoji]) -> dict[str, EmojiSlug]:
        """Canonical slugs for the emoji found in one message."""
        result = {}
        for emoji in extracted:
            slug = self.slug_for_character(emoji.character)
            if slug:
                result[emoji.character] = slug
        return result

    def warm(self) -> None:
        self.emojis.all()
        self.combos.all()
        self._character_index()

    def invalidate(self) -> None:
        self.emojis.clear()
        self.combos.clear()
        self._slug_by_character = None
