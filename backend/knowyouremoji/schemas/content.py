"""Content Schemas: summary views of emoji and combo records for list/search endpoints."""

from collections.abc import Mapping

from pydantic import BaseModel


class EmojiSummary(BaseModel):
    slug: str
    character: str
    name: str
    category: str
    tldr: str

    @classmethod
    def from_record(cls, record: Mapping) -> "EmojiSummary":
        return cls(
            slug=record.get("slug", ""),
            character=record.get("character", ""),
            name=record.get("name", ""),
            category=record.get("category", ""),
            tldr=record.get("tldr", ""),
        )


class ComboSummary(BaseModel):
    slug: str
    combo: str
    name: str
    meaning: str
    category: str

    @classmethod
    def from_record(cls, record: Mapping) -> "ComboSummary":
        return cls(
            slug=record.get("slug", ""),
            combo=record.get("combo", ""),
            name=record.get("name", ""),
            meaning=record.get("meaning", ""),
            category=record.get("category", ""),
        )


class EmojiSearchResponse(BaseModel):
    emojis: list[EmojiSummary]


class ComboSearchResponse(BaseModel):
    combos: list[ComboSummary]
