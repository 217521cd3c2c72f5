"""Emoji Routes: list, search and detail views over the emoji corpus.

Invariants:
    - Unknown slugs -> ResourceNotFoundError (404), never an empty 200
    - Search limit defaults to 8 and is capped at MAX_SEARCH_LIMIT
    - Static routes (/categories, /search) are declared before /{slug}
"""

from fastapi import APIRouter, Depends, Query

from knowyouremoji.api.dependencies import get_content
from knowyouremoji.core.domain_types import EmojiSlug
from knowyouremoji.core.errors import ResourceNotFoundError
from knowyouremoji.infrastructure.content_repository import (
    DEFAULT_RELATED_LIMIT,
    ContentStore,
)
from knowyouremoji.schemas.content import ComboSummary, EmojiSearchResponse, EmojiSummary

router = APIRouter(prefix="/api/v1/emojis", tags=["emojis"])

DEFAULT_SEARCH_LIMIT = 8
MAX_SEARCH_LIMIT = 20


@router.get("", response_model=list[EmojiSummary])
async def list_emojis(
    category: str | None = None, content: ContentStore = Depends(get_content),
):
    records = content.emojis.by_category(category) if category else content.emojis.all()
    return content.emojis.summaries(records)


@router.get("/categories", response_model=list[str])
async def list_categories(content: ContentStore = Depends(get_content)):
    return content.emojis.categories()


@router.get("/search", response_model=EmojiSearchResponse)
async def search_emojis(
    q: str = "",
    limit: int = Query(DEFAULT_SEARCH_LIMIT, ge=0),
    content: ContentStore = Depends(get_content),
):
    """Quick search for autocomplete; an empty query returns the first entries."""
    results = content.emojis.search_summaries(q, min(limit, MAX_SEARCH_LIMIT))
    return EmojiSearchResponse(emojis=results)


@router.get("/{slug}")
async def get_emoji(slug: str, content: ContentStore = Depends(get_content)):
    record = content.emojis.get(slug)
    if record is None:
        raise ResourceNotFoundError("Emoji", slug)
    return record


@router.get("/{slug}/related", response_model=list[EmojiSummary])
async def related_emojis(
    slug: str,
    limit: int = Query(DEFAULT_RELATED_LIMIT, ge=0),
    content: ContentStore = Depends(get_content),
):
    if content.emojis.get(slug) is None:
        raise ResourceNotFoundError("Emoji", slug)
    return content.emojis.related(EmojiSlug(slug), limit)


@router.get("/{slug}/combos", response_model=list[ComboSummary])
async def emoji_combos(slug: str, content: ContentStore = Depends(get_content)):
    if content.emojis.get(slug) is None:
        raise ResourceNotFoundError("Emoji", slug)
    return content.combos.summaries(content.combos.by_emoji(EmojiSlug(slug)))
