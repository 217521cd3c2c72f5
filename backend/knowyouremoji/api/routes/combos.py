"""Combo Routes: list, search and detail views over the combo corpus."""

from fastapi import APIRouter, Depends, Query

from knowyouremoji.api.dependencies import get_content
from knowyouremoji.api.routes.emojis import DEFAULT_SEARCH_LIMIT, MAX_SEARCH_LIMIT
from knowyouremoji.core.domain_types import ComboSlug
from knowyouremoji.core.errors import ResourceNotFoundError
from knowyouremoji.infrastructure.content_repository import (
    DEFAULT_RELATED_LIMIT,
    ContentStore,
)
from knowyouremoji.schemas.content import ComboSearchResponse, ComboSummary

router = APIRouter(prefix="/api/v1/combos", tags=["combos"])


@router.get("", response_model=list[ComboSummary])
async def list_combos(
    category: str | None = None, content: ContentStore = Depends(get_content),
):
    records = content.combos.by_category(category) if category else content.combos.all()
    return content.combos.summaries(records)


@router.get("/categories", response_model=list[str])
async def list_categories(content: ContentStore = Depends(get_content)):
    return content.combos.categories()


@router.get("/search", response_model=ComboSearchResponse)
async def search_combos(
    q: str = "",
    limit: int = Query(DEFAULT_SEARCH_LIMIT, ge=0),
    content: ContentStore = Depends(get_content),
):
    records = content.combos.search(q) if q else content.combos.all()
    return ComboSearchResponse(
        combos=content.combos.summaries(records[:min(limit, MAX_SEARCH_LIMIT)]),
    )


@router.get("/{slug}")
async def get_combo(slug: str, content: ContentStore = Depends(get_content)):
    record = content.combos.get(slug)
    if record is None:
        raise ResourceNotFoundError("Combo", slug)
    return record


@router.get("/{slug}/related", response_model=list[ComboSummary])
async def related_combos(
    slug: str,
    limit: int = Query(DEFAULT_RELATED_LIMIT, ge=0),
    content: ContentStore = Depends(get_content),
):
    if content.combos.get(slug) is None:
        raise ResourceNotFoundError("Combo", slug)
    return content.combos.related(ComboSlug(slug), limit)
