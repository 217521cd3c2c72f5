"""Content Repository: disk loading, memoization and queries.

Tests:
    - Sorted load order, bad files skipped, missing directory is empty
    - clear() forces a reload; repeated loads are idempotent
    - Related records share a category, exclude the anchor and honour the limit
    - ContentStore character -> slug lookup
"""

import logging

import pytest

from knowyouremoji.config import DEFAULT_DATA_DIR
from knowyouremoji.core.emoji_extraction import extract_emojis_with_positions
from knowyouremoji.infrastructure.content_repository import (
    ComboRepository,
    ContentStore,
    EmojiRepository,
    load_records,
)

from tests.content_factories import make_combo, make_emoji, write_records


@pytest.fixture
def bundled():
    return ContentStore(DEFAULT_DATA_DIR / "emojis", DEFAULT_DATA_DIR / "combos")


# ─── load_records ────────────────────────────────────────────────

def test_load_records_sorted_by_filename(tmp_path):
    write_records(tmp_path, [make_emoji("zebra"), make_emoji("apple")])
    assert [r["slug"] for r in load_records(tmp_path)] == ["apple", "zebra"]


def test_bad_files_are_skipped_and_logged(tmp_path, caplog):
    write_records(tmp_path, [make_emoji("skull")])
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "list.json").write_text("[1, 2]", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        records = load_records(tmp_path)

    assert [r["slug"] for r in records] == ["skull"]
    assert len([r for r in caplog.records if r.levelno == logging.ERROR]) == 2


def test_missing_directory_is_empty(tmp_path):
    assert load_records(tmp_path / "nope") == []
    assert EmojiRepository(tmp_path / "nope").all() == []


# ─── memoization ─────────────────────────────────────────────────

def test_records_are_memoized_until_cleared(tmp_path):
    write_records(tmp_path, [make_emoji("skull")])
    repo = EmojiRepository(tmp_path)
    first = repo.all()
    write_records(tmp_path, [make_emoji("fire")])
    assert repo.all() is first
    repo.clear()
    assert sorted(repo.slugs()) == ["fire", "skull"]


def test_repeated_clear_and_reload_is_idempotent(tmp_path):
    write_records(tmp_path, [make_emoji("skull"), make_emoji("fire")])
    repo = EmojiRepository(tmp_path)
    loads = []
    for _ in range(3):
        repo.clear()
        loads.append(repo.slugs())
    assert loads[0] == loads[1] == loads[2] == ["fire", "skull"]


# ─── queries ─────────────────────────────────────────────────────

def test_get_and_category_queries(bundled):
    assert bundled.emojis.get("skull")["character"] == "💀"
    assert bundled.emojis.get("does-not-exist") is None
    assert {r["slug"] for r in bundled.emojis.by_category("faces")} == {
        "face-with-tears-of-joy", "loudly-crying-face", "skull",
    }
    assert "humor" in bundled.combos.categories()


def test_related_combos_on_bundled_data(bundled):
    related = bundled.combos.related("skull-laughing", 4)
    slugs = [c.slug for c in related]
    assert "skull-laughing" not in slugs
    assert set(slugs) == {"dead-crying", "laughing-crying"}
    assert all(c.category == "humor" for c in related)


def test_related_limit_and_unknown_slug(tmp_path):
    write_records(tmp_path, [make_emoji(f"face-{i}") for i in range(10)])
    repo = EmojiRepository(tmp_path)
    assert len(repo.related("face-0")) == 6
    assert len(repo.related("face-0", 3)) == 3
    assert repo.related("face-0", 0) == []
    assert repo.related("ghost") == []


def test_emoji_search(bundled):
    assert [r["slug"] for r in bundled.emojis.search("SKULL")] == ["skull"]
    assert [r["slug"] for r in bundled.emojis.search("🔥")] == ["fire"]


def test_search_summaries_limit_and_empty_query(bundled):
    assert len(bundled.emojis.search_summaries("", 3)) == 3
    assert [s.slug for s in bundled.emojis.search_summaries("crying", 8)] == [
        "loudly-crying-face",
    ]


def test_combo_search_matches_tags(tmp_path):
    write_records(tmp_path, [make_combo("a", tags=["vibes"]), make_combo("b", tags=[])])
    assert [r["slug"] for r in ComboRepository(tmp_path).search("VIBES")] == ["a"]


def test_combos_by_emoji(bundled):
    slugs = {r["slug"] for r in bundled.combos.by_emoji("skull")}
    assert "skull-laughing" in slugs
    assert "fire-100" not in slugs


# ─── ContentStore ────────────────────────────────────────────────

def test_slug_map_covers_known_characters_only(bundled):
    extracted = extract_emojis_with_positions("lol 💀💀 and 🫠 too")
    assert bundled.slug_map(extracted) == {"💀": "skull"}


def test_invalidate_rebuilds_character_index(tmp_path):
    emojis, combos = tmp_path / "emojis", tmp_path / "combos"
    write_records(emojis, [make_emoji("skull")])
    store = ContentStore(emojis, combos)
    store.warm()
    assert store.slug_for_character("🔥") is None

    write_records(emojis, [make_emoji("fire", character="🔥")])
    assert store.slug_for_character("🔥") is None
    store.invalidate()
    assert store.slug_for_character("🔥") == "fire"
