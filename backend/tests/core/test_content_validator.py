"""Content Validator: per-record rules and corpus-level checks.

Tests:
    - Valid records produce no issues
    - Every missing required field is named in an issue
    - Blank strings, non-array arrays and bad enum values are reported
    - Duplicate slugs: one error per slug with the total count
    - Dangling references: one error per dangling entry
    - validate_corpus aggregates and sets valid iff no errors
"""

import pytest

from knowyouremoji.core.content_validator import (
    REQUIRED_COMBO_FIELDS,
    REQUIRED_EMOJI_FIELDS,
    ValidationIssue,
    check_combo_references,
    check_duplicate_slugs,
    check_emoji_references,
    validate_combo,
    validate_corpus,
    validate_emoji,
)

from tests.content_factories import make_combo, make_emoji


def _fields(issues):
    return [issue.field for issue in issues]


# -- Single records ------------------------------------------------------------


def test_valid_emoji_has_no_issues():
    assert validate_emoji(make_emoji()) == []


def test_valid_combo_has_no_issues():
    assert validate_combo(make_combo(tags=["funny"], popularity=80, relatedCombos=[])) == []


@pytest.mark.parametrize("field", REQUIRED_EMOJI_FIELDS)
def test_missing_emoji_field_is_named(field):
    record = make_emoji()
    del record[field]
    assert field in _fields(validate_emoji(record))


@pytest.mark.parametrize("field", REQUIRED_COMBO_FIELDS)
def test_missing_combo_field_is_named(field):
    record = make_combo()
    del record[field]
    assert field in _fields(validate_combo(record))


def test_null_required_field_counts_as_missing():
    issues = validate_emoji(make_emoji(tldr=None))
    assert any(i.field == "tldr" and "Missing required field" in i.message for i in issues)


def test_whitespace_only_string_is_rejected():
    issues = validate_emoji(make_emoji(name="   "))
    assert [i.message for i in issues if i.field == "name"] == ["Field name cannot be empty"]


def test_non_string_in_string_field_is_rejected():
    issues = validate_combo(make_combo(meaning=42))
    assert any(i.field == "meaning" and "must be a string" in i.message for i in issues)


def test_optional_subcategory_must_not_be_blank_when_present():
    assert validate_emoji(make_emoji(subcategory="face-smiling")) == []
    assert "subcategory" in _fields(validate_emoji(make_emoji(subcategory="")))


@pytest.mark.parametrize("value", ["not-an-array", {"a": 1}])
def test_array_field_must_be_an_array(value):
    issues = validate_emoji(make_emoji(platformNotes=value))
    assert any(
        i.field == "platformNotes" and i.message == "platformNotes must be an array"
        for i in issues
    )


def test_invalid_platform_names_value_and_allowed_set():
    record = make_emoji(platformNotes=[{"platform": "MYSPACE", "note": "old"}])
    [issue] = validate_emoji(record)
    assert issue.field == "platformNotes[0].platform"
    assert issue.message.startswith("Invalid platform: MYSPACE. Must be one of: IMESSAGE")
    assert "TWITTER" in issue.message


def test_nested_entries_are_validated_individually():
    record = make_emoji(contextMeanings=[
        {"context": "SLANG", "meaning": "ok", "example": "ok", "riskLevel": "LOW"},
        {"context": "WHATEVER", "meaning": "", "example": "ok", "riskLevel": "EXTREME"},
    ])
    fields = _fields(validate_emoji(record))
    assert "contextMeanings[1].context" in fields
    assert "contextMeanings[1].meaning" in fields
    assert "contextMeanings[1].riskLevel" in fields
    assert not any(f.startswith("contextMeanings[0]") for f in fields)


def test_invalid_generation_and_warning_severity():
    record = make_emoji(
        generationalNotes=[{"generation": "GEN_ALPHA", "note": "x"}],
        warnings=[{"title": "t", "description": "d", "severity": "CRITICAL"}],
    )
    fields = _fields(validate_emoji(record))
    assert fields == ["generationalNotes[0].generation", "warnings[0].severity"]


def test_unknown_emoji_category_is_rejected():
    [issue] = validate_emoji(make_emoji(category="vehicles"))
    assert issue.field == "category"
    assert "Invalid category: vehicles" in issue.message


def test_combo_popularity_out_of_range():
    [issue] = validate_combo(make_combo(popularity=150))
    assert issue.field == "popularity"


def test_issue_identifies_record_by_slug_or_unknown():
    record = make_emoji()
    del record["slug"]
    issues = validate_emoji(record)
    assert all(i.record == "unknown" for i in issues)
    assert str(ValidationIssue("skull", "name", "bad")) == "[skull] name: bad"


def test_non_object_record_yields_one_error():
    assert len(validate_combo(["not", "a", "record"])) == 1


# -- Corpus checks -------------------------------------------------------------


def test_duplicate_slug_reported_once_with_count():
    records = [make_emoji("skull"), make_emoji("skull"), make_emoji("skull"), make_emoji("fire")]
    [issue] = check_duplicate_slugs(records)
    assert issue.message == 'Duplicate slug found: "skull" appears 3 times'


def test_each_duplicated_slug_gets_its_own_error():
    records = [make_combo("a"), make_combo("a"), make_combo("b"), make_combo("b")]
    assert len(check_duplicate_slugs(records)) == 2


def test_emoji_related_combos_must_exist():
    emoji = make_emoji(relatedCombos=["skull-laughing", "ghost-combo"])
    [issue] = check_emoji_references([emoji], {"skull-laughing"})
    assert "ghost-combo" in issue.message


def test_combo_references_one_error_per_dangling_entry():
    combo = make_combo(emojis=["skull", "nope-1", "nope-2"], relatedCombos=["missing"])
    issues = check_combo_references([combo], {"skull"}, {"skull-laughing"})
    assert len(issues) == 3
    assert sum("nope" in i.message for i in issues) == 2


def test_validate_corpus_valid_when_clean():
    emojis = [make_emoji("skull", relatedCombos=["skull-laughing"])]
    combos = [make_combo("skull-laughing", emojis=["skull"])]
    report = validate_corpus(emojis, combos)
    assert report.valid is True
    assert report.errors == []
    assert report.warnings == []


def test_validate_corpus_keeps_going_after_a_bad_record():
    emojis = [make_emoji("skull", name=""), make_emoji("fire", category="nope")]
    combos = [make_combo("skull-laughing", emojis=["skull", "ghost"])]
    report = validate_corpus(emojis, combos)
    assert report.valid is False
    joined = "\n".join(report.errors)
    assert "[skull] name" in joined
    assert "[fire] category" in joined
    assert "ghost" in joined
