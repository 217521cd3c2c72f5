"""Content Record Validator: schema checks for emoji and combo JSON records.

Invariants:
    - validate_* never raise on malformed input; records come from untyped JSON,
      so every type is checked at runtime and reported as a ValidationIssue
    - An empty issue list means the record is valid
    - Corpus checks (duplicates, dangling references) run over whole lists, never
      a single record
    - ValidationReport.valid is True iff its error list is empty

Design Decisions:
    - Plain functions over a schema library: error messages name the offending
      value and the allowed set verbatim, which the CLI prints as-is
    - Dangling references are lint errors here and are not enforced at load time
"""

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from knowyouremoji.core.domain_types import (
    ComboCategory,
    ContextType,
    EmojiCategory,
    Generation,
    Platform,
    RiskLevel,
    WarningSeverity,
    allowed_values,
)

UNKNOWN_RECORD = "unknown"

REQUIRED_EMOJI_FIELDS = (
    "unicode", "slug", "character", "name", "shortName", "category",
    "unicodeVersion", "baseMeaning", "tldr", "contextMeanings",
    "platformNotes", "generationalNotes", "warnings", "relatedCombos",
    "seoTitle", "seoDescription",
)

EMOJI_STRING_FIELDS = (
    "unicode", "slug", "character", "name", "shortName", "category",
    "subcategory", "unicodeVersion", "baseMeaning", "tldr",
    "seoTitle", "seoDescription",
)

REQUIRED_COMBO_FIELDS = (
    "slug", "combo", "emojis", "name", "description", "meaning",
    "examples", "category", "seoTitle", "seoDescription",
)

COMBO_STRING_FIELDS = (
    "slug", "combo", "name", "description", "meaning", "category",
    "seoTitle", "seoDescription",
)


@dataclass
class ValidationIssue:
    """One validation failure: which record, which field, what is wrong."""
    record: str
    field: str
    message: str

    def __str__(self) -> str:
        return f"[{self.record}] {self.field}: {self.message}"


@dataclass
class ValidationReport:
    """Aggregated corpus validation result."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    issues: list[ValidationIssue] = field(default_factory=list)

    @classmethod
    def from_issues(
        cls, issues: list[ValidationIssue], warnings: list[str] | None = None,
    ) -> "ValidationReport":
        return cls(
            valid=not issues,
            errors=[str(issue) for issue in issues],
            warnings=warnings or [],
            issues=list(issues),
        )


# ─── Helpers ─────────────────────────────────────────────────────

def record_id(record: Any) -> str:
    """Slug used to label issues; "unknown" when absent or unusable."""
    if isinstance(record, Mapping):
        slug = record.get("slug")
        if isinstance(slug, str) and slug.strip():
            return slug
    return UNKNOWN_RECORD


def _is_blank_or_not_str(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _enum_message(label: str, value: Any, enum_cls: type[Enum]) -> str | None:
    if isinstance(value, str) and value in allowed_values(enum_cls):
        return None
    return f"Invalid {label}: {value}. Must be one of: {', '.join(allowed_values(enum_cls))}"


def _check_required(
    record: Mapping, required: Iterable[str], rid: str,
) -> list[ValidationIssue]:
    return [
        ValidationIssue(rid, name, f"Missing required field: {name}")
        for name in required
        if record.get(name) is None
    ]


def _check_strings(
    record: Mapping, string_fields: Iterable[str], rid: str,
) -> list[ValidationIssue]:
    issues = []
    for name in string_fields:
        value = record.get(name)
        if value is None:
            continue
        if not isinstance(value, str):
            issues.append(ValidationIssue(rid, name, f"Field {name} must be a string"))
        elif not value.strip():
            issues.append(ValidationIssue(rid, name, f"Field {name} cannot be empty"))
    return issues


def _check_string_items(values: list, name: str, rid: str) -> list[ValidationIssue]:
    return [
        ValidationIssue(rid, f"{name}[{i}]", f"{name} entries must be non-empty strings")
        for i, value in enumerate(values)
        if _is_blank_or_not_str(value)
    ]


def _nested(
    items: Any,
    name: str,
    rid: str,
    validate_item,
) -> list[ValidationIssue]:
    """Array check for a nested-object field, then per-item validation."""
    if not isinstance(items, list):
        return [ValidationIssue(rid, name, f"{name} must be an array")]
    issues = []
    for index, item in enumerate(items):
        for issue in validate_item(item, index):
            issue.record = rid
            issues.append(issue)
    return issues


def _not_an_object(prefix: str) -> list[ValidationIssue]:
    return [ValidationIssue("", prefix, "Entry must be an object")]


# ─── Nested Value Objects ────────────────────────────────────────

def validate_context_meaning(cm: Any, index: int) -> list[ValidationIssue]:
    """Validate one contextMeanings entry."""
    prefix = f"contextMeanings[{index}]"
    if not isinstance(cm, Mapping):
        return _not_an_object(prefix)
    issues = []
    if msg := _enum_message("context type", cm.get("context"), ContextType):
        issues.append(ValidationIssue("", f"{prefix}.context", msg))
    if _is_blank_or_not_str(cm.get("meaning")):
        issues.append(ValidationIssue("", f"{prefix}.meaning", "Missing or invalid meaning field"))
    if _is_blank_or_not_str(cm.get("example")):
        issues.append(ValidationIssue("", f"{prefix}.example", "Missing or invalid example field"))
    if msg := _enum_message("riskLevel", cm.get("riskLevel"), RiskLevel):
        issues.append(ValidationIssue("", f"{prefix}.riskLevel", msg))
    return issues


def validate_platform_note(pn: Any, index: int) -> list[ValidationIssue]:
    """Validate one platformNotes entry."""
    prefix = f"platformNotes[{index}]"
    if not isinstance(pn, Mapping):
        return _not_an_object(prefix)
    issues = []
    if msg := _enum_message("platform", pn.get("platform"), Platform):
        issues.append(ValidationIssue("", f"{prefix}.platform", msg))
    if _is_blank_or_not_str(pn.get("note")):
        issues.append(ValidationIssue("", f"{prefix}.note", "Missing or invalid note field"))
    return issues


def validate_generational_note(gn: Any, index: int) -> list[ValidationIssue]:
    """Validate one generationalNotes entry."""
    prefix = f"generationalNotes[{index}]"
    if not isinstance(gn, Mapping):
        return _not_an_object(prefix)
    issues = []
    if msg := _enum_message("generation", gn.get("generation"), Generation):
        issues.append(ValidationIssue("", f"{prefix}.generation", msg))
    if _is_blank_or_not_str(gn.get("note")):
        issues.append(ValidationIssue("", f"{prefix}.note", "Missing or invalid note field"))
    return issues


def validate_warning(warning: Any, index: int) -> list[ValidationIssue]:
    """Validate one warnings entry."""
    prefix = f"warnings[{index}]"
    if not isinstance(warning, Mapping):
        return _not_an_object(prefix)
    issues = []
    if _is_blank_or_not_str(warning.get("title")):
        issues.append(ValidationIssue("", f"{prefix}.title", "Missing or invalid title field"))
    if _is_blank_or_not_str(warning.get("description")):
        issues.append(ValidationIssue(
            "", f"{prefix}.description", "Missing or invalid description field",
        ))
    if msg := _enum_message("severity", warning.get("severity"), WarningSeverity):
        issues.append(ValidationIssue("", f"{prefix}.severity", msg))
    return issues


# ─── Single Records ──────────────────────────────────────────────

def validate_emoji(emoji: Any) -> list[ValidationIssue]:
    """Validate one emoji record. Returns [] when valid."""
    rid = record_id(emoji)
    if not isinstance(emoji, Mapping):
        return [ValidationIssue(rid, "record", "Record must be a JSON object")]

    issues = _check_required(emoji, REQUIRED_EMOJI_FIELDS, rid)
    issues += _check_strings(emoji, EMOJI_STRING_FIELDS, rid)

    category = emoji.get("category")
    if isinstance(category, str) and category.strip():
        if msg := _enum_message("category", category, EmojiCategory):
            issues.append(ValidationIssue(rid, "category", msg))

    issues += _nested(emoji.get("contextMeanings"), "contextMeanings", rid, validate_context_meaning)
    issues += _nested(emoji.get("platformNotes"), "platformNotes", rid, validate_platform_note)
    issues += _nested(
        emoji.get("generationalNotes"), "generationalNotes", rid, validate_generational_note,
    )
    issues += _nested(emoji.get("warnings"), "warnings", rid, validate_warning)

    related = emoji.get("relatedCombos")
    if not isinstance(related, list):
        issues.append(ValidationIssue(rid, "relatedCombos", "relatedCombos must be an array"))
    else:
        issues += _check_string_items(related, "relatedCombos", rid)

    return issues


def validate_combo(combo: Any) -> list[ValidationIssue]:
    """Validate one combo record. Returns [] when valid."""
    rid = record_id(combo)
    if not isinstance(combo, Mapping):
        return [ValidationIssue(rid, "record", "Record must be a JSON object")]

    issues = _check_required(combo, REQUIRED_COMBO_FIELDS, rid)
    issues += _check_strings(combo, COMBO_STRING_FIELDS, rid)

    category = combo.get("category")
    if isinstance(category, str) and category.strip():
        if msg := _enum_message("category", category, ComboCategory):
            issues.append(ValidationIssue(rid, "category", msg))

    for name in ("emojis", "examples"):
        values = combo.get(name)
        if not isinstance(values, list):
            issues.append(ValidationIssue(rid, name, f"{name} must be an array"))
        else:
            issues += _check_string_items(values, name, rid)

    for name in ("relatedCombos", "tags"):
        values = combo.get(name)
        if values is None:
            continue
        if not isinstance(values, list):
            issues.append(ValidationIssue(rid, name, f"{name} must be an array"))
        else:
            issues += _check_string_items(values, name, rid)

    popularity = combo.get("popularity")
    if popularity is not None:
        if isinstance(popularity, bool) or not isinstance(popularity, (int, float)):
            issues.append(ValidationIssue(rid, "popularity", "popularity must be a number"))
        elif not 0 <= popularity <= 100:
            issues.append(ValidationIssue(
                rid, "popularity", f"popularity must be between 0 and 100, got {popularity}",
            ))

    return issues


# ─── Corpus Checks ───────────────────────────────────────────────

def collect_slugs(records: Iterable[Any]) -> set[str]:
    """Every usable slug in a corpus."""
    return {
        record["slug"] for record in records
        if isinstance(record, Mapping) and isinstance(record.get("slug"), str)
    }


def check_duplicate_slugs(records: Iterable[Any]) -> list[ValidationIssue]:
    """One issue per slug appearing more than once, with its total count."""
    counts = Counter(
        record["slug"] for record in records
        if isinstance(record, Mapping) and isinstance(record.get("slug"), str)
    )
    return [
        ValidationIssue(slug, "slug", f'Duplicate slug found: "{slug}" appears {count} times')
        for slug, count in counts.items()
        if count > 1
    ]


def _dangling(
    record: Mapping, name: str, existing: set[str], kind: str,
) -> list[ValidationIssue]:
    values = record.get(name)
    if not isinstance(values, list):
        return []
    return [
        ValidationIssue(record_id(record), name, f'Referenced {kind} "{value}" does not exist')
        for value in values
        if isinstance(value, str) and value not in existing
    ]


def check_emoji_references(
    emojis: Iterable[Any], existing_combos: set[str],
) -> list[ValidationIssue]:
    """One issue per emoji relatedCombos entry absent from the combo corpus."""
    issues = []
    for emoji in emojis:
        if isinstance(emoji, Mapping):
            issues += _dangling(emoji, "relatedCombos", existing_combos, "combo")
    return issues


def check_combo_references(
    combos: Iterable[Any], existing_emojis: set[str], existing_combos: set[str],
) -> list[ValidationIssue]:
    """One issue per dangling combo emojis[] or relatedCombos[] entry."""
    issues = []
    for combo in combos:
        if isinstance(combo, Mapping):
            issues += _dangling(combo, "emojis", existing_emojis, "emoji")
            issues += _dangling(combo, "relatedCombos", existing_combos, "combo")
    return issues


def validate_all_emojis(
    emojis: list[Any], existing_combos: set[str],
) -> ValidationReport:
    """Per-record, duplicate-slug and combo-reference checks over the emoji corpus."""
    issues: list[ValidationIssue] = []
    for emoji in emojis:
        issues += validate_emoji(emoji)
    issues += check_duplicate_slugs(emojis)
    issues += check_emoji_references(emojis, existing_combos)
    return ValidationReport.from_issues(issues)


def validate_all_combos(
    combos: list[Any], existing_emojis: set[str],
) -> ValidationReport:
    """Per-record, duplicate-slug and reference checks over the combo corpus."""
    issues: list[ValidationIssue] = []
    for combo in combos:
        issues += validate_combo(combo)
    issues += check_duplicate_slugs(combos)
    issues += check_combo_references(combos, existing_emojis, collect_slugs(combos))
    return ValidationReport.from_issues(issues)


def validate_corpus(emojis: list[Any], combos: list[Any]) -> ValidationReport:
    """Both corpora, cross-checked against each other."""
    emoji_report = validate_all_emojis(emojis, collect_slugs(combos))
    combo_report = validate_all_combos(combos, collect_slugs(emojis))
    return ValidationReport.from_issues(
        emoji_report.issues + combo_report.issues,
        emoji_report.warnings + combo_report.warnings,
    )
