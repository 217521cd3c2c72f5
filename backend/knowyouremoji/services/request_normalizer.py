"""Request Normalizer: validate a raw interpretation payload and extract its emoji.

Invariants:
    - Validation (length, emoji presence, platform, context) runs before
      extraction and before anything touches the network
    - Failures raise RequestValidationFailed with a field -> messages map
    - NormalizedRequest.emojis keeps every occurrence in message order
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from knowyouremoji.core.emoji_extraction import (
    ExtractedEmoji,
    extract_emojis_with_positions,
)
from knowyouremoji.core.errors import RequestValidationFailed
from knowyouremoji.schemas.interpret import InterpretRequest

ROOT_FIELD = "request"
INVALID_JSON_MESSAGE = "Invalid JSON in request body"
# FastAPI prefixes request-level error locations with where the value came from
_LOCATION_PREFIXES = ("body", "query", "path")


@dataclass(frozen=True)
class NormalizedRequest:
    request: InterpretRequest
    emojis: list[ExtractedEmoji]


def field_errors_from(errors: list[dict]) -> dict[str, list[str]]:
    """Group pydantic error dicts by top-level field name."""
    grouped: dict[str, list[str]] = {}
    for err in errors:
        if err.get("type") == "json_invalid":
            grouped.setdefault(ROOT_FIELD, []).append(INVALID_JSON_MESSAGE)
            continue
        loc = list(err.get("loc", ()))
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        # integer locations are offsets or list indexes, not field names
        name = loc[0] if loc and isinstance(loc[0], str) else ROOT_FIELD
        grouped.setdefault(name, []).append(err.get("msg", "Invalid value"))
    return grouped


def validation_summary(field_errors: dict[str, list[str]]) -> str:
    if not field_errors:
        return "Invalid request"
    name, messages = next(iter(field_errors.items()))
    if name == ROOT_FIELD:
        return messages[0]
    return f"{name}: {messages[0]}"


def parse_request(payload: Mapping[str, Any] | InterpretRequest) -> InterpretRequest:
    if isinstance(payload, InterpretRequest):
        return payload
    try:
        return InterpretRequest.model_validate(payload)
    except ValidationError as e:
        field_errors = field_errors_from(e.errors())
        raise RequestValidationFailed(
            validation_summary(field_errors), field_errors=field_errors,
        ) from e


def normalize_request(payload: Mapping[str, Any] | InterpretRequest) -> NormalizedRequest:
    """Validated request plus every emoji occurrence with its offset."""
    request = parse_request(payload)
    return NormalizedRequest(
        request=request,
        emojis=extract_emojis_with_positions(request.message),
    )
