"""Response Contract: parse the model's reply and assemble interpretation results.

Invariants:
    - Syntax failures raise ResponseContractError(reason="invalid_json")
    - Shape/range/enum failures raise ResponseContractError(reason="schema_violation")
      with every violated field path
    - Slug resolution: canonical lookup > model-supplied slug > None
    - id and timestamp are generated at assembly time, never taken from the reply

Design Decisions:
    - Classification lives on the exception (reason), callers never match on
      message text
    - A ```json fence around the reply is stripped before decoding
"""

import json
import random
import re
import time
from collections.abc import Callable
from datetime import datetime, timezone

from pydantic import ValidationError

from knowyouremoji.core.domain_types import EmojiSlug, InterpretationId
from knowyouremoji.core.errors import ResponseContractError
from knowyouremoji.schemas.interpret import (
    DetectedEmoji,
    InterpretationResult,
    ModelReply,
)

SlugLookup = Callable[[str], EmojiSlug | None]

_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)
_ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_ID_SUFFIX_LENGTH = 7


def generate_interpretation_id() -> InterpretationId:
    """int_<epoch-ms>_<7 base36 chars>."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=_ID_SUFFIX_LENGTH))
    return InterpretationId(f"int_{int(time.time() * 1000)}_{suffix}")


def utc_timestamp() -> str:
    """ISO-8601 UTC with millisecond precision and a Z suffix."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def strip_code_fence(text: str) -> str:
    stripped = text.strip()
    match = _FENCE.match(stripped)
    return match.group(1) if match else stripped


def format_field_path(loc: tuple) -> str:
    """("redFlags", 0, "severity") -> "redFlags[0].severity"."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path or "(root)"


def parse_model_reply(text: str) -> ModelReply:
    """Decode and validate the model's raw reply text."""
    body = strip_code_fence(text)
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise ResponseContractError(
            f"Model reply is not valid JSON: {e.msg} at position {e.pos}",
            reason="invalid_json",
        ) from e

    try:
        return ModelReply.model_validate(data)
    except ValidationError as e:
        paths = [format_field_path(err["loc"]) for err in e.errors()]
        first = e.errors()[0]
        raise ResponseContractError(
            f"Model reply violates contract at {paths[0]}: {first['msg']}",
            reason="schema_violation",
            field_paths=paths,
        ) from e


def build_interpretation_result(
    message: str, reply: ModelReply, slug_lookup: SlugLookup,
) -> InterpretationResult:
    """Attach canonical slugs, a fresh id and a timestamp to a parsed reply."""
    emojis = [
        DetectedEmoji(
            character=emoji.character,
            meaning=emoji.meaning,
            slug=slug_lookup(emoji.character) or emoji.slug or None,
        )
        for emoji in reply.emojis
    ]
    return InterpretationResult(
        id=generate_interpretation_id(),
        message=message,
        emojis=emojis,
        interpretation=reply.interpretation,
        metrics=reply.metrics,
        red_flags=reply.red_flags,
        timestamp=utc_timestamp(),
    )


def refresh_identity(result: InterpretationResult) -> InterpretationResult:
    """Copy of result with a new id and timestamp (cache hits)."""
    return result.model_copy(
        update={"id": generate_interpretation_id(), "timestamp": utc_timestamp()},
    )
