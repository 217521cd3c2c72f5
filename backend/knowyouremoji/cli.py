"""Command-line entry point: content validation, local interpretation, API server.

Exit codes:
    0  success
    1  validation errors, missing emoji corpus, or interpreter failure
    2  invalid input or daily quota exhausted
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import uvicorn

from knowyouremoji.config import Settings, get_settings
from knowyouremoji.core.content_validator import validate_corpus
from knowyouremoji.core.domain_types import (
    MessagePlatform,
    RelationshipContext,
    allowed_values,
)
from knowyouremoji.core.errors import KnowYourEmojiError, RequestValidationFailed
from knowyouremoji.core.usage_tracker import DailyUsageTracker
from knowyouremoji.infrastructure.anthropic_client import get_client
from knowyouremoji.infrastructure.content_repository import ContentStore, load_records
from knowyouremoji.infrastructure.observability import setup_logging
from knowyouremoji.infrastructure.redis_cache import RedisCache
from knowyouremoji.infrastructure.usage_storage import JsonFileStorage
from knowyouremoji.services.interpreter import InterpreterService
from knowyouremoji.services.request_normalizer import NormalizedRequest, normalize_request

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


# ─── validate ────────────────────────────────────────────────────

def run_validate(emojis_dir: Path, combos_dir: Path) -> int:
    print("Validating emoji data files...\n")
    emojis = load_records(emojis_dir)
    combos = load_records(combos_dir)
    print(f"Found {len(emojis)} emoji files")
    print(f"Found {len(combos)} combo files\n")

    if not emojis:
        print(f"No emoji files found in {emojis_dir}")
        return EXIT_FAILURE

    report = validate_corpus(emojis, combos)
    if report.valid:
        print("All content files are valid!\n")
        print(f"Validated {len(emojis)} emoji files")
        print(f"Validated {len(combos)} combo files")
        for warning in report.warnings:
            print(f"  warning: {warning}")
        return EXIT_OK

    print("Validation failed!\n")
    print("Errors:")
    for error in report.errors:
        print(f"  - {error}")
    return EXIT_FAILURE


# ─── interpret ───────────────────────────────────────────────────

async def _interpret(
    settings: Settings, normalized: NormalizedRequest, include_tones: bool,
) -> dict:
    content = ContentStore(settings.emojis_dir, settings.combos_dir)
    cache = RedisCache(settings.redis_url)
    service = InterpreterService(
        content=content,
        cache=cache,
        client_factory=lambda: get_client(settings),
        settings=settings,
    )
    try:
        result = await service.interpret_with_cache(normalized)
    finally:
        # flushes the detached cache write before the loop closes
        await cache.close()
    if include_tones:
        result = service.with_tone_suggestions(result)
    return result.to_json_dict()


def run_interpret(
    settings: Settings, message: str, platform: str, context: str, include_tones: bool,
) -> int:
    tracker = DailyUsageTracker(
        JsonFileStorage(settings.usage_storage_path), settings.daily_max_uses,
    )
    if not tracker.can_use():
        print(
            f"Daily limit of {tracker.max_uses} interpretations reached. Try again tomorrow.",
            file=sys.stderr,
        )
        return EXIT_USAGE

    try:
        normalized = normalize_request(
            {"message": message, "platform": platform, "context": context},
        )
    except RequestValidationFailed as e:
        print(f"Invalid input: {e.message}", file=sys.stderr)
        for field, messages in e.field_errors.items():
            for msg in messages:
                print(f"  {field}: {msg}", file=sys.stderr)
        return EXIT_USAGE

    try:
        output = asyncio.run(_interpret(settings, normalized, include_tones))
    except KnowYourEmojiError as e:
        logger.error(e.message, extra={"error_code": e.code})
        print(f"Interpretation failed: {e.public_message or e.message}", file=sys.stderr)
        return EXIT_FAILURE

    remaining = tracker.record_use()
    print(json.dumps(output, ensure_ascii=False, indent=2))
    print(f"{remaining} interpretations left today", file=sys.stderr)
    return EXIT_OK


# ─── entry point ─────────────────────────────────────────────────

def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="knowyouremoji",
        description="Emoji content tooling and message interpreter.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", help="Validate emoji and combo JSON files")
    validate.add_argument("--emojis", type=Path, default=settings.emojis_dir)
    validate.add_argument("--combos", type=Path, default=settings.combos_dir)

    interpret = sub.add_parser("interpret", help="Interpret a message containing emoji")
    interpret.add_argument("message")
    interpret.add_argument(
        "--platform", default=MessagePlatform.OTHER.value,
        help=f"One of: {', '.join(allowed_values(MessagePlatform))}",
    )
    interpret.add_argument(
        "--context", default=RelationshipContext.FRIEND.value,
        help=f"One of: {', '.join(allowed_values(RelationshipContext))}",
    )
    interpret.add_argument(
        "--tones", action="store_true", help="Include suggested response tones",
    )

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    args = build_parser(settings).parse_args(argv)

    match args.command:
        case "validate":
            setup_logging(settings.log_level, "text")
            return run_validate(args.emojis, args.combos)
        case "interpret":
            setup_logging(settings.log_level, "text")
            return run_interpret(
                settings, args.message, args.platform, args.context, args.tones,
            )
        case "serve":
            uvicorn.run(
                "knowyouremoji.main:app", host=args.host, port=args.port, reload=args.reload,
            )
            return EXIT_OK
    return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
