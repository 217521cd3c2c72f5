"""Interpreter Service: validated request -> model call -> contract-checked result.

Invariants:
    - Pipeline order: client acquisition (ConfigurationError before any
      network call) -> emoji extraction -> prompt -> model call -> parse ->
      assemble
    - Cache hits return refresh_identity(cached): payload reused, id and
      timestamp fresh
    - Cache writes are detached; interpret_with_cache never awaits them
    - An undecodable cached entry is treated as a miss
    - open_stream resolves the first chunk before returning, so configuration
      and upstream failures raise before any response byte is sent

Design Decisions:
    - client_factory instead of a client: the missing-key check happens per
      request, so a process started without a key reports CONFIG_ERROR instead
      of failing at startup
"""

import logging
from collections.abc import AsyncIterator, Callable

from pydantic import ValidationError

from knowyouremoji.config import Settings
from knowyouremoji.core.cache_keys import interpretation_cache_key
from knowyouremoji.core.errors import ErrorContext, LLMAPIError
from knowyouremoji.core.prompt_builder import (
    INTERPRETATION_SYSTEM_PROMPT,
    build_interpretation_prompt,
)
from knowyouremoji.core.repository_protocols import KeyValueCache, ModelClient
from knowyouremoji.core.response_contract import (
    build_interpretation_result,
    parse_model_reply,
    refresh_identity,
)
from knowyouremoji.core.tone_suggestions import generate_tone_suggestions
from knowyouremoji.infrastructure.content_repository import ContentStore
from knowyouremoji.schemas.interpret import InterpretationResult
from knowyouremoji.services.request_normalizer import NormalizedRequest

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], ModelClient]


class InterpreterService:
    """Runs interpretations against the model, with an optional cache in front."""

    def __init__(
        self,
        content: ContentStore,
        cache: KeyValueCache,
        client_factory: ClientFactory,
        settings: Settings,
    ):
        self.content = content
        self.cache = cache
        self.client_factory = client_factory
        self.settings = settings

    async def interpret(self, normalized: NormalizedRequest) -> InterpretationResult:
        request = normalized.request
        client = self.client_factory()

        slug_map = self.content.slug_map(normalized.emojis)
        prompt = build_interpretation_prompt(
            request.message, request.platform, request.context,
        )
        context = ErrorContext(debug_info={"emoji_count": len(normalized.emojis)})
        raw = await client.complete(INTERPRETATION_SYSTEM_PROMPT, prompt, context=context)

        reply = parse_model_reply(raw)
        return build_interpretation_result(request.message, reply, slug_map.get)

    async def open_stream(self, normalized: NormalizedRequest) -> AsyncIterator[str]:
        """Raw model text for a streamed interpretation; bypasses the cache."""
        request = normalized.request
        client = self.client_factory()

        prompt = build_interpretation_prompt(
            request.message, request.platform, request.context,
        )
        context = ErrorContext(debug_info={"emoji_count": len(normalized.emojis)})
        chunks = client.stream(INTERPRETATION_SYSTEM_PROMPT, prompt, context=context)
        try:
            first = await anext(chunks)
        except StopAsyncIteration as e:
            raise LLMAPIError("Model returned no text", "empty_reply", context=context) from e
        return _prepend(first, chunks)

    async def interpret_with_cache(
        self, normalized: NormalizedRequest,
    ) -> InterpretationResult:
        request = normalized.request
        key = interpretation_cache_key(request.message, request.platform, request.context)

        cached = await self.cache.get(key)
        if cached is not None:
            try:
                result = InterpretationResult.model_validate(cached)
            except ValidationError as e:
                logger.warning(
                    f"Discarding malformed cache entry: {e.error_count()} errors",
                    extra={"cache_key": key},
                )
            else:
                logger.info("Interpretation cache hit", extra={"cache_key": key})
                return refresh_identity(result)

        result = await self.interpret(normalized)
        self.cache.set_detached(
            key, result.to_json_dict(), ttl=self.settings.interpretation_cache_ttl,
        )
        return result

    @staticmethod
    def with_tone_suggestions(result: InterpretationResult) -> InterpretationResult:
        return result.model_copy(
            update={"tone_suggestions": generate_tone_suggestions(result.metrics)},
        )


async def _prepend(first: str, rest: AsyncIterator[str]) -> AsyncIterator[str]:
    yield first
    async for chunk in rest:
        yield chunk
