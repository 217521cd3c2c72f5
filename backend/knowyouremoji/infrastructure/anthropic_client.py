"""Resilient Anthropic Client: wraps AsyncAnthropic with retry and error mapping.

Invariants:
    - Rate limits (429), 5xx, 529 overloaded and connection failures are retried
      up to max_retries times with a fixed delay between attempts
    - Timeouts, authentication and bad-request failures are never retried
    - Every failure leaves as LLMAPIError (core/errors.py); retry classification
      comes from LLMAPIError.retryable, never from message text
    - get_client raises ConfigurationError before any client object exists
      when the API key is missing

Design Decisions:
    - Fixed delay over exponential backoff: a handful of short retries inside
      one user request
    - complete() returns plain text; decoding the reply belongs to
      core/response_contract.py
    - stream() retries only until the first chunk is out; after that a
      failure ends the stream, since delivered text cannot be taken back
"""

import asyncio
import logging
from collections.abc import AsyncIterator

import anthropic
from anthropic import (
    APIConnectionError,
    APIError,
    APIStatusError,
    APITimeoutError,
    AuthenticationError,
    BadRequestError,
    InternalServerError,
    PermissionDeniedError,
    RateLimitError,
)

from knowyouremoji.config import Settings
from knowyouremoji.core.errors import ConfigurationError, ErrorContext, LLMAPIError

logger = logging.getLogger(__name__)

# OverloadedError (HTTP 529) is not re-exported by every SDK release;
# detect via status code on APIStatusError.
_OVERLOADED_STATUS = 529


def _extract_retry_after(error: APIStatusError) -> int | None:
    """Retry-After header in milliseconds, if the server sent one."""
    response = getattr(error, "response", None)
    if response is None:
        return None
    val = response.headers.get("retry-after")
    if not val:
        return None
    try:
        return int(float(val) * 1000)
    except ValueError:
        return None


def classify_error(e: Exception, context: ErrorContext | None = None) -> LLMAPIError:
    """Map an SDK exception onto the LLMAPIError taxonomy."""
    match e:
        case APITimeoutError():
            return LLMAPIError("API timeout", "timeout", context=context)
        case RateLimitError():
            return LLMAPIError(
                "Rate limit exceeded", "rate_limit",
                retry_after_ms=_extract_retry_after(e),
                status_code=e.status_code, context=context,
            )
        case AuthenticationError() | PermissionDeniedError():
            return LLMAPIError(
                str(e), "authentication", status_code=e.status_code, context=context,
            )
        case BadRequestError():
            return LLMAPIError(
                str(e), "bad_request", status_code=e.status_code, context=context,
            )
        case APIStatusError() if e.status_code == _OVERLOADED_STATUS:
            return LLMAPIError(
                "Anthropic API overloaded (529)", "overloaded",
                status_code=e.status_code, context=context,
            )
        case InternalServerError():
            return LLMAPIError(
                str(e), "server_error", status_code=e.status_code, context=context,
            )
        case APIStatusError() if e.status_code >= 500:
            return LLMAPIError(
                str(e), "server_error", status_code=e.status_code, context=context,
            )
        case APIStatusError():
            return LLMAPIError(
                str(e), "bad_request", status_code=e.status_code, context=context,
            )
        case APIConnectionError():
            return LLMAPIError(str(e), "connection_error", context=context)
        case APIError():
            return LLMAPIError(str(e), "unknown", context=context)
    return LLMAPIError(str(e), "unknown", context=context)


class ResilientAnthropicClient:
    """Wraps Anthropic client with retry logic, timeouts, and error mapping."""

    def __init__(
        self,
        api_key: str,
        model: str,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        max_retries: int = 3,
        retry_delay_ms: int = 1000,
        timeout_seconds: int = 60,
        client=None,
    ):
        # SDK-level retries disabled: this class owns the retry policy
        self.client = client or anthropic.AsyncAnthropic(
            api_key=api_key, timeout=timeout_seconds, max_retries=0,
        )
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.max_retries = max_retries
        self.retry_delay_ms = retry_delay_ms

    async def complete(
        self, system: str, prompt: str, context: ErrorContext | None = None,
    ) -> str:
        """Send one prompt; return the reply's concatenated text blocks."""
        for attempt in range(self.max_retries + 1):
            try:
                response = await self.client.messages.create(
                    model=self.model,
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                    system=system,
                    messages=[{"role": "user", "content": prompt}],
                )
            except APIError as e:
                error = classify_error(e, context)
                await self._retry_or_raise(error, attempt)
                continue
            except Exception as e:
                logger.error(f"Unexpected Anthropic error: {e}", exc_info=True)
                raise LLMAPIError(str(e), "unknown", context=context) from e

            self._log_success(response, attempt)
            text = "".join(
                block.text for block in response.content
                if getattr(block, "type", None) == "text"
            )
            if not text.strip():
                raise LLMAPIError("Model returned no text", "empty_reply", context=context)
            return text

        raise LLMAPIError("Retries exhausted", "unknown", context=context)

    async def stream(
        self, system: str, prompt: str, context: ErrorContext | None = None,
    ) -> AsyncIterator[str]:
        """Yield reply text deltas as the model produces them."""
        for attempt in range(self.max_retries + 1):
            started = False
            try:
                async with self.client.messages.stream(
                    model=self.model,
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                    system=system,
                    messages=[{"role": "user", "content": prompt}],
                ) as stream:
                    async for text in stream.text_stream:
                        if not text:
                            continue
                        started = True
                        yield text
                    final = await stream.get_final_message()
            except APIError as e:
                error = classify_error(e, context)
                if started:
                    logger.error(
                        f"Anthropic stream broke mid-reply: {error.message}",
                        extra={"error_code": error.code, "attempt": attempt + 1},
                    )
                    raise error from e
                await self._retry_or_raise(error, attempt)
                continue
            except Exception as e:
                logger.error(f"Unexpected Anthropic stream error: {e}", exc_info=True)
                raise LLMAPIError(str(e), "unknown", context=context) from e

            self._log_success(final, attempt)
            if not started:
                raise LLMAPIError("Model returned no text", "empty_reply", context=context)
            return

        raise LLMAPIError("Retries exhausted", "unknown", context=context)

    async def _retry_or_raise(self, error: LLMAPIError, attempt: int) -> None:
        if not error.retryable or attempt >= self.max_retries:
            logger.error(
                f"Anthropic call failed: {error.message}",
                extra={"error_code": error.code, "attempt": attempt + 1},
            )
            raise error
        logger.warning(
            f"{error.api_error_type}, retry after {self.retry_delay_ms}ms "
            f"(attempt {attempt + 1})",
            extra={"error_code": error.code, "attempt": attempt + 1},
        )
        await asyncio.sleep(self.retry_delay_ms / 1000)

    def _log_success(self, response, attempt: int) -> None:
        usage = getattr(response, "usage", None)
        logger.info(
            "Anthropic API success",
            extra={
                "attempt": attempt + 1,
                "input_tokens": getattr(usage, "input_tokens", None),
                "output_tokens": getattr(usage, "output_tokens", None),
            },
        )


def get_client(settings: Settings) -> ResilientAnthropicClient:
    """Build the client, or fail fast when the interpreter is not configured."""
    if not settings.enable_interpreter:
        raise ConfigurationError("ENABLE_INTERPRETER")
    if not settings.anthropic_api_key:
        raise ConfigurationError("ANTHROPIC_API_KEY")
    return ResilientAnthropicClient(
        api_key=settings.anthropic_api_key,
        model=settings.anthropic_model,
        max_tokens=settings.interpreter_max_tokens,
        temperature=settings.interpreter_temperature,
        max_retries=settings.anthropic_max_retries,
        retry_delay_ms=settings.anthropic_retry_delay_ms,
        timeout_seconds=settings.anthropic_timeout_seconds,
    )
