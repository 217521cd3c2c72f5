"""Error Hierarchy: typed, categorized exceptions for every interpreter failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Validation and contract errors carry a client-addressable message
    - Configuration and upstream errors expose only a generic "service unavailable"
      message in to_response(); the detailed message stays in logs
    - LLMAPIError.retryable is the single source for retry classification

Design Decisions:
    - Single hierarchy with KnowYourEmojiError base: one FastAPI handler catches all
    - ErrorContext as dataclass: observability data without coupling to logging
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    RESOURCE_NOT_FOUND = "resource_not_found"
    EXTERNAL_API = "external_api"
    CONTRACT = "contract"
    INTERNAL = "internal"


SERVICE_UNAVAILABLE_MESSAGE = (
    "The interpretation service is temporarily unavailable. Please try again later."
)


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    request_hash: str | None = None
    attempt: int | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class KnowYourEmojiError(Exception):
    """Base exception for all KnowYourEmoji errors."""

    # Message shown to API callers. None means the real message is safe to show.
    public_message: str | None = None

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.public_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "retry_after_ms": self.context.retry_after_ms,
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class RequestValidationFailed(KnowYourEmojiError):
    """Interpretation request failed shape, length, enum or emoji-presence checks."""

    def __init__(
        self,
        message: str,
        field_errors: dict[str, list[str]] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field_errors = field_errors or {}

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["field_errors"] = self.field_errors
        return response


class ResourceNotFoundError(KnowYourEmojiError):
    """Requested content record does not exist."""

    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Server-side Errors (500-level) ─────────────────────────────

class ConfigurationError(KnowYourEmojiError):
    """A required secret or feature flag is missing. Detected before any network call."""

    public_message = SERVICE_UNAVAILABLE_MESSAGE

    def __init__(self, setting: str, context: ErrorContext | None = None):
        super().__init__(
            f"{setting} is not configured",
            "CONFIG_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.setting = setting


class LLMAPIError(KnowYourEmojiError):
    """External model call failed.

    api_error_type is one of: rate_limit, server_error, connection_error,
    overloaded (retryable) or authentication, bad_request, timeout,
    empty_reply, unknown (permanent).
    """

    public_message = SERVICE_UNAVAILABLE_MESSAGE

    RETRYABLE_TYPES = frozenset({
        "rate_limit", "server_error", "connection_error", "overloaded",
    })

    def __init__(
        self,
        message: str,
        api_error_type: str,
        retry_after_ms: int | None = None,
        status_code: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = (
            replace(context, retry_after_ms=retry_after_ms)
            if context is not None else ErrorContext(retry_after_ms=retry_after_ms)
        )
        super().__init__(
            f"LLM API error ({api_error_type}): {message}",
            "RATE_LIMITED" if api_error_type == "rate_limit" else "LLM_API_ERROR",
            ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, ctx,
            429 if api_error_type == "rate_limit" else 503,
        )
        self.api_error_type = api_error_type
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.api_error_type in self.RETRYABLE_TYPES


class ResponseContractError(KnowYourEmojiError):
    """Model reply is not valid JSON or violates the reply contract.

    reason is "invalid_json" or "schema_violation". field_paths lists every
    violated path (e.g. "metrics.sarcasmProbability").
    """

    def __init__(
        self,
        message: str,
        reason: str,
        field_paths: list[str] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "PARSE_ERROR", ErrorCategory.CONTRACT,
            ErrorSeverity.ERROR, context, 502,
        )
        self.reason = reason
        self.field_paths = field_paths or []

    @property
    def field_path(self) -> str | None:
        return self.field_paths[0] if self.field_paths else None

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["reason"] = self.reason
        response["error"]["field_paths"] = self.field_paths
        return response
