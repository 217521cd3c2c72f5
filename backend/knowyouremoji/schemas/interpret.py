"""Interpreter Schemas: request validation and the model-reply / result contracts.

Invariants:
    - InterpretRequest.message: 10-1000 grapheme clusters, at least one emoji
    - platform / context reject unknown values with a field-scoped message
    - Metrics probabilities and confidence lie in the closed interval [0, 100]
    - overallTone is exactly positive|neutral|negative; red-flag severity is low|medium|high
    - JSON keys are camelCase on the wire (alias generator), snake_case in Python

Design Decisions:
    - PydanticCustomError over ValueError: messages reach callers without the
      "Value error," prefix
    - ModelReply and InterpretationResult share Metrics/RedFlag so the contract
      and the output cannot drift apart; ReplyEmoji is reply-only because the
      result carries an explicit null slug the reply may not
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from knowyouremoji.core.domain_types import (
    MessagePlatform,
    OverallTone,
    RedFlagSeverity,
    RelationshipContext,
    ResponseToneType,
    allowed_values,
)
from knowyouremoji.core.emoji_extraction import contains_emoji, grapheme_length

MIN_MESSAGE_LENGTH = 10
MAX_MESSAGE_LENGTH = 1000


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InterpretRequest(BaseModel):
    """Inbound interpretation request."""
    message: str
    platform: MessagePlatform
    context: RelationshipContext

    @field_validator("message")
    @classmethod
    def check_message(cls, v: str) -> str:
        length = grapheme_length(v)
        if length < MIN_MESSAGE_LENGTH:
            raise PydanticCustomError(
                "message_too_short",
                "Message must be at least {min} characters",
                {"min": MIN_MESSAGE_LENGTH},
            )
        if length > MAX_MESSAGE_LENGTH:
            raise PydanticCustomError(
                "message_too_long",
                "Message must be at most {max} characters",
                {"max": MAX_MESSAGE_LENGTH},
            )
        if not contains_emoji(v):
            raise PydanticCustomError(
                "message_without_emoji", "Message must contain at least one emoji",
            )
        return v

    @field_validator("platform", mode="before")
    @classmethod
    def check_platform(cls, v):
        if not isinstance(v, str) or v not in allowed_values(MessagePlatform):
            raise PydanticCustomError(
                "invalid_platform",
                "Platform must be one of: {allowed}",
                {"allowed": ", ".join(allowed_values(MessagePlatform))},
            )
        return v

    @field_validator("context", mode="before")
    @classmethod
    def check_context(cls, v):
        if not isinstance(v, str) or v not in allowed_values(RelationshipContext):
            raise PydanticCustomError(
                "invalid_context",
                "Context must be one of: {allowed}",
                {"allowed": ", ".join(allowed_values(RelationshipContext))},
            )
        return v


# ─── Shared value objects ────────────────────────────────────────

class DetectedEmoji(CamelModel):
    character: str
    meaning: str
    slug: str | None = None


class InterpretationMetrics(CamelModel):
    # strict: "50" and true are not numbers
    sarcasm_probability: float = Field(strict=True, ge=0, le=100)
    passive_aggression_probability: float = Field(strict=True, ge=0, le=100)
    overall_tone: OverallTone
    confidence: float = Field(strict=True, ge=0, le=100)


class RedFlag(CamelModel):
    type: str
    description: str
    severity: RedFlagSeverity


# ─── Model reply contract ────────────────────────────────────────

class ReplyEmoji(CamelModel):
    """Emoji entry as the model reports it. slug may be omitted, never null."""
    character: str
    meaning: str
    slug: str | None = None

    @field_validator("slug", mode="before")
    @classmethod
    def reject_null_slug(cls, v):
        if v is None:
            raise PydanticCustomError("slug_null", "slug must be a string when present")
        return v


class ModelReply(CamelModel):
    """Shape the external model must return."""
    emojis: list[ReplyEmoji]
    interpretation: str
    metrics: InterpretationMetrics
    red_flags: list[RedFlag]


# ─── Outbound result ─────────────────────────────────────────────

class SuggestedResponseTone(CamelModel):
    tone: ResponseToneType
    reasoning: str
    confidence: int = Field(ge=0, le=100)
    examples: list[str]


class InterpretationResult(CamelModel):
    """Interpretation returned to callers and stored in the cache."""
    id: str
    message: str
    emojis: list[DetectedEmoji]
    interpretation: str
    metrics: InterpretationMetrics
    red_flags: list[RedFlag]
    timestamp: str
    tone_suggestions: list[SuggestedResponseTone] | None = None

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
