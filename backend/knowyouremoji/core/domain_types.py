"""Domain Types: closed enumerations and identity aliases used across the codebase.

Invariants:
    - Every enumerated domain is a str Enum; no raw string matching outside this module
    - MessagePlatform is Platform plus the OTHER escape value (interpreter only)
    - Content enums use upper-case values; model-reply enums use lower-case values,
      matching the JSON each side reads

Design Decisions:
    - NewType for slugs and interpretation ids: zero runtime cost, marks the
      repository and route boundaries for the type checker
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

EmojiSlug = NewType("EmojiSlug", str)
ComboSlug = NewType("ComboSlug", str)
InterpretationId = NewType("InterpretationId", str)


# ─── Content Enums ───────────────────────────────────────────────

class EmojiCategory(str, Enum):
    FACES = "faces"
    PEOPLE = "people"
    ANIMALS = "animals"
    FOOD = "food"
    TRAVEL = "travel"
    ACTIVITIES = "activities"
    OBJECTS = "objects"
    SYMBOLS = "symbols"
    FLAGS = "flags"


class ComboCategory(str, Enum):
    HUMOR = "humor"
    FLIRTING = "flirting"
    SARCASM = "sarcasm"
    CELEBRATION = "celebration"
    EMOTION = "emotion"
    REACTION = "reaction"
    RELATIONSHIP = "relationship"
    WORK = "work"
    FOOD = "food"
    TRAVEL = "travel"
    OTHER = "other"


class ContextType(str, Enum):
    """Usage context for one meaning of an emoji."""
    LITERAL = "LITERAL"
    SLANG = "SLANG"
    IRONIC = "IRONIC"
    PASSIVE_AGGRESSIVE = "PASSIVE_AGGRESSIVE"
    DATING = "DATING"
    WORK = "WORK"
    RED_FLAG = "RED_FLAG"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Platform(str, Enum):
    """Messaging platforms that content records carry notes for."""
    IMESSAGE = "IMESSAGE"
    INSTAGRAM = "INSTAGRAM"
    TIKTOK = "TIKTOK"
    WHATSAPP = "WHATSAPP"
    SLACK = "SLACK"
    DISCORD = "DISCORD"
    TWITTER = "TWITTER"


class MessagePlatform(str, Enum):
    """Platform a message to interpret was sent on."""
    IMESSAGE = "IMESSAGE"
    INSTAGRAM = "INSTAGRAM"
    TIKTOK = "TIKTOK"
    WHATSAPP = "WHATSAPP"
    SLACK = "SLACK"
    DISCORD = "DISCORD"
    TWITTER = "TWITTER"
    OTHER = "OTHER"


class Generation(str, Enum):
    GEN_Z = "GEN_Z"
    MILLENNIAL = "MILLENNIAL"
    GEN_X = "GEN_X"
    BOOMER = "BOOMER"


class WarningSeverity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# ─── Interpreter Enums ───────────────────────────────────────────

class RelationshipContext(str, Enum):
    """Sender/recipient relationship used to condition the interpretation."""
    ROMANTIC_PARTNER = "ROMANTIC_PARTNER"
    FRIEND = "FRIEND"
    FAMILY = "FAMILY"
    COWORKER = "COWORKER"
    ACQUAINTANCE = "ACQUAINTANCE"
    STRANGER = "STRANGER"


class OverallTone(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class RedFlagSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ResponseToneType(str, Enum):
    """Reply styles suggested alongside an interpretation."""
    DIRECT = "DIRECT"
    PLAYFUL = "PLAYFUL"
    CLARIFYING = "CLARIFYING"
    NEUTRAL = "NEUTRAL"
    MATCHING = "MATCHING"


def allowed_values(enum_cls: type[Enum]) -> list[str]:
    """Enum values in declaration order, for error messages."""
    return [member.value for member in enum_cls]
