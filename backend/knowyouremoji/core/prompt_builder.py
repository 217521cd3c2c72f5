"""Prompt Builder: deterministic interpretation prompt from a validated request.

Invariants:
    - Same request -> byte-identical prompt
    - Every MessagePlatform and RelationshipContext member has an explicit label;
      an unmapped member raises instead of falling through to the raw value
    - Pure functions, no IO
"""

from knowyouremoji.core.domain_types import MessagePlatform, RelationshipContext

INTERPRETATION_SYSTEM_PROMPT = """You are an expert emoji interpreter specializing in understanding the nuanced, contextual meanings of emojis in modern digital communication.

Your task is to analyze messages containing emojis and provide accurate interpretations based on:

1. **Literal vs Contextual Meaning**: Consider both the Unicode definition and how the emoji is actually used in real-world communication.

2. **Platform-Specific Conventions**: Different platforms (iMessage, Instagram, TikTok, Slack, Discord, Twitter, WhatsApp) have different emoji cultures and norms.

3. **Relationship Context**: The meaning changes based on whether the message is from a romantic partner, friend, family member, coworker, acquaintance, or stranger.

4. **Tone Analysis**: Evaluate the overall tone considering:
   - Sarcasm probability (0-100): How likely is the message sarcastic?
   - Passive-aggression probability (0-100): How likely is passive-aggressive intent?
   - Overall tone: positive, neutral, or negative

5. **Red Flags**: Identify any concerning patterns such as:
   - Manipulation tactics
   - Guilt-tripping
   - Gaslighting language
   - Boundary violations
   - Love bombing
   - Mixed signals

Respond with a single JSON object and nothing else. The object has:
- "emojis": list of {"character", "meaning"} for each emoji detected
- "interpretation": overall interpretation of the message
- "metrics": {"sarcasmProbability", "passiveAggressionProbability", "overallTone", "confidence"}
- "redFlags": list of {"type", "description", "severity"} where severity is "low", "medium" or "high"

Be honest and direct in your analysis. If a message seems concerning, say so clearly."""


def platform_label(platform: MessagePlatform) -> str:
    """Human-readable platform name used in the prompt."""
    match platform:
        case MessagePlatform.IMESSAGE:
            return "Apple iMessage"
        case MessagePlatform.INSTAGRAM:
            return "Instagram DMs"
        case MessagePlatform.TIKTOK:
            return "TikTok comments/messages"
        case MessagePlatform.WHATSAPP:
            return "WhatsApp"
        case MessagePlatform.SLACK:
            return "Slack workplace messaging"
        case MessagePlatform.DISCORD:
            return "Discord"
        case MessagePlatform.TWITTER:
            return "Twitter/X DMs"
        case MessagePlatform.OTHER:
            return "Other platform"
    raise ValueError(f"No label for platform {platform!r}")


def context_label(context: RelationshipContext) -> str:
    """Human-readable relationship description used in the prompt."""
    match context:
        case RelationshipContext.ROMANTIC_PARTNER:
            return "Someone you are dating or in a relationship with"
        case RelationshipContext.FRIEND:
            return "A friend or close acquaintance"
        case RelationshipContext.FAMILY:
            return "A family member"
        case RelationshipContext.COWORKER:
            return "A colleague or professional contact"
        case RelationshipContext.ACQUAINTANCE:
            return "Someone you know casually"
        case RelationshipContext.STRANGER:
            return "Someone you do not know personally"
    raise ValueError(f"No label for relationship context {context!r}")


def build_interpretation_prompt(
    message: str, platform: MessagePlatform, context: RelationshipContext,
) -> str:
    """User prompt for one interpretation request."""
    return (
        "Analyze the following message and provide your interpretation in JSON format.\n"
        "\n"
        f'**Message:** "{message}"\n'
        "\n"
        f"**Platform:** {platform.value} ({platform_label(platform)})\n"
        "\n"
        f"**Relationship Context:** {context.value} - {context_label(context)}\n"
        "\n"
        "Provide your analysis as a JSON object with these fields:\n"
        "- emojis: Array of {character, meaning} for each emoji detected\n"
        "- interpretation: Overall interpretation of the message\n"
        "- metrics: {sarcasmProbability, passiveAggressionProbability, overallTone, confidence}\n"
        "- redFlags: Array of {type, description, severity} for any concerns"
    )
