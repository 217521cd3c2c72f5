"""Tone Suggestions: rank reply styles from interpretation metrics.

Invariants:
    - Every tone starts at weight 50; adjustments are additive and weights are
      floored at 0 afterwards
    - generate_tone_suggestions returns the 3 heaviest tones, ties keep
      declaration order (DIRECT, PLAYFUL, CLARIFYING, NEUTRAL, MATCHING)
    - Suggestion confidence lies in [50, 100]; 50 when every weight is 0
    - Pure functions, no IO
"""

import math

from knowyouremoji.core.domain_types import OverallTone, ResponseToneType
from knowyouremoji.schemas.interpret import InterpretationMetrics, SuggestedResponseTone

BASE_WEIGHT = 50
HIGH_SIGNAL_THRESHOLD = 50
DEFAULT_SUGGESTION_COUNT = 3

TONE_EXAMPLES: dict[ResponseToneType, dict[OverallTone, list[str]]] = {
    ResponseToneType.DIRECT: {
        OverallTone.POSITIVE: [
            "Thanks! I appreciate that. Here's what I'm thinking...",
            "I hear you! Let me be direct about this - I'd prefer to...",
        ],
        OverallTone.NEUTRAL: [
            "I want to be clear about this: [your point]",
            "Here's my honest take on this: [your perspective]",
        ],
        OverallTone.NEGATIVE: [
            "I understand you're frustrated. Let me address this directly...",
            "I hear your concern. Here's what I think we should do...",
        ],
    },
    ResponseToneType.PLAYFUL: {
        OverallTone.POSITIVE: [
            "Haha, love it! 😄 Speaking of which...",
            "You're too much! 😂 But seriously though...",
        ],
        OverallTone.NEUTRAL: [
            "Well well well 👀 Let's make this fun...",
            "Ooh, interesting! 🤔 Here's a thought...",
        ],
        OverallTone.NEGATIVE: [
            "Okay okay, I see where this is going 😅 How about we...",
            "Alright, let's not spiral here 🙃 What if we tried...",
        ],
    },
    ResponseToneType.CLARIFYING: {
        OverallTone.POSITIVE: [
            "That sounds great! Just to make sure I understand - you mean...?",
            "Love this idea! Quick question though - when you say X, do you mean...?",
        ],
        OverallTone.NEUTRAL: [
            "Interesting point. Can you tell me more about what you mean by...?",
            "I want to make sure I'm following - are you saying that...?",
        ],
        OverallTone.NEGATIVE: [
            "I want to understand your perspective better. What specifically about X is concerning you?",
            "Help me understand - when you mention X, what's the main issue you're seeing?",
        ],
    },
    ResponseToneType.NEUTRAL: {
        OverallTone.POSITIVE: [
            "Thanks for sharing that. I think a good next step would be...",
            "Appreciated. Moving forward, I suggest we...",
        ],
        OverallTone.NEUTRAL: [
            "Understood. Here are my thoughts on this...",
            "Thanks for the update. From my perspective...",
        ],
        OverallTone.NEGATIVE: [
            "I understand your position. Let's work through this together...",
            "Thank you for expressing that. Here's what I propose...",
        ],
    },
    ResponseToneType.MATCHING: {
        OverallTone.POSITIVE: [
            "YES! 🎉 I'm so here for this! Let's...",
            "Omg same energy! ✨ I was literally just thinking...",
        ],
        OverallTone.NEUTRAL: [
            "Yeah, I can see that. My take is...",
            "Makes sense. On my end, I'd say...",
        ],
        OverallTone.NEGATIVE: [
            "I feel you. It's frustrating when... Here's what I think could help...",
            "Totally get it. The way I see it...",
        ],
    },
}


def calculate_tone_weights(metrics: InterpretationMetrics) -> dict[ResponseToneType, int]:
    weights = {tone: BASE_WEIGHT for tone in ResponseToneType}
    T = ResponseToneType

    match metrics.overall_tone:
        case OverallTone.POSITIVE:
            weights[T.PLAYFUL] += 20
            weights[T.MATCHING] += 15
            weights[T.NEUTRAL] -= 10
        case OverallTone.NEGATIVE:
            weights[T.DIRECT] += 15
            weights[T.CLARIFYING] += 20
            weights[T.NEUTRAL] += 15
            weights[T.PLAYFUL] -= 20
        case OverallTone.NEUTRAL:
            weights[T.NEUTRAL] += 15
            weights[T.CLARIFYING] += 10

    if metrics.sarcasm_probability > HIGH_SIGNAL_THRESHOLD:
        weights[T.CLARIFYING] += 25
        weights[T.DIRECT] += 15
        weights[T.PLAYFUL] -= 10
        weights[T.MATCHING] -= 10

    if metrics.passive_aggression_probability > HIGH_SIGNAL_THRESHOLD:
        weights[T.DIRECT] += 20
        weights[T.CLARIFYING] += 20
        weights[T.NEUTRAL] += 10
        weights[T.PLAYFUL] -= 25
        weights[T.MATCHING] -= 15

    # low confidence means an unclear message
    if metrics.confidence < HIGH_SIGNAL_THRESHOLD:
        weights[T.CLARIFYING] += 30
        weights[T.DIRECT] -= 10

    return {tone: max(0, weight) for tone, weight in weights.items()}


def select_top_tones(
    weights: dict[ResponseToneType, int], count: int = DEFAULT_SUGGESTION_COUNT,
) -> list[ResponseToneType]:
    ranked = sorted(weights.items(), key=lambda item: item[1], reverse=True)
    return [tone for tone, _ in ranked[:count]]


def tone_reasoning(tone: ResponseToneType, metrics: InterpretationMetrics) -> str:
    """One-sentence explanation of why a tone fits these metrics."""
    sarcastic = metrics.sarcasm_probability > HIGH_SIGNAL_THRESHOLD
    passive_aggressive = metrics.passive_aggression_probability > HIGH_SIGNAL_THRESHOLD
    tone_of_message = metrics.overall_tone

    match tone:
        case ResponseToneType.DIRECT:
            if passive_aggressive:
                return ("Given the potential passive-aggressive undertones, a direct response "
                        "can help address the underlying message clearly.")
            if sarcastic:
                return ("The sarcasm in the message suggests a direct approach may be effective "
                        "to cut through any ambiguity.")
            return ("A straightforward response ensures your message is understood without "
                    "room for misinterpretation.")
        case ResponseToneType.PLAYFUL:
            if tone_of_message == OverallTone.POSITIVE:
                return ("The positive tone invites a playful response that can strengthen the "
                        "connection and keep things light.")
            return ("A touch of lightheartedness could help ease any tension and redirect the "
                    "conversation positively.")
        case ResponseToneType.CLARIFYING:
            if metrics.confidence < HIGH_SIGNAL_THRESHOLD:
                return ("The message has some ambiguity, so asking clarifying questions can help "
                        "ensure you understand correctly.")
            if sarcastic:
                return ("Given the potential sarcasm, seeking clarification can help confirm the "
                        "true intent behind the message.")
            if passive_aggressive:
                return ("Asking clarifying questions can bring any underlying concerns to the "
                        "surface for direct discussion.")
            return ("Seeking clarification shows engagement and ensures mutual understanding "
                    "in the conversation.")
        case ResponseToneType.NEUTRAL:
            if tone_of_message == OverallTone.NEGATIVE:
                return ("A neutral, professional tone helps de-escalate tension and keeps the "
                        "conversation productive.")
            if metrics.passive_aggression_probability > 30:
                return ("Maintaining neutrality prevents escalation and demonstrates emotional "
                        "maturity in the exchange.")
            return ("A balanced response maintains professionalism while leaving room for the "
                    "conversation to develop.")
        case ResponseToneType.MATCHING:
            if tone_of_message == OverallTone.POSITIVE and metrics.confidence > 70:
                return ("Matching the sender's positive energy builds rapport and reinforces "
                        "the friendly dynamic.")
            if tone_of_message == OverallTone.NEUTRAL:
                return ("Mirroring the neutral tone maintains consistency and shows you "
                        "understand the communication style.")
            return "Reflecting a similar energy level can help the sender feel heard and understood."
    raise ValueError(f"No reasoning for tone {tone!r}")


def tone_confidence(weight: int, max_weight: int) -> int:
    """Scale weight/max_weight into [50, 100], rounding half up."""
    if max_weight == 0:
        return 50
    normalized = weight / max_weight * 50 + 50
    return math.floor(min(100.0, max(0.0, normalized)) + 0.5)


def generate_tone_suggestions(
    metrics: InterpretationMetrics, count: int = DEFAULT_SUGGESTION_COUNT,
) -> list[SuggestedResponseTone]:
    weights = calculate_tone_weights(metrics)
    max_weight = max(weights.values())
    return [
        SuggestedResponseTone(
            tone=tone,
            reasoning=tone_reasoning(tone, metrics),
            confidence=tone_confidence(weights[tone], max_weight),
            examples=list(TONE_EXAMPLES[tone][metrics.overall_tone]),
        )
        for tone in select_top_tones(weights, count)
    ]
