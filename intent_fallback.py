"""
Rule-based intent extraction used when the LLM classifier is unavailable.
"""

from typing import Optional

from config import CANONICAL_ATTRIBUTE_LANGUAGE
from lexicon_matching import (
    canonical,
    detect_language,
    find_first,
    is_affirmative,
    meaningful_words,
    normalize,
    starts_with_any,
    strip_leading,
    strip_terms,
)
from lexicons import (
    ATTRIBUTE_LEAD_INS,
    CATEGORIES,
    COLORS,
    FAQ_KEYWORDS,
    GREETING_LEAD_INS,
    GREETING_PREFIXES,
    HELP_PREFIXES,
    LEAD_IN_PHRASES,
    MATERIALS,
    RESET_KEYWORDS,
)
from response_models import Intent, IntentFilters, IntentType


def _faq_topic(text: str) -> Optional[str]:
    for topic, keywords in FAQ_KEYWORDS.items():
        if find_first(text, keywords):
            return topic
    return None


def _classify(text: str):
    """Ordered checks; returns (intent, faq_topic)."""
    if starts_with_any(text, GREETING_PREFIXES):
        return IntentType.GREETING, None
    if starts_with_any(text, HELP_PREFIXES):
        return IntentType.HELP, None
    if find_first(text, RESET_KEYWORDS):
        return IntentType.FILTER_CLEAR, None
    topic = _faq_topic(text)
    if topic:
        return IntentType.FAQ_INFO, topic
    if is_affirmative(text):
        return IntentType.UNKNOWN, None
    return IntentType.SEARCH, None


def _strip_lead_ins(text: str) -> str:
    text = strip_leading(text, GREETING_LEAD_INS)
    text = strip_leading(text, LEAD_IN_PHRASES)
    return strip_leading(text, ATTRIBUTE_LEAD_INS)


def fallback_intent(message: str, last_query: Optional[str] = None,
                    canonical_language: str = CANONICAL_ATTRIBUTE_LANGUAGE) -> Intent:
    """
    Build an Intent from the message using lexicon rules only.

    Args:
        message: Raw user message
        last_query: Last search query of the thread, used to complete
            attribute-only messages ("yang putih" -> "sofa putih")
        canonical_language: Language attribute synonyms are normalized to

    Returns:
        Intent with language, label, search query and color/material/category filters
    """
    text = normalize(message)
    intent_type, faq_topic = _classify(text)

    color = find_first(text, COLORS)
    material = find_first(text, MATERIALS)
    category = find_first(text, CATEGORIES)
    filters = IntentFilters(
        color=canonical("color", color, canonical_language) if color else None,
        material=canonical("material", material, canonical_language) if material else None,
        category=canonical("category", category, canonical_language) if category else None,
    )

    stripped = _strip_lead_ins(text)
    remainder = strip_terms(stripped, [term for term in (color, material) if term])
    attributes = [value for value in (filters.color, filters.material) if value]

    if attributes and not meaningful_words(remainder) and last_query:
        search_query = f"{normalize(last_query)} {' '.join(attributes)}"
    else:
        search_query = remainder or stripped or text

    return Intent(
        intent=intent_type,
        search_query=search_query,
        filters=filters,
        language=detect_language(text),
        faq_topic=faq_topic,
    )
