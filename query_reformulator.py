"""
Query Reformulator Module

Turns the latest message into a standalone search query, using the current
search episode as context:

    base "sofa"  + "yang putih"   -> "sofa putih"        (continuation)
    base "sofa"  + "ada meja kayu" -> "ada meja kayu"    (new search)

Tier 1 is a deterministic lexicon pass and is authoritative whenever it reaches
a decision. Only inconclusive messages go to tier 2, a Groq JSON call. Tier 2
failures degrade to the raw message; `reformulate` never raises.
"""

from typing import Dict, Any, List, Optional

from pydantic import BaseModel, Field

from config import REFORMULATOR_MODEL, REFORMULATOR_TIMEOUT_SECONDS
from groq_utils import call_groq_json
from lexicon_matching import (
    contains_term,
    find_all,
    find_first,
    meaningful_words,
    names_category,
    normalize,
    starts_with_any,
    strip_leading,
    strip_terms,
    tokenize,
)
from lexicons import (
    ATTRIBUTE_LEAD_INS,
    CATEGORIES,
    COLORS,
    FILLER_WORDS,
    LEAD_IN_PHRASES,
    MATERIALS,
    NEW_SEARCH_PHRASES,
    NEW_SEARCH_TRIGGERS,
    PRICE_DESCRIPTORS,
)
from logger_config import logger
from prompts import QUERY_REFORMULATOR_SYSTEM_PROMPT
from response_models import DetectedAttributes, ReformulatedQuery

ATTRIBUTE_TERMS = COLORS + MATERIALS + PRICE_DESCRIPTORS

# Appended to the base query in this order
ATTRIBUTE_ORDER = (
    ("color", COLORS),
    ("material", MATERIALS),
    ("price", PRICE_DESCRIPTORS),
)

MAX_ATTRIBUTE_ONLY_WORDS = 2


class ReformulationContext(BaseModel):
    base_query: str = ""
    last_search_query: Optional[str] = None
    active_filters: Dict[str, Any] = Field(default_factory=dict)
    language: str = "id"


class _LLMReformulation(BaseModel):
    query: str
    is_continuation: bool = False
    is_new_search: bool = False
    detected_category: Optional[str] = None
    detected_color: Optional[str] = None
    detected_material: Optional[str] = None
    detected_price: Optional[str] = None


def _passthrough(message: str) -> ReformulatedQuery:
    return ReformulatedQuery(query=message, is_continuation=False, is_new_search=False)


def _has_trigger(text: str) -> bool:
    return bool(starts_with_any(text, NEW_SEARCH_TRIGGERS) or find_first(text, NEW_SEARCH_PHRASES))


def _new_category(text: str, base: str) -> Optional[str]:
    for term in find_all(text, CATEGORIES):
        if not names_category(base, term):
            return term
    return None


def _is_attribute_only(text: str) -> bool:
    if len(meaningful_words(text)) <= MAX_ATTRIBUTE_ONLY_WORDS:
        return True
    attribute_words = {word for term in ATTRIBUTE_TERMS for word in term.split()}
    return all(word in FILLER_WORDS or word in attribute_words for word in tokenize(text))


def _clean_base(base: str) -> str:
    """Base query without attribute terms and leading filler phrases."""
    core = strip_terms(base, ATTRIBUTE_TERMS)
    core = strip_leading(core, LEAD_IN_PHRASES)
    return strip_leading(core, ATTRIBUTE_LEAD_INS)


def _carried_attributes(last_search_query: Optional[str], core: str) -> Dict[str, str]:
    """Attributes already refined into the last query of this episode."""
    last = normalize(last_search_query)
    if not last or (core and not contains_term(last, core)):
        return {}
    carried = {}
    for kind, terms in ATTRIBUTE_ORDER:
        term = find_first(last, terms)
        if term:
            carried[kind] = term
    return carried


def reformulate_with_rules(message: str, context: ReformulationContext) -> Optional[ReformulatedQuery]:
    """
    Tier 1: deterministic reformulation.

    Returns:
        A definite ReformulatedQuery, or None when the rules are inconclusive
    """
    text = normalize(message)
    base = normalize(context.base_query)

    if not base:
        return _passthrough(message)

    category = _new_category(text, base)
    if category:
        return ReformulatedQuery(
            query=message,
            is_continuation=False,
            is_new_search=True,
            detected_attributes=DetectedAttributes(category=category),
        )

    if _has_trigger(text):
        return None

    detected = {kind: find_first(text, terms) for kind, terms in ATTRIBUTE_ORDER}
    if not any(detected.values()) or not _is_attribute_only(text):
        return None

    core = _clean_base(base)
    attributes = _carried_attributes(context.last_search_query, core)
    attributes.update({kind: term for kind, term in detected.items() if term})

    mentioned_category = find_first(text, CATEGORIES)
    parts: List[str] = [core] if core else []
    if mentioned_category and not names_category(core, mentioned_category):
        parts.append(mentioned_category)
    parts.extend(attributes[kind] for kind, _ in ATTRIBUTE_ORDER if kind in attributes)

    return ReformulatedQuery(
        query=" ".join(parts),
        is_continuation=True,
        is_new_search=False,
        detected_attributes=DetectedAttributes(category=mentioned_category, **detected),
    )


class QueryReformulator:
    """Two-tier reformulator: lexicon rules first, Groq when they are inconclusive."""

    def __init__(self, model: str = REFORMULATOR_MODEL, timeout: float = REFORMULATOR_TIMEOUT_SECONDS,
                 llm_call=call_groq_json):
        self.model = model
        self.timeout = timeout
        self.llm_call = llm_call

    async def reformulate(self, message: str, context: ReformulationContext) -> ReformulatedQuery:
        result = reformulate_with_rules(message, context)
        if result is not None:
            logger.info(
                f"Reformulated by rules: '{message}' -> '{result.query}' "
                f"(continuation={result.is_continuation}, new_search={result.is_new_search})"
            )
            return result

        try:
            result = await self._reformulate_with_llm(message, context)
        except Exception as e:
            logger.warning(f"LLM reformulation failed, using raw message: {type(e).__name__}: {e}")
            return _passthrough(message)

        logger.info(
            f"Reformulated by LLM: '{message}' -> '{result.query}' "
            f"(continuation={result.is_continuation}, new_search={result.is_new_search})"
        )
        return result

    async def _reformulate_with_llm(self, message: str, context: ReformulationContext) -> ReformulatedQuery:
        active = ", ".join(f"{key}={value}" for key, value in context.active_filters.items()) or "none"
        message_for_groq = (
            f"Base query: {context.base_query or '-'}\n"
            f"Last search query: {context.last_search_query or '-'}\n"
            f"Active filters: {active}\n"
            f"Language: {context.language}\n"
            f"Latest message: {message}"
        )
        data = await self.llm_call(
            message_for_groq,
            QUERY_REFORMULATOR_SYSTEM_PROMPT,
            model=self.model,
            timeout=self.timeout,
        )
        parsed = _LLMReformulation.model_validate(data)
        query = parsed.query.strip() or message
        return ReformulatedQuery(
            query=query,
            is_continuation=parsed.is_continuation and not parsed.is_new_search,
            is_new_search=parsed.is_new_search,
            detected_attributes=DetectedAttributes(
                category=parsed.detected_category,
                color=parsed.detected_color,
                material=parsed.detected_material,
                price=parsed.detected_price,
            ),
        )


query_reformulator = QueryReformulator()
