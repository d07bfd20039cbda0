"""
Decides whether a message starts a new search episode or refines the current one.

The decision is an ordered list of (name, predicate, outcome) rules; the first
predicate that holds decides. Ambiguous messages fall through to the default
rule, which keeps the current episode.
"""

from typing import Callable, List, NamedTuple, Optional

from lexicon_matching import find_all, find_first, names_category, normalize, starts_with_any
from lexicons import CATEGORIES, COLORS, MATERIALS, NEW_SEARCH_PHRASES, NEW_SEARCH_TRIGGERS, PRICE_DESCRIPTORS
from response_models import Intent


class NewSearchRule(NamedTuple):
    name: str
    predicate: Callable[[str, str, Optional[Intent]], bool]
    is_new_search: bool


def _mentions_new_category(message: str, base_query: str, intent: Optional[Intent]) -> bool:
    return any(not names_category(base_query, term) for term in find_all(message, CATEGORIES))


def _intent_category_differs(message: str, base_query: str, intent: Optional[Intent]) -> bool:
    if intent is None or not intent.filters.category:
        return False
    return not names_category(base_query, normalize(intent.filters.category))


def _has_search_trigger(message: str, base_query: str, intent: Optional[Intent]) -> bool:
    if starts_with_any(message, NEW_SEARCH_TRIGGERS):
        return True
    return find_first(message, NEW_SEARCH_PHRASES) is not None


def _mentions_attribute(message: str, base_query: str, intent: Optional[Intent]) -> bool:
    return find_first(message, COLORS + MATERIALS + PRICE_DESCRIPTORS) is not None


def _always(message: str, base_query: str, intent: Optional[Intent]) -> bool:
    return True


NEW_SEARCH_RULES: List[NewSearchRule] = [
    NewSearchRule("new_category_in_message", _mentions_new_category, True),
    NewSearchRule("intent_category_differs", _intent_category_differs, True),
    NewSearchRule("search_trigger", _has_search_trigger, True),
    NewSearchRule("attribute_refinement", _mentions_attribute, False),
    NewSearchRule("default_continuation", _always, False),
]


def match_new_search_rule(message: str, base_query: str, intent: Optional[Intent] = None) -> NewSearchRule:
    """Return the first rule whose predicate holds for this message."""
    base = normalize(base_query)
    for rule in NEW_SEARCH_RULES:
        if rule.predicate(message, base, intent):
            return rule
    # Unreachable: the default rule always matches
    return NEW_SEARCH_RULES[-1]


def is_new_search(message: str, base_query: str, intent: Optional[Intent] = None) -> bool:
    """
    Decide continuation vs. new search.

    Args:
        message: Raw user message
        base_query: Base query of the current search episode
        intent: Classified intent for the message, if available

    Returns:
        True when the message starts a new search episode
    """
    return match_new_search_rule(message, base_query, intent).is_new_search
