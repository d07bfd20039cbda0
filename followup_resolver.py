"""
Resolves short affirmative replies ("iya", "ok", "boleh") against the previous turn.
"""

from typing import Callable, List, NamedTuple, Optional

from conversation_state import ConversationState
from lexicon_matching import is_affirmative
from logger_config import logger
from response_models import Intent, IntentType


class FollowUpRule(NamedTuple):
    name: str
    applies: Callable[[ConversationState], bool]
    intent: IntentType
    faq_topic: Optional[str] = None


FOLLOW_UP_RULES: List[FollowUpRule] = [
    # "Want our opening hours too?" after the store location
    FollowUpRule(
        "location_then_hours",
        lambda s: s.last_intent == IntentType.FAQ_INFO and s.last_faq_topic == "location",
        IntentType.FAQ_INFO,
        "hours",
    ),
    FollowUpRule(
        "details_of_last_results",
        lambda s: s.last_intent == IntentType.SEARCH and s.search.result_count > 0,
        IntentType.PRODUCT_INFO,
    ),
    FollowUpRule(
        "other_faq",
        lambda s: s.last_intent == IntentType.FAQ_INFO and s.last_faq_topic == "other",
        IntentType.HELP,
    ),
    FollowUpRule("default_help", lambda s: True, IntentType.HELP),
]


def resolve_follow_up(message: str, intent: Intent, state: ConversationState) -> Intent:
    """
    Turn an affirmative reply into a concrete intent.

    Only applies when the message is a bare affirmative and the classified
    intent is "unknown"; otherwise the intent is returned unchanged.
    """
    if intent.intent != IntentType.UNKNOWN or not is_affirmative(message):
        return intent

    for rule in FOLLOW_UP_RULES:
        if rule.applies(state):
            logger.info(
                f"Follow-up '{message}' resolved by {rule.name}: "
                f"last_intent={state.last_intent} -> {rule.intent.value}"
            )
            return intent.model_copy(update={"intent": rule.intent, "faq_topic": rule.faq_topic})

    return intent
