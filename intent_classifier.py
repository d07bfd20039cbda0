from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from config import CANONICAL_ATTRIBUTE_LANGUAGE, CLASSIFIER_MODEL, CLASSIFIER_TIMEOUT_SECONDS
from groq_utils import call_groq_json
from intent_fallback import fallback_intent
from lexicon_matching import canonical
from logger_config import logger
from prompts import INTENT_CLASSIFIER_SYSTEM_PROMPT
from response_models import Intent


class ClassifierContext(BaseModel):
    """What the classifier is told about the conversation so far."""
    current_category: Optional[str] = None
    active_filters: Dict[str, Any] = Field(default_factory=dict)
    last_query: Optional[str] = None
    last_intent: Optional[str] = None
    last_faq_topic: Optional[str] = None


class IntentClassifier:
    """Classifies user messages with Groq, falling back to lexicon rules."""

    def __init__(self, model: str = CLASSIFIER_MODEL, timeout: float = CLASSIFIER_TIMEOUT_SECONDS,
                 llm_call=call_groq_json, canonical_language: str = CANONICAL_ATTRIBUTE_LANGUAGE):
        self.model = model
        self.timeout = timeout
        self.llm_call = llm_call
        self.canonical_language = canonical_language

    async def extract(self, message: str, context: Optional[ClassifierContext] = None) -> Intent:
        """
        Classify a message into an Intent.

        Args:
            message: Raw user message
            context: Conversation context for resolving references

        Returns:
            Intent from the LLM, or from the rule fallback when the LLM call
            fails, times out or returns something that does not validate
        """
        context = context or ClassifierContext()
        try:
            data = await self.llm_call(
                self._build_message(message, context),
                INTENT_CLASSIFIER_SYSTEM_PROMPT,
                model=self.model,
                timeout=self.timeout,
            )
            intent = Intent.model_validate(data)
        except Exception as e:
            logger.warning(f"Intent classification failed, using rule fallback: {type(e).__name__}: {e}")
            return fallback_intent(message, context.last_query, self.canonical_language)

        intent = self._normalize_filters(intent)
        logger.info(f"Classified '{message}' as {intent.intent.value} (language={intent.language})")
        return intent

    def _normalize_filters(self, intent: Intent) -> Intent:
        filters = intent.filters
        updates = {}
        for kind in ("category", "color", "material"):
            value = getattr(filters, kind)
            if value:
                updates[kind] = canonical(kind, value, self.canonical_language)
        if not updates:
            return intent
        return intent.model_copy(update={"filters": filters.model_copy(update=updates)})

    @staticmethod
    def _build_message(message: str, context: ClassifierContext) -> str:
        active = ", ".join(f"{key}={value}" for key, value in context.active_filters.items()) or "none"
        lines = [
            f"Current category: {context.current_category or '-'}",
            f"Active filters: {active}",
            f"Last search query: {context.last_query or '-'}",
            f"Last intent: {context.last_intent or '-'}",
        ]
        if context.last_faq_topic:
            lines.append(f"Last FAQ topic: {context.last_faq_topic}")
        lines.append(f"Latest message: {message}")
        return "\n".join(lines)


intent_classifier = IntentClassifier()
