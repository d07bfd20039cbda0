"""
Shopping Assistant Orchestrator

Processes one user message per call, in a fixed order:

    StateLookup -> IntentResolution -> LanguageGate -> SpecialIntent
    -> BaseQueryDetermination -> NewSearchCheck -> Reformulation
    -> FilterMerge -> SearchDispatch -> StateUpdate -> ResponseAssembly

LanguageGate and SpecialIntent may end processing early. All state changes go
through the store's named commands, and the whole message is processed under
the thread's lock so concurrent messages for one thread apply in order. A
failed search leaves the base query, filters and results as they were.
"""

from typing import List, Optional

from config import SEARCH_RESULT_LIMIT, SUPPORTED_LANGUAGES
from conversation_state import (
    AddMessage,
    ClearFilters,
    ConversationState,
    SetBaseQuery,
    SetFilter,
    SetLanguage,
    SetLastIntent,
    SetSearch,
    build_context_string,
)
from followup_resolver import resolve_follow_up
from intent_classifier import ClassifierContext
from logger_config import log_search_query, log_user_interaction, logger
from new_search_detector import match_new_search_rule
from query_reformulator import ReformulationContext
from response_generator import ResponseContext
from response_models import (
    AgentResponse,
    GeneratedResponse,
    Intent,
    IntentType,
    Product,
    ResponseMeta,
    SearchType,
)

SPECIAL_INTENTS = (IntentType.GREETING, IntentType.HELP, IntentType.FAQ_INFO, IntentType.PRODUCT_INFO)

PRODUCT_INFO_LIMIT = 3

# Intent filter fields -> persisted filter keys
FILTER_FIELD_KEYS = {
    "category": "category",
    "color": "color",
    "material": "material",
    "brand": "brand",
    "price_min": "priceMin",
    "price_max": "priceMax",
}


class ShoppingAssistant:
    """Per-message dialogue manager for the furniture shopping assistant."""

    def __init__(self, store, classifier, reformulator, search_service, response_generator,
                 supported_languages: Optional[List[str]] = None, result_limit: int = SEARCH_RESULT_LIMIT):
        self.store = store
        self.classifier = classifier
        self.reformulator = reformulator
        self.search_service = search_service
        self.response_generator = response_generator
        self.supported_languages = supported_languages or SUPPORTED_LANGUAGES
        self.result_limit = result_limit

    async def process_message(self, thread_id: str, message: str) -> AgentResponse:
        """
        Process one user message.

        Args:
            thread_id: Conversation thread identifier
            message: Raw user message

        Returns:
            AgentResponse with intro, products, follow-up and metadata

        Raises:
            SearchServiceError: the product search failed
            LLMServiceUnavailableError / LLMConfigurationError: from the narrative generator
        """
        async with self.store.thread_lock(thread_id):
            return await self._process(thread_id, message)

    async def _process(self, thread_id: str, message: str) -> AgentResponse:
        logger.info(f"Processing message for thread {thread_id}: '{message[:200]}'")

        # StateLookup
        state = await self.store.get_or_create(thread_id)

        # IntentResolution
        intent = await self.classifier.extract(message, self._classifier_context(state))
        intent = resolve_follow_up(message, intent, state)
        logger.info(f"Thread {thread_id}: intent={intent.intent.value} language={intent.language}")

        # LanguageGate
        if intent.language not in self.supported_languages:
            logger.info(f"Thread {thread_id}: unsupported language '{intent.language}', refusing")
            generated = self.response_generator.unsupported_language_response()
            await self._record_turn(thread_id, message, generated, intent)
            return self._assemble(generated, [], SearchType.NONE, intent)

        state = await self.store.update(thread_id, SetLanguage(value=intent.language))

        # SpecialIntent
        if intent.intent in SPECIAL_INTENTS:
            return await self._special_intent(thread_id, message, intent, state)

        return await self._search_turn(thread_id, message, intent, state)

    async def _special_intent(self, thread_id: str, message: str, intent: Intent,
                              state: ConversationState) -> AgentResponse:
        products: List[Product] = []
        search_type = SearchType.NONE
        faq_topic = None

        if intent.intent == IntentType.PRODUCT_INFO:
            products = state.search.results[:PRODUCT_INFO_LIMIT]
            search_type = state.search.search_type if products else SearchType.NONE
        elif intent.intent == IntentType.FAQ_INFO:
            faq_topic = intent.faq_topic or "other"

        logger.info(f"Thread {thread_id}: special intent {intent.intent.value}, no search")
        generated = await self.response_generator.generate(ResponseContext(
            language=intent.language,
            has_products=bool(products),
            product_count=len(products),
            products=products,
            active_filters=state.filters.active(),
            intent=intent.intent.value,
            faq_topic=faq_topic,
        ))

        await self.store.update(thread_id, SetLastIntent(intent=intent.intent.value, faq_topic=faq_topic))
        await self._record_turn(thread_id, message, generated, intent)
        return self._assemble(generated, products, search_type, intent)

    async def _search_turn(self, thread_id: str, message: str, intent: Intent,
                           state: ConversationState) -> AgentResponse:
        # Nothing below is written to the store until the search has succeeded

        # BaseQueryDetermination
        stored_base = state.search.base_query
        new_base: Optional[str] = None if stored_base else (intent.search_query or message)

        # NewSearchCheck
        new_search = False
        if stored_base:
            rule = match_new_search_rule(message, stored_base, intent)
            new_search = rule.is_new_search
            logger.info(f"Thread {thread_id}: new-search rule '{rule.name}' -> new_search={new_search}")
            if new_search:
                new_base = intent.search_query or message

        # Reformulation
        if new_search:
            query = message
        elif intent.intent == IntentType.FILTER_CLEAR and stored_base:
            query = stored_base
        else:
            reformulated = await self.reformulator.reformulate(message, ReformulationContext(
                base_query=stored_base,
                last_search_query=state.search.query or None,
                active_filters=state.filters.active(),
                language=intent.language,
            ))
            query = reformulated.query
            if reformulated.is_new_search and stored_base:
                new_base = intent.search_query or query
                logger.info(f"Thread {thread_id}: reformulator started a new search episode")

        # FilterMerge
        clear_filters = intent.intent == IntentType.FILTER_CLEAR
        filter_updates = {FILTER_FIELD_KEYS[field]: value for field, value in intent.filters.present().items()}
        active_filters = {} if clear_filters else state.filters.active()
        active_filters.update(filter_updates)

        # SearchDispatch
        logger.info(f"Thread {thread_id}: searching '{query}' with filters {active_filters}")
        try:
            result = await self.search_service.search(query, active_filters, n=self.result_limit, mode="auto")
        except Exception:
            log_search_query(thread_id, query, 0, success=False)
            raise
        log_search_query(thread_id, query, result.count, success=True, search_type=result.search_type.value)

        # StateUpdate
        if new_base is not None:
            await self.store.update(thread_id, SetBaseQuery(value=new_base))
        if clear_filters:
            await self.store.update(thread_id, ClearFilters())
            logger.info(f"Thread {thread_id}: filters cleared")
        for key, value in filter_updates.items():
            await self.store.update(thread_id, SetFilter(key=key, value=value))
        await self.store.update(thread_id, SetSearch(
            query=query,
            results=result.products,
            search_type=result.search_type,
        ))
        await self.store.update(thread_id, SetLastIntent(intent=IntentType.SEARCH.value))

        # ResponseAssembly
        generated = await self.response_generator.generate(ResponseContext(
            language=intent.language,
            has_products=result.count > 0,
            product_count=result.count,
            products=result.products,
            search_query=query,
            active_filters=active_filters,
            intent=intent.intent.value,
        ))
        await self._record_turn(thread_id, message, generated, intent)
        return self._assemble(generated, result.products, result.search_type, intent)

    async def _record_turn(self, thread_id: str, message: str, generated: GeneratedResponse, intent: Intent):
        await self.store.update(thread_id, AddMessage(role="user", content=message))
        await self.store.update(thread_id, AddMessage(role="assistant", content=generated.intro))
        log_user_interaction(thread_id, message, generated.intro, intent.intent.value)

    @staticmethod
    def _classifier_context(state: ConversationState) -> ClassifierContext:
        return ClassifierContext(
            current_category=state.filters.category,
            active_filters=state.filters.active(),
            last_query=state.search.query or None,
            last_intent=state.last_intent,
            last_faq_topic=state.last_faq_topic,
        )

    @staticmethod
    def _assemble(generated: GeneratedResponse, products: List[Product], search_type: SearchType,
                  intent: Intent) -> AgentResponse:
        return AgentResponse(
            intro=generated.intro,
            products=products,
            follow_up=generated.follow_up,
            meta=ResponseMeta(
                has_products=bool(products),
                search_type=search_type if products else SearchType.NONE,
                product_count=len(products),
                intent=intent.intent.value,
                detected_language=intent.language,
            ),
        )

    # --- Conversation utilities ---

    async def get_conversation_state(self, thread_id: str) -> Optional[ConversationState]:
        """Conversation state for debugging / monitoring, None when the thread is unknown."""
        return await self.store.get(thread_id)

    async def reset_conversation(self, thread_id: str) -> bool:
        async with self.store.thread_lock(thread_id):
            deleted = await self.store.delete(thread_id)
        logger.info(f"Reset conversation for thread {thread_id}")
        return deleted

    async def get_state_summary(self, thread_id: str) -> str:
        state = await self.store.get(thread_id)
        if state is None:
            return "No state found"
        return build_context_string(state)
