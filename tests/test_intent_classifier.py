from unittest.mock import AsyncMock

import pytest

from errors import LLMConfigurationError, LLMResponseError
from intent_classifier import ClassifierContext, IntentClassifier
from response_models import IntentType


@pytest.fixture
def context():
    return ClassifierContext(
        current_category="sofa",
        active_filters={"category": "sofa", "color": "putih"},
        last_query="sofa putih",
        last_intent="search",
    )


class TestLLMPath:

    async def test_valid_response_is_used(self, context):
        llm = AsyncMock(return_value={
            "intent": "filter_add",
            "search_query": "sofa",
            "filters": {"color": "black", "material": "Leather", "price_max": 3000000},
            "language": "en",
            "faq_topic": None,
        })
        classifier = IntentClassifier(llm_call=llm, timeout=2)
        intent = await classifier.extract("in black leather under 3 million", context)

        assert intent.intent == IntentType.FILTER_ADD
        assert intent.language == "en"
        assert intent.filters.color == "hitam"
        assert intent.filters.material == "kulit"
        assert intent.filters.price_max == 3000000
        assert llm.await_args.kwargs["timeout"] == 2

    async def test_context_is_sent(self, context):
        llm = AsyncMock(return_value={"intent": "search", "language": "id"})
        await IntentClassifier(llm_call=llm).extract("yang kayu", context)
        message_for_groq = llm.await_args.args[0]
        assert "Current category: sofa" in message_for_groq
        assert "color=putih" in message_for_groq
        assert "Last search query: sofa putih" in message_for_groq
        assert message_for_groq.endswith("Latest message: yang kayu")

    async def test_null_filters_accepted(self):
        llm = AsyncMock(return_value={"intent": "greeting", "filters": None, "language": "ID"})
        intent = await IntentClassifier(llm_call=llm).extract("halo")
        assert intent.intent == IntentType.GREETING
        assert intent.filters.present() == {}
        assert intent.language == "id"

    async def test_other_languages_passed_through(self):
        llm = AsyncMock(return_value={"intent": "search", "language": "fr"})
        intent = await IntentClassifier(llm_call=llm).extract("je cherche un canapé")
        assert intent.language == "fr"


class TestFallback:

    @pytest.mark.parametrize("error", [
        LLMResponseError("timed out"),
        LLMConfigurationError("bad key"),
    ])
    async def test_llm_errors_degrade_to_rules(self, error, context):
        classifier = IntentClassifier(llm_call=AsyncMock(side_effect=error))
        intent = await classifier.extract("yang hitam", context)
        assert intent.intent == IntentType.SEARCH
        assert intent.filters.color == "hitam"
        assert intent.search_query == "sofa putih hitam"

    async def test_invalid_intent_label_degrades_to_rules(self):
        classifier = IntentClassifier(llm_call=AsyncMock(return_value={"intent": "buy_now", "language": "id"}))
        intent = await classifier.extract("halo")
        assert intent.intent == IntentType.GREETING
