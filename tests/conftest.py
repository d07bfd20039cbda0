"""
Shared fixtures: an in-memory store, a recording fake search service, and an
assistant wired with the real rule-based components and an LLM that is always
unavailable, so every test exercises the deterministic paths.
"""
import os
import tempfile

os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="assistant-logs-"))
os.environ.setdefault("STATE_BACKEND", "memory")

import asyncio
from typing import List, Optional
from unittest.mock import AsyncMock

import pytest

from conversation_storage import InMemoryConversationStore
from errors import LLMResponseError
from intent_classifier import IntentClassifier
from query_reformulator import QueryReformulator
from response_generator import ResponseGenerator
from response_models import Product, ProductPrice, SearchResult, SearchType
from shopping_assistant import ShoppingAssistant


def make_product(item_id: str, name: str, category: str = "sofa", price: float = 2500000) -> Product:
    return Product(
        item_id=item_id,
        item_name=name,
        item_description=f"{name} untuk ruang tamu",
        brand="Informa",
        prices=[ProductPrice(price=price)],
        categories=[category],
    )


class FakeSearchService:
    """Records every search call and returns a fixed product list."""

    def __init__(self, products: Optional[List[Product]] = None, error: Optional[Exception] = None,
                 delay: float = 0.0):
        self.products = products or []
        self.error = error
        self.delay = delay
        self.calls = []
        self.active = 0
        self.max_active = 0

    async def search(self, query, filters=None, n=10, mode="auto"):
        self.calls.append({"query": query, "filters": dict(filters or {}), "n": n, "mode": mode})
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.error is not None:
                raise self.error
        finally:
            self.active -= 1
        products = self.products[:n]
        return SearchResult(
            products=products,
            count=len(products),
            search_type=SearchType.VECTOR if products else SearchType.NONE,
        )


@pytest.fixture
def products():
    return [
        make_product("SF-001", "Sofa Oslo 3 Dudukan"),
        make_product("SF-002", "Sofa Bed Lipat Nordic"),
        make_product("SF-003", "Sofa L Minimalis"),
        make_product("SF-004", "Sofa Kulit Chesterfield"),
        make_product("SF-005", "Sofa Rotan Bali"),
    ]


@pytest.fixture
def unavailable_llm():
    return AsyncMock(side_effect=LLMResponseError("Groq call timed out"))


@pytest.fixture
def store():
    return InMemoryConversationStore()


@pytest.fixture
def search_service(products):
    return FakeSearchService(products)


@pytest.fixture
def make_assistant(store, unavailable_llm):
    def _make(search_service, classifier_llm=None):
        return ShoppingAssistant(
            store=store,
            classifier=IntentClassifier(llm_call=classifier_llm or unavailable_llm),
            reformulator=QueryReformulator(llm_call=unavailable_llm),
            search_service=search_service,
            response_generator=ResponseGenerator(llm_call=unavailable_llm),
            supported_languages=["id", "en"],
        )
    return _make


@pytest.fixture
def assistant(make_assistant, search_service):
    return make_assistant(search_service)
