from unittest.mock import AsyncMock

import pytest

from config import STORE_ADDRESS, STORE_HOURS
from conftest import make_product
from errors import LLMConfigurationError, LLMResponseError, LLMServiceUnavailableError
from response_generator import ResponseContext, ResponseGenerator


@pytest.fixture
def generator(unavailable_llm):
    return ResponseGenerator(llm_call=unavailable_llm)


@pytest.fixture
def three_products():
    return [make_product("P1", "Sofa Oslo"), make_product("P2", "Sofa Nordic"), make_product("P3", "Sofa Bali")]


class TestStaticTexts:

    async def test_greeting_id(self, generator):
        response = await generator.generate(ResponseContext(language="id", intent="greeting"))
        assert response.intro.startswith("Halo! Saya asisten belanja Home Decor.")
        assert response.follow_up == "Apa yang sedang Anda cari hari ini?"

    async def test_greeting_en(self, generator):
        response = await generator.generate(ResponseContext(language="en", intent="greeting"))
        assert response.intro.startswith("Hi! I'm your Home Decor shopping assistant.")
        assert response.follow_up == "What are you looking for today?"

    async def test_help(self, generator):
        response = await generator.generate(ResponseContext(language="en", intent="help"))
        assert "furniture" in response.intro

    async def test_faq_location_offers_hours(self, generator):
        response = await generator.generate(ResponseContext(language="id", intent="faq_info", faq_topic="location"))
        assert STORE_ADDRESS in response.intro
        assert "jam buka" in response.follow_up

    async def test_faq_hours(self, generator):
        response = await generator.generate(ResponseContext(language="en", intent="faq_info", faq_topic="hours"))
        assert STORE_HOURS in response.intro

    async def test_unknown_faq_topic_uses_other(self, generator):
        response = await generator.generate(ResponseContext(language="en", intent="faq_info", faq_topic="parking"))
        assert "customer service" in response.intro

    async def test_product_info(self, generator, three_products):
        response = await generator.generate(ResponseContext(
            language="id", intent="product_info", has_products=True, product_count=3, products=three_products,
        ))
        assert response.intro == "Ini 3 produk teratas dari pencarian terakhir Anda."

    async def test_product_info_without_products(self, generator):
        response = await generator.generate(ResponseContext(language="en", intent="product_info"))
        assert response.intro == "I don't have any products to show yet."

    async def test_unsupported_language_is_bilingual(self, generator):
        response = generator.unsupported_language_response()
        assert "Bahasa Indonesia" in response.intro
        assert "Indonesian or English" in response.intro


class TestNoResults:

    async def test_with_filters(self, generator):
        response = await generator.generate(ResponseContext(
            language="id", intent="search", active_filters={"color": "ungu"},
        ))
        assert response.intro == "Maaf, saya tidak menemukan produk yang cocok dengan pencarian Anda."
        assert response.follow_up == "Coba kurangi filter atau ganti kategori."

    async def test_without_filters(self, generator):
        response = await generator.generate(ResponseContext(language="en", intent="search"))
        assert response.intro == "Sorry, I couldn't find any products matching your criteria."
        assert response.follow_up == "Try a different search term."


class TestNarrative:

    async def test_llm_narrative(self, three_products):
        llm = AsyncMock(return_value={"intro": "Ada beberapa sofa cantik!", "followUp": "Suka warna apa?"})
        generator = ResponseGenerator(llm_call=llm)
        response = await generator.generate(ResponseContext(
            language="id", intent="search", has_products=True, product_count=3, products=three_products,
            active_filters={"category": "sofa"},
        ))
        assert response.intro == "Ada beberapa sofa cantik!"
        assert response.follow_up == "Suka warna apa?"
        prompt = llm.await_args.args[0]
        assert "Ditemukan 3 produk" in prompt
        assert "Sofa Oslo, Sofa Nordic, Sofa Bali" in prompt
        assert "Kategori: sofa" in prompt
        assert llm.await_args.kwargs["temperature"] == 0.7

    async def test_timeout_uses_fallback(self, generator, three_products):
        response = await generator.generate(ResponseContext(
            language="en", intent="search", has_products=True, product_count=3, products=three_products,
        ))
        assert response.intro == "Here are 3 products you might like."
        assert response.follow_up == "Any questions about these products?"

    async def test_malformed_output_uses_fallback(self, three_products):
        generator = ResponseGenerator(llm_call=AsyncMock(return_value={"intro": "Halo"}))
        response = await generator.generate(ResponseContext(
            language="id", intent="search", has_products=True, product_count=3, products=three_products,
        ))
        assert response.intro == "Berikut 3 produk yang mungkin Anda suka."

    @pytest.mark.parametrize("error", [LLMServiceUnavailableError("429"), LLMConfigurationError("401")])
    async def test_rate_limit_and_auth_errors_propagate(self, error, three_products):
        generator = ResponseGenerator(llm_call=AsyncMock(side_effect=error))
        with pytest.raises(type(error)):
            await generator.generate(ResponseContext(
                language="id", intent="search", has_products=True, product_count=3, products=three_products,
            ))

    async def test_static_intents_never_call_llm(self):
        llm = AsyncMock(side_effect=LLMResponseError("should not be called"))
        generator = ResponseGenerator(llm_call=llm)
        await generator.generate(ResponseContext(language="id", intent="greeting"))
        llm.assert_not_awaited()
