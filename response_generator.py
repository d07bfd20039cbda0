"""
Response Generator Module

Produces the intro / follow-up lines shown around the product cards. Greeting,
help, FAQ, product-info and no-result replies are fixed bilingual texts; only
replies to a successful search use a short Groq narrative, with a fixed
fallback when the model is slow or returns malformed output.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from config import RESPONSE_MODEL, RESPONSE_TIMEOUT_SECONDS, STORE_ADDRESS, STORE_HOURS, STORE_NAME
from errors import LLMResponseError
from groq_utils import call_groq_json
from logger_config import logger
from prompts import RESPONSE_NARRATIVE_SYSTEM_PROMPTS, RESPONSE_NARRATIVE_USER_PROMPTS
from response_models import GeneratedResponse, IntentType, Product


class ResponseContext(BaseModel):
    language: str = "id"
    has_products: bool = False
    product_count: int = 0
    products: List[Product] = Field(default_factory=list)
    search_query: Optional[str] = None
    active_filters: Dict[str, Any] = Field(default_factory=dict)
    intent: Optional[str] = None
    faq_topic: Optional[str] = None


GREETING = {
    "id": ("Halo! Saya asisten belanja Home Decor. Ada yang bisa saya bantu? "
           "Anda bisa mencari sofa, meja, kursi, atau furnitur lainnya.",
           "Apa yang sedang Anda cari hari ini?"),
    "en": ("Hi! I'm your Home Decor shopping assistant. How can I help you today? "
           "You can search for sofas, tables, chairs, and more.",
           "What are you looking for today?"),
}

HELP = {
    "id": ("Saya bisa membantu Anda mencari furnitur. Sebutkan jenis produk, lalu tambahkan warna, "
           "bahan, atau kisaran harga, misalnya \"sofa abu-abu\" atau \"meja kayu di bawah 2 juta\".",
           "Produk apa yang ingin Anda cari?"),
    "en": ("I can help you find furniture. Tell me the type of product, then add a color, material "
           "or price range, for example \"grey sofa\" or \"wooden table under 2 million\".",
           "What product would you like to find?"),
}

FAQ = {
    "location": {
        "id": (f"Showroom {STORE_NAME} ada di {STORE_ADDRESS}.", "Mau tahu jam buka kami juga?"),
        "en": (f"The {STORE_NAME} showroom is at {STORE_ADDRESS}.", "Would you like to know our opening hours too?"),
    },
    "hours": {
        "id": (f"Showroom kami buka setiap hari pukul {STORE_HOURS}.", "Ada lagi yang bisa saya bantu?"),
        "en": (f"Our showroom is open daily from {STORE_HOURS}.", "Is there anything else I can help with?"),
    },
    "shipping": {
        "id": ("Kami mengirim ke seluruh Indonesia. Ongkos kirim dihitung saat checkout sesuai alamat tujuan.",
               "Mau saya bantu carikan produknya?"),
        "en": ("We deliver across Indonesia. Shipping costs are calculated at checkout based on your address.",
               "Shall I help you find a product?"),
    },
    "payment": {
        "id": ("Kami menerima transfer bank, kartu kredit, e-wallet, dan cicilan 0% untuk kartu tertentu.",
               "Ada produk yang sedang Anda incar?"),
        "en": ("We accept bank transfer, credit cards, e-wallets and 0% installments on selected cards.",
               "Is there a product you have in mind?"),
    },
    "warranty": {
        "id": ("Semua furnitur bergaransi 1 tahun untuk cacat produksi. Retur dapat diajukan dalam 7 hari setelah barang diterima.",
               "Ada lagi yang ingin Anda ketahui?"),
        "en": ("All furniture comes with a 1-year warranty against manufacturing defects. Returns can be requested within 7 days of delivery.",
               "Is there anything else you'd like to know?"),
    },
    "other": {
        "id": ("Untuk pertanyaan tersebut, tim layanan pelanggan kami akan dengan senang hati membantu.",
               "Mau saya jelaskan apa saja yang bisa saya bantu?"),
        "en": ("Our customer service team will be happy to help with that question.",
               "Would you like to hear what I can help with?"),
    },
}

PRODUCT_INFO = {
    "id": ("Ini {count} produk teratas dari pencarian terakhir Anda.",
           "Produk mana yang ingin Anda ketahui lebih lanjut?"),
    "en": ("Here are the top {count} products from your last search.",
           "Which one would you like to know more about?"),
}

NO_PREVIOUS_PRODUCTS = {
    "id": ("Belum ada produk yang bisa saya tampilkan.", "Apa yang sedang Anda cari hari ini?"),
    "en": ("I don't have any products to show yet.", "What are you looking for today?"),
}

NO_RESULTS = {
    "id": ("Maaf, saya tidak menemukan produk yang cocok dengan pencarian Anda.",
           "Coba kurangi filter atau ganti kategori.",
           "Coba cari dengan kata kunci lain."),
    "en": ("Sorry, I couldn't find any products matching your criteria.",
           "Try reducing your filters or changing the category.",
           "Try a different search term."),
}

PRODUCT_FALLBACK = {
    "id": ("Berikut {count} produk yang mungkin Anda suka.", "Ada yang ingin Anda tanyakan tentang produk ini?"),
    "en": ("Here are {count} products you might like.", "Any questions about these products?"),
}

UNSUPPORTED_LANGUAGE = GeneratedResponse(
    intro=("Maaf, saat ini saya hanya bisa membantu dalam Bahasa Indonesia atau English. "
           "Sorry, I can only help in Indonesian or English right now."),
    follow_up=("Silakan tulis pesan Anda dalam Bahasa Indonesia atau English. "
               "Please write your message in Indonesian or English."),
)


def _lang(language: str) -> str:
    return "id" if language == "id" else "en"


def _pair(texts: Dict[str, tuple], language: str, **fmt) -> GeneratedResponse:
    intro, follow_up = texts[_lang(language)][:2]
    return GeneratedResponse(intro=intro.format(**fmt), follow_up=follow_up.format(**fmt))


class ResponseGenerator:
    """Builds the narrative part of every assistant response."""

    def __init__(self, model: str = RESPONSE_MODEL, timeout: float = RESPONSE_TIMEOUT_SECONDS,
                 llm_call=call_groq_json):
        self.model = model
        self.timeout = timeout
        self.llm_call = llm_call

    async def generate(self, context: ResponseContext) -> GeneratedResponse:
        """
        Generate intro and follow-up for a processed message.

        Raises:
            LLMServiceUnavailableError: Groq rate limit / overload during the narrative call
            LLMConfigurationError: Groq credentials rejected or client missing
        """
        if context.intent == IntentType.GREETING:
            return _pair(GREETING, context.language)
        if context.intent == IntentType.HELP:
            return _pair(HELP, context.language)
        if context.intent == IntentType.FAQ_INFO:
            return self.faq_response(context.faq_topic, context.language)
        if context.intent == IntentType.PRODUCT_INFO:
            if not context.has_products:
                return _pair(NO_PREVIOUS_PRODUCTS, context.language)
            return _pair(PRODUCT_INFO, context.language, count=context.product_count)
        if not context.has_products:
            return self.no_results_response(context)
        return await self.product_response(context)

    @staticmethod
    def faq_response(topic: Optional[str], language: str) -> GeneratedResponse:
        return _pair(FAQ.get(topic or "other", FAQ["other"]), language)

    @staticmethod
    def no_results_response(context: ResponseContext) -> GeneratedResponse:
        intro, with_filters, without_filters = NO_RESULTS[_lang(context.language)]
        return GeneratedResponse(intro=intro, follow_up=with_filters if context.active_filters else without_filters)

    @staticmethod
    def unsupported_language_response() -> GeneratedResponse:
        return UNSUPPORTED_LANGUAGE.model_copy()

    async def product_response(self, context: ResponseContext) -> GeneratedResponse:
        language = _lang(context.language)
        product_names = ", ".join(p.item_name for p in context.products[:3])
        category_hint = context.active_filters.get("category") or next(
            (p.categories[0] for p in context.products if p.categories), ""
        )
        prompt = RESPONSE_NARRATIVE_USER_PROMPTS[language].format(
            count=context.product_count,
            product_names=product_names,
            category=category_hint or ("berbagai" if language == "id" else "various"),
        )

        try:
            data = await self.llm_call(
                prompt,
                RESPONSE_NARRATIVE_SYSTEM_PROMPTS[language],
                model=self.model,
                timeout=self.timeout,
                temperature=0.7,
                max_completion_tokens=256,
            )
            return GeneratedResponse.model_validate(data)
        except (LLMResponseError, ValidationError) as e:
            logger.warning(f"Narrative generation failed, using fallback text: {type(e).__name__}: {e}")
            return _pair(PRODUCT_FALLBACK, language, count=context.product_count)


response_generator = ResponseGenerator()
