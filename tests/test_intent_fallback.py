import pytest

from intent_fallback import fallback_intent
from response_models import IntentType


class TestIntentLabels:

    @pytest.mark.parametrize("message", ["halo", "Hai kak", "selamat pagi", "hello there"])
    def test_greeting(self, message):
        assert fallback_intent(message).intent == IntentType.GREETING

    @pytest.mark.parametrize("message", ["help", "bantu saya", "bagaimana cara pesan?"])
    def test_help(self, message):
        assert fallback_intent(message).intent == IntentType.HELP

    @pytest.mark.parametrize("message", ["hapus filter", "reset", "tolong kosongkan filternya"])
    def test_filter_clear(self, message):
        assert fallback_intent(message).intent == IntentType.FILTER_CLEAR

    def test_greeting_checked_before_reset(self):
        assert fallback_intent("halo, reset dong").intent == IntentType.GREETING

    @pytest.mark.parametrize("message,topic", [
        ("alamat toko dimana?", "location"),
        ("jam buka showroom?", "hours"),
        ("berapa ongkir ke bandung", "shipping"),
        ("bisa cicilan?", "payment"),
        ("ada garansi?", "warranty"),
    ])
    def test_faq_topics(self, message, topic):
        intent = fallback_intent(message)
        assert intent.intent == IntentType.FAQ_INFO
        assert intent.faq_topic == topic

    @pytest.mark.parametrize("message", ["iya", "ok", "boleh"])
    def test_bare_affirmative_is_unknown(self, message):
        assert fallback_intent(message).intent == IntentType.UNKNOWN

    def test_everything_else_is_search(self):
        assert fallback_intent("sofa minimalis").intent == IntentType.SEARCH


class TestExtraction:

    def test_lead_in_stripped_and_attributes_extracted(self):
        intent = fallback_intent("Saya mau cari sofa putih")
        assert intent.language == "id"
        assert intent.search_query == "sofa"
        assert intent.filters.color == "putih"
        assert intent.filters.category == "sofa"

    def test_english_synonyms_normalized_to_indonesian(self):
        intent = fallback_intent("show me a white leather couch")
        assert intent.language == "en"
        assert intent.filters.color == "putih"
        assert intent.filters.material == "kulit"
        assert intent.filters.category == "sofa"

    def test_normalization_direction_is_configurable(self):
        intent = fallback_intent("sofa putih kayu", canonical_language="en")
        assert intent.filters.color == "white"
        assert intent.filters.material == "wood"

    def test_attribute_only_rejoined_with_last_query(self):
        intent = fallback_intent("yang putih", last_query="sofa")
        assert intent.search_query == "sofa putih"

    def test_attribute_only_without_last_query(self):
        assert fallback_intent("yang putih").search_query == "putih"

    def test_no_price_or_brand_guessing(self):
        filters = fallback_intent("sofa murah").filters
        assert filters.price_min is None and filters.price_max is None and filters.brand is None
