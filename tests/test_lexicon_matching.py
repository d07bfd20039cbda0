import pytest

from lexicon_matching import (
    canonical,
    categories_in,
    contains_term,
    detect_language,
    find_all,
    find_first,
    is_affirmative,
    meaningful_words,
    names_category,
    starts_with_any,
    strip_leading,
    strip_terms,
)
from lexicons import CATEGORIES, COLORS, LEAD_IN_PHRASES


class TestTermMatching:

    def test_whole_words_only(self):
        assert contains_term("sofa putih", "sofa")
        assert not contains_term("sofabed", "sofa")

    def test_hyphen_is_part_of_word(self):
        assert not contains_term("sofa abu-abu", "abu")
        assert find_first("sofa abu-abu", COLORS) == "abu-abu"

    def test_multi_word_category_wins(self):
        assert find_first("coffee table kayu", CATEGORIES) == "coffee table"

    def test_find_all_in_lexicon_order(self):
        assert find_all("meja dan kursi", CATEGORIES) == ["meja", "kursi"]

    def test_case_insensitive(self):
        assert contains_term("Sofa PUTIH", "putih")


class TestStripping:

    def test_strip_terms_longest_first(self):
        assert strip_terms("meja kayu jati", ["kayu", "kayu jati"]) == "meja"

    def test_strip_leading_phrase(self):
        assert strip_leading("saya mau cari sofa", LEAD_IN_PHRASES) == "sofa"

    def test_strip_leading_requires_word_boundary(self):
        assert strip_leading("adalah", LEAD_IN_PHRASES) == "adalah"

    def test_starts_with_any_handles_comma(self):
        assert starts_with_any("halo, ada sofa?", ["halo"]) == "halo"

    def test_meaningful_words_drop_fillers(self):
        assert meaningful_words("saya mau yang warna putih dong") == ["putih"]


class TestLanguage:

    @pytest.mark.parametrize("message", ["ada sofa putih?", "halo", "iya", "meja kayu"])
    def test_indonesian(self, message):
        assert detect_language(message) == "id"

    @pytest.mark.parametrize("message", ["show me a white sofa", "hello", "wooden table"])
    def test_english(self, message):
        assert detect_language(message) == "en"


class TestAffirmative:

    @pytest.mark.parametrize("message", ["iya", "Ya!", "ok", "oke sip", "boleh", "yes please", "sure"])
    def test_affirmative(self, message):
        assert is_affirmative(message)

    @pytest.mark.parametrize("message", ["iya sofa putih", "no", "tidak", "ok cari meja", ""])
    def test_not_affirmative(self, message):
        assert not is_affirmative(message)


class TestCanonical:

    def test_english_to_indonesian(self):
        assert canonical("color", "white") == "putih"
        assert canonical("material", "Leather") == "kulit"
        assert canonical("category", "couch") == "sofa"

    def test_indonesian_to_english(self):
        assert canonical("color", "putih", language="en") == "white"
        assert canonical("material", "kayu", language="en") == "wood"

    def test_variants_collapse(self):
        assert canonical("color", "abu-abu") == "abu"
        assert canonical("color", "grey") == "abu"

    def test_unknown_term_unchanged(self):
        assert canonical("color", "magenta") == "magenta"


class TestCategoryNaming:

    def test_categories_in_are_canonical(self):
        assert categories_in("white chair and a couch") == {"kursi", "sofa"}

    @pytest.mark.parametrize("text,category", [
        ("chair", "kursi"),
        ("kursi", "chair"),
        ("sofa putih", "couch"),
        ("armchair merah", "armchair"),
    ])
    def test_names_category_across_languages(self, text, category):
        assert names_category(text, category)

    def test_more_specific_category_is_different(self):
        assert not names_category("meja", "meja makan")
