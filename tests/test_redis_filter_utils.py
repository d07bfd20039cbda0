from redis_filter_utils import (
    build_combined_filter,
    build_filter_from_state,
    create_price_filter,
    create_tag_filter,
    create_text_clause,
    escape_tag_value,
)


class TestTagFilters:

    def test_simple_tag(self):
        assert create_tag_filter("color", "Putih") == "@color:{putih}"

    def test_special_characters_escaped(self):
        assert escape_tag_value("abu-abu") == "abu\\-abu"
        assert create_tag_filter("brand", "IKEA Home") == "@brand:{ikea\\ home}"

    def test_missing_value(self):
        assert create_tag_filter("color", None) == ""
        assert create_tag_filter("color", "  ") == ""


class TestPriceFilter:

    def test_range(self):
        assert create_price_filter(1000000, 3000000) == "@price:[1000000 3000000]"

    def test_open_ended(self):
        assert create_price_filter(None, 2000000) == "@price:[-inf 2000000]"
        assert create_price_filter(500000, None) == "@price:[500000 +inf]"

    def test_zero_is_a_bound(self):
        assert create_price_filter(0, None) == "@price:[0 +inf]"

    def test_fractional(self):
        assert create_price_filter(99.5, None) == "@price:[99.5 +inf]"

    def test_no_bounds(self):
        assert create_price_filter(None, None) == ""


class TestCombinedFilter:

    def test_empty_matches_all(self):
        assert build_combined_filter() == "*"

    def test_clauses_joined_with_and(self):
        combined = build_combined_filter(category="sofa", color="putih", price_max=3000000)
        assert combined == "@category:{sofa} @color:{putih} @price:[-inf 3000000]"

    def test_from_state_uses_camel_case_keys(self):
        combined = build_filter_from_state({"material": "kayu", "priceMin": 0, "priceMax": 1500000})
        assert combined == "@material:{kayu} @price:[0 1500000]"

    def test_from_empty_state(self):
        assert build_filter_from_state(None) == "*"


class TestTextClause:

    def test_words_or_joined(self):
        assert create_text_clause("Sofa Putih") == "@search_text:(sofa|putih)"

    def test_punctuation_dropped(self):
        assert create_text_clause("sofa, murah!") == "@search_text:(sofa|murah)"

    def test_empty(self):
        assert create_text_clause("?!") == ""

    def test_filler_words_dropped(self):
        assert create_text_clause("ada meja yang kayu") == "@search_text:(meja|kayu)"

    def test_only_filler_words(self):
        assert create_text_clause("apa ada yang") == ""
