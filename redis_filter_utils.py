"""
Redis filter utilities for product search
Builds RediSearch filter expressions from the conversation's filter set
"""

import re
from typing import Any, Dict, Optional

from lexicons import FILLER_WORDS

# RediSearch treats these as syntax inside TAG values and full-text terms
_TAG_SPECIAL_CHARS = re.compile(r"([,.<>{}\[\]\"':;!@#$%^&*()\-+=~|/\\ ])")
_TEXT_TOKEN = re.compile(r"[\w]+", re.UNICODE)

TAG_FIELDS = ("category", "color", "material", "brand")


def escape_tag_value(value: str) -> str:
    """Escape a value for use inside a TAG clause, e.g. 'abu-abu' -> 'abu\\-abu'."""
    return _TAG_SPECIAL_CHARS.sub(r"\\\1", value.strip().lower())


def create_tag_filter(field: str, value: Optional[str]) -> str:
    """
    Create Redis filter for a TAG field

    Args:
        field: TAG field name (e.g., 'color')
        value: Value to match exactly, case-insensitive

    Returns:
        str: Redis filter string, empty when value is None
    """
    if value is None or not str(value).strip():
        return ""
    return f"@{field}:{{{escape_tag_value(str(value))}}}"


def _format_number(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else str(value)


def create_price_filter(price_min: Optional[float], price_max: Optional[float]) -> str:
    """
    Create price filter on the numeric price field

    Args:
        price_min: Minimum price, None for no lower bound
        price_max: Maximum price, None for no upper bound

    Returns:
        str: Redis filter string for the price range
    """
    if price_min is None and price_max is None:
        return ""

    lower = "-inf" if price_min is None else _format_number(price_min)
    upper = "+inf" if price_max is None else _format_number(price_max)
    return f"@price:[{lower} {upper}]"


def create_text_clause(query: str) -> str:
    """Full-text clause matching any non-filler word of the query in the search_text field."""
    tokens = [token for token in _TEXT_TOKEN.findall(query.lower()) if token not in FILLER_WORDS]
    if not tokens:
        return ""
    return f"@search_text:({'|'.join(tokens)})"


def build_combined_filter(
    category: str = None,
    color: str = None,
    material: str = None,
    brand: str = None,
    price_min: float = None,
    price_max: float = None
) -> str:
    """
    Build a combined Redis filter string with all specified filters

    Returns:
        str: Combined Redis filter string, "*" when nothing is set
    """
    filters = []

    for field, value in zip(TAG_FIELDS, (category, color, material, brand)):
        tag_filter = create_tag_filter(field, value)
        if tag_filter:
            filters.append(tag_filter)

    price_filter = create_price_filter(price_min, price_max)
    if price_filter:
        filters.append(price_filter)

    if not filters:
        return "*"  # No filters, match all

    # AND logic (space separator)
    return " ".join(filters)


def build_filter_from_state(filters: Optional[Dict[str, Any]]) -> str:
    """Combined filter from a persisted filter map (camelCase keys)."""
    filters = filters or {}
    return build_combined_filter(
        category=filters.get("category"),
        color=filters.get("color"),
        material=filters.get("material"),
        brand=filters.get("brand"),
        price_min=filters.get("priceMin"),
        price_max=filters.get("priceMax"),
    )
