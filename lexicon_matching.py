"""
Matching helpers over the word lists in lexicons.py.

All helpers lower-case their input and match whole terms only. A hyphen counts
as part of a word, so "abu" does not match inside "abu-abu".
"""

import re
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Set

from lexicons import (
    AFFIRMATIVE_TOKENS,
    CATEGORIES,
    CATEGORY_SYNONYMS,
    COLOR_SYNONYMS,
    FILLER_WORDS,
    INDONESIAN_INDICATORS,
    MATERIAL_SYNONYMS,
)

_WORD_RE = re.compile(r"[\w'-]+", re.UNICODE)
_SPACES_RE = re.compile(r"\s+")

AFFIRMATIVE_RE = re.compile(
    r"^(?:(?:" + "|".join(re.escape(t) for t in AFFIRMATIVE_TOKENS) + r")[\s,.!]*){1,3}$",
    re.IGNORECASE,
)


def normalize(text: Optional[str]) -> str:
    """Lower-case, trim and collapse whitespace."""
    if not text:
        return ""
    return _SPACES_RE.sub(" ", text.lower()).strip()


def tokenize(text: str) -> List[str]:
    return _WORD_RE.findall(normalize(text))


@lru_cache(maxsize=512)
def _term_pattern(term: str) -> re.Pattern:
    return re.compile(r"(?<![\w-])" + re.escape(term) + r"(?![\w-])")


def contains_term(text: str, term: str) -> bool:
    return bool(_term_pattern(term).search(normalize(text)))


def find_first(text: str, terms: Iterable[str]) -> Optional[str]:
    """Return the first term, in lexicon order, that occurs in the text."""
    normalized = normalize(text)
    for term in terms:
        if _term_pattern(term).search(normalized):
            return term
    return None


def find_all(text: str, terms: Iterable[str]) -> List[str]:
    """Return every term that occurs in the text, in lexicon order."""
    normalized = normalize(text)
    return [term for term in terms if _term_pattern(term).search(normalized)]


def starts_with_any(text: str, phrases: Iterable[str]) -> Optional[str]:
    """Return the phrase the text starts with (as whole words), if any."""
    normalized = normalize(text)
    for phrase in phrases:
        if normalized == phrase or normalized.startswith(phrase + " ") or normalized.startswith(phrase + ","):
            return phrase
    return None


def strip_terms(text: str, terms: Iterable[str]) -> str:
    """Remove every occurrence of the given terms, longest first."""
    result = normalize(text)
    for term in sorted(terms, key=len, reverse=True):
        result = _term_pattern(term).sub(" ", result)
    return _SPACES_RE.sub(" ", result).strip()


def strip_leading(text: str, phrases: Iterable[str]) -> str:
    """Strip one leading phrase (plus a trailing comma) from the text."""
    normalized = normalize(text)
    phrase = starts_with_any(normalized, sorted(phrases, key=len, reverse=True))
    if phrase is None:
        return normalized
    return normalized[len(phrase):].lstrip(" ,").strip()


def meaningful_words(text: str) -> List[str]:
    """Words of the text that are not filler words."""
    return [word for word in tokenize(text) if word not in FILLER_WORDS]


def is_affirmative(text: str) -> bool:
    return bool(AFFIRMATIVE_RE.match(normalize(text)))


def detect_language(text: str) -> str:
    """'id' when any Indonesian indicator token is present, else 'en'."""
    if any(word in INDONESIAN_INDICATORS for word in tokenize(text)):
        return "id"
    return "en"


def _reverse(synonyms: Dict[str, str]) -> Dict[str, str]:
    reversed_map: Dict[str, str] = {}
    for english, indonesian in synonyms.items():
        reversed_map.setdefault(indonesian, english)
    return reversed_map


_SYNONYMS = {
    "category": CATEGORY_SYNONYMS,
    "color": COLOR_SYNONYMS,
    "material": MATERIAL_SYNONYMS,
}
_REVERSED = {kind: _reverse(mapping) for kind, mapping in _SYNONYMS.items()}


def canonical(kind: str, term: str, language: str = "id") -> str:
    """
    Normalize an attribute term to its canonical form.

    Args:
        kind: "category", "color" or "material"
        term: The matched lexicon term
        language: "id" maps English synonyms to Indonesian ("white" -> "putih"),
            "en" maps the other way ("putih" -> "white")

    Returns:
        The canonical term, or the term itself when no synonym is known
    """
    term = normalize(term)
    indonesian = _SYNONYMS[kind].get(term, term)
    if language == "en":
        return _REVERSED[kind].get(indonesian, term)
    return indonesian


def categories_in(text: str) -> Set[str]:
    """Canonical (Indonesian) form of every category named in the text."""
    return {canonical("category", term) for term in find_all(text, CATEGORIES)}


def names_category(text: str, category: str) -> bool:
    """
    True when the text names the category in either language.

    "chair hitam" names "kursi", and "kursi" names "chair". Categories outside
    the lexicon only match literally.
    """
    return contains_term(text, category) or canonical("category", category) in categories_in(text)
