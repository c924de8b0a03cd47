"""
Ingredient mention matching against source text.

Shared by the validator and the quick-fix generator. Names are compared as
word sets so that 'eggs, large' matches 'large eggs' and 'tomato' matches
'tomatoes'.
"""
from __future__ import annotations

import re

from ..nutrition.canonicalizer import normalize_name, singularize
from ..parsers.ingredient_line import TEXT_QUANTITY_PATTERN, UNITS_PATTERN, find_numbers, parse_quantity_string

_PUNCT_RE = re.compile(r'[^\w\s]')
_RAW_WORD_RE = re.compile(r'[^\W_]+')

# Words that describe preparation or size rather than the ingredient itself
DESCRIPTOR_WORDS = frozenset({
    'a', 'an', 'the', 'of', 'and', 'or', 'for', 'to', 'about', 'plus', 'more',
    'fresh', 'freshly', 'large', 'small', 'medium', 'big', 'extra', 'whole',
    'chopped', 'diced', 'minced', 'sliced', 'grated', 'shredded', 'crushed',
    'melted', 'softened', 'beaten', 'sifted', 'packed', 'peeled', 'halved',
    'finely', 'roughly', 'thinly', 'coarsely', 'ground', 'dried', 'frozen',
    'cooked', 'raw', 'cold', 'warm', 'hot', 'room', 'temperature', 'ripe',
    'divided', 'optional', 'taste', 'garnish', 'serving', 'organic',
})

# Synonym groups for ingredients that are commonly written in several ways
INGREDIENT_SYNONYMS = {
    'salt': ['sea salt', 'kosher salt', 'table salt', 'fine salt'],
    'pepper': ['black pepper', 'ground pepper', 'cracked pepper'],
    'garlic': ['garlic cloves', 'fresh garlic', 'minced garlic'],
    'onion': ['yellow onion', 'white onion', 'sweet onion', 'red onion'],
    'tomato': ['tomatoes', 'fresh tomato', 'ripe tomato'],
    'butter': ['unsalted butter', 'salted butter', 'softened butter'],
    'oil': ['olive oil', 'vegetable oil', 'canola oil', 'cooking oil'],
    'flour': ['all-purpose flour', 'plain flour', 'white flour'],
    'sugar': ['granulated sugar', 'white sugar', 'caster sugar'],
    'milk': ['whole milk', 'skim milk', '2% milk', 'low-fat milk'],
    'cheese': ['cheddar cheese', 'mozzarella cheese', 'parmesan cheese'],
    'chicken': ['chicken breast', 'chicken thighs', 'chicken pieces'],
    'beef': ['ground beef', 'beef chunks', 'beef strips'],
    'rice': ['white rice', 'brown rice', 'long-grain rice'],
    'pasta': ['spaghetti', 'penne', 'linguine', 'fettuccine'],
}


def words(text: str) -> list[str]:
    """Normalized words of a piece of text."""
    return normalize_name(_PUNCT_RE.sub(' ', text or '')).split()


def significant_words(name: str) -> list[str]:
    """Words of an ingredient name without descriptors or numbers."""
    name_words = words(name)
    significant = [w for w in name_words if w not in DESCRIPTOR_WORDS and not w.isdigit()]
    return significant or name_words


def is_mentioned(name: str, text: str) -> bool:
    """True if every significant word of the name occurs in the text.

    Word order is ignored and simple plural forms match their singular.
    """
    wanted = significant_words(name)
    if not wanted:
        return True
    text_words = words(text)
    vocabulary = set(text_words) | {singularize(w) for w in text_words}
    return all(w in vocabulary or singularize(w) in vocabulary for w in wanted)


def synonym_group(name: str) -> list[str]:
    """The synonym group an ingredient name belongs to, or an empty list."""
    phrase = ' '.join(words(name))
    for key, synonyms in INGREDIENT_SYNONYMS.items():
        group = [key, *synonyms]
        if any(contains_phrase(phrase, ' '.join(words(item))) for item in group):
            return group
    return []


def contains_phrase(text: str, phrase: str) -> bool:
    """Whole-word containment of one normalized phrase in another."""
    if not phrase:
        return False
    return f" {phrase} " in f" {text} "


def same_ingredient(existing: str, candidate: str) -> bool:
    """True if a candidate name is a variation of an already listed ingredient."""
    a = ' '.join(singularize(w) for w in words(existing))
    b = ' '.join(singularize(w) for w in words(candidate))
    if not a or not b:
        return False
    if contains_phrase(a, b) or contains_phrase(b, a):
        return True
    group = [' '.join(singularize(w) for w in words(item)) for item in synonym_group(existing)]
    return any(contains_phrase(b, item) or contains_phrase(item, b) for item in group)


def _mention_pattern(raw_words: list[str]) -> re.Pattern:
    alternatives = []
    for word in raw_words:
        forms = sorted({re.escape(word), re.escape(singularize(word))}, key=len, reverse=True)
        alternatives.append(f"(?:{'|'.join(forms)})(?:e?s)?")
    return re.compile(r'(?<!\w)' + r'[\s-]+'.join(alternatives) + r'(?!\w)', re.IGNORECASE)


def mention_spans(name: str, text: str) -> list[tuple[int, int]]:
    """Spans of the ingredient's mentions in the text.

    The full name is tried first; otherwise mentions of its last significant
    word (usually the head noun, 'flour' in 'all-purpose flour') are used.
    """
    if not text:
        return []
    raw = [w for w in _RAW_WORD_RE.findall((name or '').lower())
           if normalize_name(w) not in DESCRIPTOR_WORDS and not w.isdigit()]
    if not raw:
        return []

    spans = [m.span() for m in _mention_pattern(raw).finditer(text)]
    if spans or len(raw) == 1:
        return spans
    return [m.span() for m in _mention_pattern(raw[-1:]).finditer(text)]


def quantities_near(name: str, text: str, window: int) -> list[float]:
    """Numbers written within `window` characters before each mention."""
    found: list[float] = []
    for start, _ in mention_spans(name, text):
        for number in find_numbers(text[max(0, start - window):start]):
            if number not in found:
                found.append(number)
    return found


def explicit_quantities(name: str, text: str) -> list[tuple[float, str | None]]:
    """Distinct '<qty> <unit> <name>' statements for an ingredient in the text.

    Examples:
        >>> explicit_quantities("flour", "Sift 2 cups flour.")
        [(2.0, 'cups')]
    """
    raw = [w for w in _RAW_WORD_RE.findall((name or '').lower())
           if normalize_name(w) not in DESCRIPTOR_WORDS and not w.isdigit()]
    if not raw or not text:
        return []

    pattern = re.compile(
        rf'(?<![\w.])({TEXT_QUANTITY_PATTERN})\s*(?:({UNITS_PATTERN})\b\.?\s*)?(?:of\s+)?'
        rf'(?:[a-z-]+\s+)?{_mention_pattern(raw[-1:]).pattern}',
        re.IGNORECASE,
    )
    results: list[tuple[float, str | None]] = []
    for match in pattern.finditer(text):
        quantity = parse_quantity_string(match.group(1))
        if quantity is None:
            continue
        unit = match.group(2).lower() if match.group(2) else None
        if (quantity, unit) not in results:
            results.append((quantity, unit))
    return results


def snippet(text: str, start: int, end: int, radius: int = 40) -> str:
    """Source text around a span, collapsed to one line."""
    piece = text[max(0, start - radius):min(len(text), end + radius)]
    return ' '.join(piece.split())


def within_tolerance(expected: float, found: float, tolerance: float) -> bool:
    """Relative comparison of two quantities."""
    if expected == found:
        return True
    return abs(expected - found) <= tolerance * max(abs(expected), abs(found))
