"""
Ingredient name canonicalization.

Maps free-text ingredient names ('2 large Eggs, beaten', 'Mehl') onto the
canonical keys of the nutrient table. Strategies are tried in order and the
first one that returns a key wins; the last one always returns a key.
"""
from __future__ import annotations

import logging
import re
import unicodedata
from typing import Callable, Mapping

_LOGGER = logging.getLogger(__name__)

UNKNOWN_KEY = "unknown"

_FOLD_TABLE = str.maketrans({"ø": "o", "æ": "ae", "å": "a", "ß": "ss", "œ": "oe"})
_INVALID_CHARS_RE = re.compile(r'[^a-z0-9 ]')
_SPACES_RE = re.compile(r'\s+')

Strategy = Callable[[str, Mapping[str, str], Mapping[str, str]], "str | None"]


def normalize_name(name: str) -> str:
    """Lower-case, fold accents and keep only [a-z0-9 ] with single spaces.

    Examples:
        >>> normalize_name("  Crème  Fraîche! ")
        'creme fraiche'
        >>> normalize_name("xyzzy-nonfood")
        'xyzzynonfood'
    """
    folded = unicodedata.normalize('NFKD', (name or '').lower().translate(_FOLD_TABLE))
    folded = ''.join(ch for ch in folded if not unicodedata.combining(ch))
    cleaned = _INVALID_CHARS_RE.sub('', folded.replace('_', ' '))
    return _SPACES_RE.sub(' ', cleaned).strip()


def singularize(name: str) -> str:
    """Naive English singular: berries -> berry, tomatoes -> tomato, eggs -> egg."""
    if name.endswith('ies') and len(name) > 4:
        return name[:-3] + 'y'
    if name.endswith(('oes', 'ches', 'shes')):
        return name[:-2]
    if name.endswith('s') and not name.endswith(('ss', 'us')) and len(name) > 3:
        return name[:-1]
    return name


def _alias_index(synonyms: Mapping[str, str]) -> dict[str, str]:
    """Normalized alias -> canonical key, including canonical keys themselves."""
    index = {}
    for canonical in synonyms.values():
        index.setdefault(normalize_name(canonical), canonical)
    for alias, canonical in synonyms.items():
        key = normalize_name(alias)
        if key:
            index[key] = canonical
    return index


def _contains_phrase(text: str, phrase: str) -> bool:
    return f" {phrase} " in f" {text} "


def from_ai_hint(raw_name: str, synonyms: Mapping[str, str], hints: Mapping[str, str]) -> str | None:
    """Canonical key suggested by the AI normalizer for this exact raw name."""
    hint = hints.get(raw_name)
    return hint or None


def exact_synonym(raw_name: str, synonyms: Mapping[str, str], hints: Mapping[str, str]) -> str | None:
    """Exact match of the normalized name (or its singular) against the synonym table."""
    name = normalize_name(raw_name)
    if not name:
        return None
    index = _alias_index(synonyms)
    return index.get(name) or index.get(singularize(name))


def partial_synonym(raw_name: str, synonyms: Mapping[str, str], hints: Mapping[str, str]) -> str | None:
    """Whole-word partial match against the synonym table.

    The longest alias contained in the name wins ('large free range eggs' ->
    'eggs'). Otherwise the shortest alias that contains the name is used
    ('chicken' -> 'chicken breast'). Ties are broken alphabetically.
    """
    name = normalize_name(raw_name)
    if not name:
        return None
    index = _alias_index(synonyms)

    contained = [alias for alias in index if _contains_phrase(name, alias)]
    if contained:
        best = min(contained, key=lambda alias: (-len(alias), alias))
        return index[best]

    containing = [alias for alias in index if _contains_phrase(alias, name)]
    if containing:
        best = min(containing, key=lambda alias: (len(alias), alias))
        return index[best]
    return None


def fallback_slug(raw_name: str, synonyms: Mapping[str, str], hints: Mapping[str, str]) -> str:
    """Normalized name with spaces as underscores; never empty."""
    slug = normalize_name(raw_name).replace(' ', '_')
    return slug or UNKNOWN_KEY


CANONICALIZATION_STRATEGIES: list[Strategy] = [
    from_ai_hint,
    exact_synonym,
    partial_synonym,
    fallback_slug,
]


def canonicalize(
    raw_name: str,
    ai_hints: Mapping[str, str] | None = None,
    synonyms: Mapping[str, str] | None = None,
    strategies: list[Strategy] | None = None,
) -> str:
    """Map a raw ingredient name to a canonical nutrient-table key.

    Args:
        raw_name: Ingredient name as extracted
        ai_hints: Raw name -> canonical key suggestions from the AI normalizer
        synonyms: Alias -> canonical key table
        strategies: Ordered strategies, defaults to CANONICALIZATION_STRATEGIES

    Returns:
        A non-empty canonical key. Total: never raises for string input.
    """
    hints = ai_hints or {}
    table = synonyms or {}

    for strategy in strategies or CANONICALIZATION_STRATEGIES:
        key = strategy(raw_name, table, hints)
        if key:
            _LOGGER.debug("Canonicalized '%s' -> '%s' (%s)", raw_name, key, strategy.__name__)
            return key

    return fallback_slug(raw_name, table, hints)
