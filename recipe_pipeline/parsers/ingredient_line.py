"""
Ingredient line parsing.

Turns a single ingredient string into a structured Ingredient, supporting
multiple formats (English, German, Danish, Swedish) and fractions written as
'1/2', '2 1/2' or unicode characters ('½', '2½').
"""
from __future__ import annotations

import logging
import re

from ..models.recipe import Ingredient

_LOGGER = logging.getLogger(__name__)

# Map unicode fractions to their decimal values
UNICODE_FRACTIONS = {
    '½': 0.5,
    '⅓': 0.333,
    '⅔': 0.667,
    '¼': 0.25,
    '¾': 0.75,
    '⅛': 0.125,
    '⅜': 0.375,
    '⅝': 0.625,
    '⅞': 0.875
}

# Common unit abbreviations and full names (English + German/Danish/Swedish)
UNITS_PATTERN = (
    r'(?:cups?|tablespoons?|tbsp?|teaspoons?|tsp?|ounces?|oz|pounds?|lbs?|grams?|g|'
    r'kilograms?|kg|milliliters?|ml|liters?|l|pinch(?:es)?|dash(?:es)?|cloves?|pieces?|'
    r'slices?|cans?|tins?|jars?|packets?|packs?|tl|el|teelöffel|esslöffel|messerspitze|'
    r'tsk|spsk|knsp|msk|dl)'
)

# A single quantity token, optionally followed by a second one ("2 1/2")
NUMBER_PATTERN = r'[\d./½⅓⅔¼¾⅛⅜⅝⅞]+'
QUANTITY_PATTERN = rf'{NUMBER_PATTERN}(?:\s+{NUMBER_PATTERN})?'

# Numbers as they appear in running text: mixed numbers, fractions, decimals.
# A sentence-ending dot is never part of the number.
TEXT_QUANTITY_PATTERN = r'(?:\d+\s+\d+/\d+|\d+/\d+|\d+(?:[.,]\d+)?[½⅓⅔¼¾⅛⅜⅝⅞]?|[½⅓⅔¼¾⅛⅜⅝⅞])'
TEXT_NUMBER_RE = re.compile(rf'(?<![\w.])({TEXT_QUANTITY_PATTERN})')

_COMPACT_RE = re.compile(rf'^({NUMBER_PATTERN})({UNITS_PATTERN})\b\s+(.+)$', re.IGNORECASE)
# \b after the unit prevents matching "g" in "große"
_QTY_UNIT_NAME_RE = re.compile(rf'^({QUANTITY_PATTERN})\s+({UNITS_PATTERN})\b\.?\s+(?:of\s+)?(.+)$',
                               re.IGNORECASE)
_UNIT_NAME_QTY_RE = re.compile(rf'^({UNITS_PATTERN})\b\s+(.+?)\s+({QUANTITY_PATTERN})$', re.IGNORECASE)
_NAME_QTY_RE = re.compile(rf'^(.+?)\s+({QUANTITY_PATTERN})$', re.IGNORECASE)
_QTY_NAME_RE = re.compile(rf'^({QUANTITY_PATTERN})\s+(.+)$', re.IGNORECASE)


def parse_fraction(fraction_str: str) -> float:
    """Safely parse a fraction string like '1/2' or '3/4'.

    Args:
        fraction_str: A string containing a fraction (e.g., '1/2', '3/4')

    Returns:
        The decimal value of the fraction

    Raises:
        ValueError: If the fraction string is invalid
        ZeroDivisionError: If denominator is zero
    """
    if '/' not in fraction_str:
        return float(fraction_str)

    parts = fraction_str.strip().split('/')
    if len(parts) != 2:
        raise ValueError(f"Invalid fraction format: {fraction_str}")

    numerator = float(parts[0].strip())
    denominator = float(parts[1].strip())

    if denominator == 0:
        raise ZeroDivisionError(
            f"Fraction has zero denominator: {fraction_str}")

    return numerator / denominator


def apply_unicode_fractions(text: str) -> str:
    """Replace unicode fraction characters with decimal equivalents.

    Handles both standalone fractions (½) and mixed numbers (2½).
    Mixed numbers are converted by adding the decimal: 2½ -> 2 + 0.5 = 2.5

    Args:
        text: String potentially containing unicode fractions

    Returns:
        String with unicode fractions replaced by decimals
    """
    for fraction_char, decimal_value in UNICODE_FRACTIONS.items():
        # Pattern to match number followed by fraction (e.g., "2½")
        pattern = rf'(\d+){re.escape(fraction_char)}'

        def replace_mixed(match, decimal_value=decimal_value):
            whole_number = int(match.group(1))
            return str(whole_number + decimal_value)

        text = re.sub(pattern, replace_mixed, text)

        # Also handle standalone fractions
        text = text.replace(fraction_char, str(decimal_value))

    return text


def parse_quantity_string(quantity_str: str) -> float | None:
    """Parse a quantity string that may contain fractions.

    Args:
        quantity_str: String like '2', '1/2', '2 1/2', '2.5', '2½' or '1,5'

    Returns:
        Parsed float value or None if parsing fails
    """
    try:
        quantity_str = apply_unicode_fractions(quantity_str.strip())
        if '/' in quantity_str:
            parts = quantity_str.split()
            return sum(parse_fraction(p) for p in parts)
        parts = quantity_str.replace(',', '.').split()
        return sum(float(p) for p in parts)
    except (ValueError, TypeError, ZeroDivisionError) as e:
        _LOGGER.debug("Failed to parse quantity '%s': %s", quantity_str, e)
        return None


def find_numbers(text: str) -> list[float]:
    """All numeric quantities written in a piece of running text."""
    numbers = []
    for match in TEXT_NUMBER_RE.finditer(text):
        value = parse_quantity_string(match.group(1))
        if value is not None:
            numbers.append(value)
    return numbers


def starts_with_quantity(text: str) -> bool:
    return bool(re.match(rf'^\s*{NUMBER_PATTERN}', text))


def parse_ingredient_line(ingredient_text: str, confidence: float = 1.0) -> Ingredient:
    """Parse an ingredient string into a structured Ingredient.

    Supports multiple formats:
    - Compact: "250g flour"
    - Standard English: "1 cup butter, softened"
    - German/Danish: "TL Salz 0.5"
    - Name-quantity: "Große Zwiebel(n) 1"
    - Quantity-name: "1 große Zwiebel"

    Args:
        ingredient_text: Raw ingredient string
        confidence: Confidence assigned to the parsed ingredient

    Returns:
        Structured Ingredient object
    """
    text = ingredient_text.strip().lstrip('-•*').strip()

    patterns = (
        (_COMPACT_RE, ('quantity', 'unit', 'name')),
        (_QTY_UNIT_NAME_RE, ('quantity', 'unit', 'name')),
        (_UNIT_NAME_QTY_RE, ('unit', 'name', 'quantity')),
        (_NAME_QTY_RE, ('name', 'quantity')),
        (_QTY_NAME_RE, ('quantity', 'name')),
    )

    for pattern, fields in patterns:
        match = pattern.match(text)
        if not match:
            continue
        values = dict(zip(fields, match.groups()))
        quantity = parse_quantity_string(values['quantity'])
        if quantity is None:
            continue
        unit = values.get('unit')
        return Ingredient(
            name=values['name'].strip(),
            quantity=quantity,
            unit=unit.strip().rstrip('.') if unit else None,
            confidence=confidence
        )

    # No pattern matched, just return the text as name
    return Ingredient(name=text, quantity=None, unit=None, confidence=confidence)
