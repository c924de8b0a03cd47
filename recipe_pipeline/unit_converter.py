"""Unit conversion utilities for recipe ingredients.

to_grams() turns a (quantity, unit, ingredient name) triple into an
approximate gram weight for nutrition computation. Volumes are treated as
water-like (1 ml ~ 1 g), count units use typical per-item weights.
"""
from __future__ import annotations

import logging

_LOGGER = logging.getLogger(__name__)

# Volume conversions to milliliters (ml)
VOLUME_TO_ML = {
    # Imperial/US
    "cup": 240,
    "cups": 240,
    "c": 240,
    "tablespoon": 15,
    "tablespoons": 15,
    "tbsp": 15,
    "tbs": 15,
    "tb": 15,
    "teaspoon": 5,
    "teaspoons": 5,
    "tsp": 5,
    "fluid ounce": 30,
    "fluid ounces": 30,
    "fl oz": 30,
    "fl. oz": 30,
    "floz": 30,
    "pint": 473,
    "pints": 473,
    "pt": 473,
    "quart": 946,
    "quarts": 946,
    "qt": 946,
    "gallon": 3785,
    "gallons": 3785,
    "gal": 3785,
    # Metric (normalized)
    "milliliter": 1,
    "milliliters": 1,
    "ml": 1,
    "liter": 1000,
    "liters": 1000,
    "litre": 1000,
    "litres": 1000,
    "l": 1000,
    "dl": 100,
    "deciliter": 100,
    "deciliters": 100,
}

# Weight conversions to grams (g)
WEIGHT_TO_G = {
    # Imperial/US
    "ounce": 28.35,
    "ounces": 28.35,
    "oz": 28.35,
    "pound": 453.592,
    "pounds": 453.592,
    "lb": 453.592,
    "lbs": 453.592,
    # Metric (normalized)
    "gram": 1,
    "grams": 1,
    "g": 1,
    "kilogram": 1000,
    "kilograms": 1000,
    "kg": 1000,
}

# German/Danish/Swedish spoon units mapped to their English equivalent
SPOON_TO_STANDARD = {
    "tl": "tsp",
    "teelöffel": "tsp",
    "tsk": "tsp",
    "el": "tbsp",
    "esslöffel": "tbsp",
    "spsk": "tbsp",
    "msk": "tbsp",
}

# Units that mean "this many of the ingredient itself"
COUNT_UNITS = {
    "",
    "piece",
    "pieces",
    "pc",
    "pcs",
    "whole",
    "each",
    "ea",
    "unit",
    "units",
    "large",
    "medium",
    "small",
}

# Units that carry their own typical weight regardless of the ingredient
UNIT_WEIGHTS_G = {
    "clove": 3,
    "cloves": 3,
    "slice": 25,
    "slices": 25,
    "pinch": 0.5,
    "dash": 0.6,
    "messerspitze": 0.5,
    "knsp": 0.5,
}

# Typical weight of one item, matched as a substring of the ingredient name.
# Longer keys come first so 'chicken breast' wins over shorter overlaps.
PER_ITEM_WEIGHTS_G = [
    ("chicken breast", 174),
    ("garlic clove", 3),
    ("clove of garlic", 3),
    ("slice of bread", 25),
    ("banana", 120),
    ("orange", 131),
    ("potato", 150),
    ("tomato", 123),
    ("apple", 182),
    ("lemon", 58),
    ("onion", 110),
    ("lime", 67),
    ("egg", 50),
]

DEFAULT_ITEM_WEIGHT_G = 100

CAN_UNITS = {"can", "cans", "tin", "tins"}
JAR_UNITS = {"jar", "jars", "carton", "cartons"}
PACKET_UNITS = {"packet", "packets", "pack", "packs", "pouch", "pouches"}

_GRAIN_WORDS = ("rice", "pasta", "noodle", "quinoa", "couscous", "oat", "grain", "lentil")
_VEGETABLE_WORDS = ("spinach", "pea", "corn", "vegetable", "broccoli", "bean", "carrot")

# Temperature conversions
TEMPERATURE_UNITS = {
    "fahrenheit": "f",
    "f": "f",
    "°f": "f",
    "celsius": "c",
    "c": "c",
    "°c": "c",
}


def normalize_unit(unit: str | None) -> str:
    """Lower-case a unit, strip punctuation and map localised spoon units.

    Examples:
        >>> normalize_unit(" Tbsp. ")
        'tbsp'
        >>> normalize_unit("EL")
        'tbsp'
        >>> normalize_unit(None)
        ''
    """
    if not unit:
        return ""
    unit_lower = unit.lower().strip().rstrip(".").strip()
    return SPOON_TO_STANDARD.get(unit_lower, unit_lower)


def per_item_weight(ingredient_name: str | None) -> float | None:
    """Typical weight in grams of one item of the named ingredient, if known."""
    name = (ingredient_name or "").lower()
    for key, grams in PER_ITEM_WEIGHTS_G:
        if key in name:
            return grams
    return None


def _container_weight(unit: str, name: str) -> float | None:
    if unit in CAN_UNITS:
        if "bean" in name:
            return 240
        if "tomato" in name:
            return 400
        return 300
    if unit in JAR_UNITS:
        return 350
    if unit in PACKET_UNITS:
        if any(word in name for word in _GRAIN_WORDS):
            return 250
        if any(word in name for word in _VEGETABLE_WORDS):
            return 300
        return 200
    return None


def to_grams(quantity: float, unit: str | None, ingredient_name: str | None) -> float:
    """Convert an ingredient amount into an approximate weight in grams.

    Args:
        quantity: The numeric quantity (zero or negative values pass through)
        unit: The unit string, possibly localised ('EL', 'TL') or empty
        ingredient_name: Used for per-item and container weights

    Returns:
        Approximate weight in grams. Never raises.

    Examples:
        >>> to_grams(2, 'cups', 'flour')
        480
        >>> to_grams(1, 'tbsp', 'butter')
        15
        >>> to_grams(3, None, 'eggs')
        150
    """
    unit_key = normalize_unit(unit)
    name = (ingredient_name or "").lower()

    if unit_key in WEIGHT_TO_G:
        return quantity * WEIGHT_TO_G[unit_key]

    if unit_key in VOLUME_TO_ML:
        return quantity * VOLUME_TO_ML[unit_key]

    if unit_key in COUNT_UNITS:
        weight = per_item_weight(name)
        return quantity * (weight if weight is not None else DEFAULT_ITEM_WEIGHT_G)

    if unit_key in UNIT_WEIGHTS_G:
        return quantity * UNIT_WEIGHTS_G[unit_key]

    container = _container_weight(unit_key, name)
    if container is not None:
        return quantity * container

    weight = per_item_weight(name)
    if weight is not None:
        _LOGGER.debug("Unknown unit '%s' for '%s', using per-item weight %s g",
                      unit, ingredient_name, weight)
        return quantity * weight

    _LOGGER.debug("Unknown unit '%s' for '%s', treating quantity as grams",
                  unit, ingredient_name)
    return quantity


def convert_to_metric(quantity: float, unit: str) -> tuple[float | int, str]:
    """
    Convert imperial units to metric equivalents.

    Args:
        quantity: The numeric quantity
        unit: The unit string (e.g., 'cups', 'oz', 'lb', '°F')

    Returns:
        Tuple of (converted_quantity, metric_unit)
        If no conversion is needed, returns original values

    Examples:
        >>> convert_to_metric(1, 'cup')
        (240, 'ml')
        >>> convert_to_metric(1, 'lb')
        (454, 'g')
        >>> convert_to_metric(350, 'f')
        (177, '°C')
    """
    if not quantity or not unit:
        return quantity, unit

    unit_lower = normalize_unit(unit)

    # Volume conversions
    if unit_lower in VOLUME_TO_ML:
        ml = quantity * VOLUME_TO_ML[unit_lower]

        # Use liters for large volumes
        if ml >= 1000:
            return round(ml / 1000, 2), "l"
        else:
            return round(ml), "ml"

    # Weight conversions
    if unit_lower in WEIGHT_TO_G:
        grams = quantity * WEIGHT_TO_G[unit_lower]

        # Use kilograms for large weights
        if grams >= 1000:
            return round(grams / 1000, 2), "kg"
        else:
            return round(grams), "g"

    # Temperature conversions
    if unit_lower in TEMPERATURE_UNITS:
        temp_type = TEMPERATURE_UNITS[unit_lower]
        if temp_type == "f":
            celsius = (quantity - 32) * 5 / 9
            return round(celsius), "°C"

    # Return original if no conversion needed
    return quantity, unit


def format_quantity(quantity: float | int | None) -> str:
    """
    Format quantity to remove unnecessary decimals.

    Args:
        quantity: The numeric quantity (can be int, float, or None)

    Returns:
        Formatted string (empty string if quantity is None)

    Examples:
        >>> format_quantity(2.0)
        '2'
        >>> format_quantity(2.5)
        '2.5'
        >>> format_quantity(2.125)
        '2.13'
    """
    if quantity is None:
        return ""

    # If it's a whole number, return without decimals
    if quantity == int(quantity):
        return str(int(quantity))

    # Otherwise, return with up to 2 decimal places, removing trailing zeros
    return f"{quantity:.2f}".rstrip('0').rstrip('.')
