"""
JSON-LD Recipe Parser.

This module handles parsing of structured recipe data from JSON-LD format
(Schema.org Recipe), supporting multiple ingredient formats (English, German,
Danish, Swedish).
"""
from __future__ import annotations

import html
import json
import logging
import re
from typing import Any

from ..const import CONFIDENCE_JSONLD, METHOD_JSONLD
from ..models.recipe import Recipe
from .base_parser import BaseRecipeParser
from .ingredient_line import parse_ingredient_line

_LOGGER = logging.getLogger(__name__)

_DURATION_RE = re.compile(
    r'^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:\d+(?:\.\d+)?S)?)?$', re.IGNORECASE)
_TAG_RE = re.compile(r'<[^>]+>')
_STEP_NUMBER_RE = re.compile(r'^\s*(?:step\s*)?\d+[.):]\s*', re.IGNORECASE)


def parse_iso8601_duration(value: Any) -> int | None:
    """Convert an ISO-8601 duration like 'PT1H30M' into minutes.

    Args:
        value: Duration string (numbers are taken as minutes)

    Returns:
        Whole minutes, or None if the value is missing or malformed
    """
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return int(value) if value >= 0 else None

    match = _DURATION_RE.match(str(value).strip())
    if not match or not any(match.groups()):
        _LOGGER.debug("Unrecognized duration '%s'", value)
        return None

    days, hours, minutes = (int(g) if g else 0 for g in match.groups())
    return days * 24 * 60 + hours * 60 + minutes


def _clean_html_text(text: str) -> str:
    text = html.unescape(_TAG_RE.sub(' ', text))
    return re.sub(r'\s+', ' ', text).strip()


class JSONLDRecipeParser(BaseRecipeParser):
    """Parses recipe data from structured JSON-LD format.

    This parser handles pre-structured recipe data that follows the Schema.org
    Recipe format, requiring no AI inference.
    """

    method = METHOD_JSONLD

    def __init__(self, confidence: float = CONFIDENCE_JSONLD) -> None:
        """Initialize the JSON-LD recipe parser.

        Args:
            confidence: Confidence assigned to recipes parsed from structured data
        """
        self.confidence = confidence
        _LOGGER.debug("Initialized JSONLDRecipeParser")

    def _parse_servings(self, recipe_yield: Any) -> int | None:
        """Extract a number from strings like '48', 'Makes 10', '6 servings'."""
        if isinstance(recipe_yield, list):
            recipe_yield = recipe_yield[0] if recipe_yield else None
        if recipe_yield is None:
            return None

        match = re.search(r'\d+', str(recipe_yield))
        if not match:
            return None

        servings = int(match.group())
        if servings <= 0:
            _LOGGER.warning("Ignoring non-positive recipe yield '%s'", recipe_yield)
            return None
        return servings

    def _parse_image(self, image: Any) -> str | None:
        if isinstance(image, list):
            image = image[0] if image else None
        if isinstance(image, dict):
            image = image.get('url') or image.get('contentUrl')
        return str(image) if image else None

    def _parse_instructions(self, instructions: Any) -> list[str]:
        """Flatten recipeInstructions into a list of step strings.

        Handles plain strings, lists of strings, HowToStep objects and
        HowToSection objects with nested itemListElement lists.
        """
        if not instructions:
            return []

        if isinstance(instructions, str):
            lines = [_clean_html_text(line) for line in re.split(r'\n+', instructions)]
            return [_STEP_NUMBER_RE.sub('', line) for line in lines if line]

        if isinstance(instructions, dict):
            if 'itemListElement' in instructions:
                return self._parse_instructions(instructions['itemListElement'])
            text = instructions.get('text') or instructions.get('name') or ''
            return self._parse_instructions(text)

        steps = []
        if isinstance(instructions, list):
            for step in instructions:
                steps.extend(self._parse_instructions(step))
        return steps

    def _parse_tags(self, data: dict[str, Any]) -> set[str]:
        tags = set()
        for key in ('keywords', 'recipeCategory', 'recipeCuisine'):
            value = data.get(key)
            if not value:
                continue
            values = value if isinstance(value, list) else str(value).split(',')
            tags.update(str(v).strip().lower() for v in values if str(v).strip())
        return tags

    def parse_data(self, data: dict[str, Any]) -> Recipe | None:
        """Build a Recipe from a decoded JSON-LD Recipe object.

        Args:
            data: The JSON-LD object whose @type is Recipe

        Returns:
            Recipe object, or None if the object has no ingredients
        """
        raw_ingredients = data.get('recipeIngredient') or data.get('ingredients') or []
        if isinstance(raw_ingredients, str):
            raw_ingredients = [raw_ingredients]

        ingredients = []
        for ingredient_text in raw_ingredients:
            ingredient_text = _clean_html_text(str(ingredient_text))
            if not ingredient_text:
                continue
            ingredient = parse_ingredient_line(ingredient_text)
            ingredient.confidence = 0.95 if ingredient.quantity is not None else 0.85
            ingredients.append(ingredient)

        if not ingredients:
            _LOGGER.warning("No ingredients found in JSON-LD data")
            return None

        title = _clean_html_text(str(data.get('name') or ''))
        if not title:
            _LOGGER.warning("No title found in JSON-LD data")

        description = data.get('description')
        recipe = Recipe(
            title=title,
            description=_clean_html_text(description) if description else None,
            image_ref=self._parse_image(data.get('image')),
            ingredients=ingredients,
            instructions=self._parse_instructions(data.get('recipeInstructions')),
            prep_time_minutes=parse_iso8601_duration(data.get('prepTime')),
            cook_time_minutes=parse_iso8601_duration(data.get('cookTime')),
            servings=self._parse_servings(data.get('recipeYield')),
            tags=self._parse_tags(data),
            confidence=self.confidence,
        )

        _LOGGER.info("Parsed JSON-LD recipe '%s' with %d ingredients and %d steps",
                     recipe.title, len(recipe.ingredients), len(recipe.instructions))
        return recipe

    def parse_recipe(self, text: str) -> Recipe | None:
        """Parse a JSON-LD Recipe object serialized as JSON text.

        Args:
            text: The JSON text of a Recipe object

        Returns:
            Recipe object, or None if parsing fails
        """
        if not text or len(text.strip()) < 10:
            _LOGGER.warning("Text too short for JSON-LD parsing")
            return None

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            _LOGGER.warning("Invalid JSON-LD text: %s", e)
            return None

        if not isinstance(data, dict):
            _LOGGER.warning("JSON-LD text is not an object")
            return None

        return self.parse_data(data)
