"""
AI ingredient name normalization.

One batched model call maps every ingredient of a recipe to a canonical food
name. The result is only a hint for the canonicalizer: when the call fails the
computation continues with the synonym table alone.
"""
from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import NamedTuple, Sequence

import google.generativeai as genai

from ..const import DEFAULT_MODEL
from ..exceptions import NormalizationUnavailable
from ..models.recipe import Ingredient
from ..unit_converter import format_quantity

_LOGGER = logging.getLogger(__name__)

_HINT_LINE_RE = re.compile(r'^(.+?)\s*->\s*(.+)$')

NORMALIZATION_PROMPT = """You are a food database expert. Normalize these recipe ingredients into standard food names.

For each ingredient, output ONLY the canonical food name (e.g., "chicken" not "chicken thigh fillets", "pasta" not "spaghetti", "tomato" not "diced tomatoes").

Ingredients:
{ingredients}

Output format (one per line):
original ingredient -> canonical food name

Example:
2 cups diced tomatoes -> tomato
500 g ground beef -> beef
1 tbsp olive oil -> olive_oil"""


class HintResult(NamedTuple):
    """AI canonical-name hints for a batch of ingredients.

    Attributes:
        hints: Raw ingredient name -> canonical key
        degraded: True when the AI call was skipped or failed
    """

    hints: dict[str, str]
    degraded: bool = False


def format_ingredient_line(ingredient: Ingredient) -> str:
    """Render an ingredient as '<qty> <unit> <name>' for the prompt."""
    parts = []
    if ingredient.quantity is not None:
        parts.append(format_quantity(ingredient.quantity))
    if ingredient.unit:
        parts.append(ingredient.unit)
    parts.append(ingredient.name)
    return ' '.join(parts)


def parse_hint_response(text: str, ingredients: Sequence[Ingredient]) -> dict[str, str]:
    """Parse an 'original -> canonical' answer into a hint map.

    Each line is attributed to the first ingredient whose name equals, is
    contained in, or contains the left side (case-insensitive). Canonical
    values are lower-cased with whitespace replaced by underscores.

    Args:
        text: The model answer
        ingredients: The ingredients that were sent

    Returns:
        Raw ingredient name -> canonical key
    """
    hints: dict[str, str] = {}
    for line in (text or '').splitlines():
        line = line.strip()
        if not line:
            continue
        match = _HINT_LINE_RE.match(line)
        if not match:
            continue

        original = match.group(1).strip().lower()
        canonical = re.sub(r'\s+', '_', match.group(2).strip().strip('"\'').lower())
        if not canonical:
            continue

        ingredient = next(
            (ing for ing in ingredients
             if ing.name.lower() == original
             or ing.name.lower() in original
             or original in ing.name.lower()),
            None,
        )
        if ingredient is None:
            _LOGGER.debug("Unable to map normalization line: %s", line)
            continue

        hints[ingredient.name] = canonical
        _LOGGER.debug("Normalized '%s' -> '%s'", ingredient.name, canonical)
    return hints


class BaseIngredientNormalizer(ABC):
    """Batches ingredient names through an external normalization service."""

    @abstractmethod
    def request_canonical_names(self, ingredients: Sequence[Ingredient]) -> dict[str, str]:
        """Return canonical-name hints for the given ingredients.

        Raises:
            NormalizationUnavailable: If the service cannot be used
        """

    def normalize(self, ingredients: Sequence[Ingredient]) -> HintResult:
        """Normalize the non-optional ingredients in one request.

        Raises:
            NormalizationUnavailable: If the service cannot be used
        """
        batch = [ing for ing in ingredients if not ing.optional and ing.name.strip()]
        if not batch:
            return HintResult({})
        return HintResult(self.request_canonical_names(batch))


class GeminiIngredientNormalizer(BaseIngredientNormalizer):
    """Normalizes ingredient names with a Gemini text model."""

    def __init__(self, api_key: str | None, model: str = DEFAULT_MODEL) -> None:
        self.api_key = api_key
        self.model = model
        if api_key and api_key.strip():
            genai.configure(api_key=api_key)

    def request_canonical_names(self, ingredients: Sequence[Ingredient]) -> dict[str, str]:
        if not self.api_key or not self.api_key.strip():
            raise NormalizationUnavailable("API key not configured")

        prompt = NORMALIZATION_PROMPT.format(
            ingredients='\n'.join(format_ingredient_line(ing) for ing in ingredients)
        )
        _LOGGER.info("Normalizing %d ingredient names using %s", len(ingredients), self.model)

        try:
            response = genai.GenerativeModel(self.model).generate_content(
                prompt,
                generation_config={"temperature": 0.1, "max_output_tokens": 500},
            )
            text = response.text
        except Exception as e:
            _LOGGER.warning("Ingredient normalization request failed: %s", e)
            raise NormalizationUnavailable(str(e)) from e

        if not text or not text.strip():
            raise NormalizationUnavailable("empty normalization response")

        _LOGGER.debug("Normalization response: %s", text)
        return parse_hint_response(text, ingredients)


def build_ai_hints(
    ingredients: Sequence[Ingredient],
    normalizer: BaseIngredientNormalizer | None,
) -> HintResult:
    """Collect AI hints, degrading to an empty map on any normalizer failure."""
    if normalizer is None:
        return HintResult({}, degraded=True)

    try:
        return normalizer.normalize(ingredients)
    except NormalizationUnavailable as e:
        _LOGGER.warning("AI normalization unavailable, using synonym table only: %s", e)
        return HintResult({}, degraded=True)
