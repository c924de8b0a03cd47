"""
Vision Recipe Parser.

Reads a recipe from a photo (cookbook page, handwritten card, screenshot)
using a Gemini multimodal model and converts the JSON answer into a Recipe.
"""
from __future__ import annotations

import json
import logging
import math
import re
from abc import ABC, abstractmethod
from typing import Any

import google.generativeai as genai

from ..const import CONFIDENCE_VISION, DEFAULT_VISION_MODEL, METHOD_VISION
from ..models.recipe import Ingredient, Recipe
from .ai_prompts import VISION_PROMPT

_LOGGER = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r'^```(?:json)?\s*|\s*```$', re.MULTILINE)


class BaseVisionParser(ABC):
    """Interface for parsers that read a recipe from image bytes."""

    method: str = METHOD_VISION

    @abstractmethod
    def parse_image(self, data: bytes, mime_type: str) -> Recipe | None:
        """Parse a recipe from an image.

        Args:
            data: Raw image bytes
            mime_type: Image mime type, e.g. 'image/jpeg'

        Returns:
            A Recipe, or None if no recipe is visible
        """


def recipe_from_json(payload: str | dict[str, Any], confidence: float = CONFIDENCE_VISION) -> Recipe | None:
    """Convert a model's JSON recipe answer into a Recipe.

    Args:
        payload: JSON text (optionally wrapped in a markdown code fence) or a decoded dict
        confidence: Confidence assigned to the recipe and its ingredients

    Returns:
        Recipe, or None if the answer has no ingredients
    """
    if isinstance(payload, str):
        try:
            payload = json.loads(_CODE_FENCE_RE.sub('', payload.strip()))
        except json.JSONDecodeError as e:
            _LOGGER.warning("Model answer is not valid JSON: %s", e)
            return None
    if not isinstance(payload, dict):
        _LOGGER.warning("Model answer is not a JSON object")
        return None

    ingredients = []
    for item in payload.get('ingredients') or []:
        if isinstance(item, str):
            item = {'name': item}
        if not isinstance(item, dict) or not str(item.get('name') or '').strip():
            continue
        try:
            quantity = float(item['quantity']) if item.get('quantity') is not None else None
        except (TypeError, ValueError):
            quantity = None
        if quantity is not None and not math.isfinite(quantity):
            quantity = None
        ingredients.append(Ingredient(
            name=str(item['name']).strip(),
            quantity=quantity,
            unit=item.get('unit') or None,
            optional=bool(item.get('optional', False)),
            group=item.get('group') or None,
            confidence=confidence,
        ))

    if not ingredients:
        _LOGGER.warning("Model answer contains no ingredients")
        return None

    def positive_int(value: Any) -> int | None:
        try:
            number = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return None
        return number if number > 0 else None

    instructions = [str(step).strip() for step in payload.get('instructions') or [] if str(step).strip()]
    return Recipe(
        title=str(payload.get('title') or '').strip(),
        description=payload.get('description') or None,
        ingredients=ingredients,
        instructions=instructions,
        servings=positive_int(payload.get('servings')),
        prep_time_minutes=positive_int(payload.get('prep_time_minutes')),
        cook_time_minutes=positive_int(payload.get('cook_time_minutes')),
        confidence=confidence,
    )


class VisionRecipeParser(BaseVisionParser):
    """Parses recipe photos with a Gemini multimodal model."""

    def __init__(self, api_key: str, model: str = DEFAULT_VISION_MODEL) -> None:
        """Initialize the vision parser.

        Args:
            api_key: Gemini API key
            model: Multimodal model name

        Raises:
            ValueError: If API key is empty
        """
        if not api_key or not api_key.strip():
            raise ValueError("API key cannot be empty")

        genai.configure(api_key=api_key)
        self.model = model
        _LOGGER.debug("Initialized VisionRecipeParser with model %s", model)

    def parse_image(self, data: bytes, mime_type: str) -> Recipe | None:
        _LOGGER.info("Parsing recipe from %d bytes of %s using %s",
                     len(data), mime_type, self.model)
        try:
            response = genai.GenerativeModel(self.model).generate_content(
                [VISION_PROMPT, {"mime_type": mime_type, "data": data}],
                generation_config={"response_mime_type": "application/json"},
            )
        except Exception as e:
            _LOGGER.error("Error during vision recipe parsing: %s", str(e), exc_info=True)
            raise

        text = getattr(response, 'text', None)
        if not text:
            _LOGGER.warning("Vision model returned an empty answer")
            return None
        return recipe_from_json(text)
