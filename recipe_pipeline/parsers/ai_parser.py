"""
AI-based Recipe Parser using LangExtract.

This module handles AI-powered extraction of recipe data from unstructured text
using Google's LangExtract library with Gemini models.
"""
from __future__ import annotations

import logging
import math
from typing import Any

import langextract as lx
from langextract import tokenizer

from ..const import CONFIDENCE_AI_TEXT, DEFAULT_MODEL, METHOD_AI_TEXT, MIN_AI_TEXT_LENGTH
from ..models.recipe import Ingredient, Recipe
from .ai_examples import RECIPE_EXAMPLES
from .ai_prompts import EXTRACTION_PROMPT
from .base_parser import BaseRecipeParser

_LOGGER = logging.getLogger(__name__)

# Ingredient confidence by how well LangExtract grounded the extraction in the text
ALIGNMENT_CONFIDENCE = {
    "match_exact": 0.9,
    "match_greater": 0.8,
    "match_lesser": 0.75,
    "match_fuzzy": 0.7,
}
UNGROUNDED_CONFIDENCE = 0.5


def _to_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        number = float(value)
    except (ValueError, TypeError):
        return None
    return number if math.isfinite(number) else None


def _to_minutes(extraction: Any) -> int | None:
    attrs = extraction.attributes or {}
    minutes = _to_float(attrs.get('minutes'))
    if minutes is None or minutes <= 0:
        return None
    return int(minutes)


def _alignment_confidence(extraction: Any) -> float:
    status = getattr(extraction, 'alignment_status', None)
    if status is None:
        return UNGROUNDED_CONFIDENCE
    return ALIGNMENT_CONFIDENCE.get(str(getattr(status, 'value', status)).lower(),
                                    UNGROUNDED_CONFIDENCE)


class AIRecipeParser(BaseRecipeParser):
    """Parses recipe data from unstructured text using AI (LangExtract)."""

    method = METHOD_AI_TEXT

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL,
                 min_text_length: int = MIN_AI_TEXT_LENGTH) -> None:
        """Initialize the AI recipe parser.

        Args:
            api_key: API key for the language model
            model: The model to use for extraction
            min_text_length: Shorter texts are not sent to the model

        Raises:
            ValueError: If API key is empty
        """
        if not api_key or not api_key.strip():
            raise ValueError("API key cannot be empty")

        self.api_key = api_key
        self.model = model
        self.min_text_length = min_text_length
        # Use UnicodeTokenizer for multi-language support (fixes alignment warnings)
        self.tokenizer = tokenizer.UnicodeTokenizer()
        _LOGGER.debug("Initialized AIRecipeParser with model %s", model)

    def accepts(self, text: str) -> bool:
        """Whether the text is long enough to be worth an AI call."""
        return bool(text) and len(text.strip()) >= self.min_text_length

    def _build_recipe(self, extractions: list[Any]) -> Recipe | None:
        title = None
        servings = None
        prep_time = None
        cook_time = None
        ingredients = []
        steps: list[tuple[float, int, str]] = []

        for position, extraction in enumerate(extractions):
            if extraction.extraction_class == "title":
                title = title or extraction.extraction_text

            elif extraction.extraction_class == "servings":
                servings_value = _to_float(extraction.extraction_text)
                if servings_value is not None and servings_value > 0:
                    servings = int(servings_value)

            elif extraction.extraction_class == "prep_time":
                prep_time = _to_minutes(extraction)

            elif extraction.extraction_class == "cook_time":
                cook_time = _to_minutes(extraction)

            elif extraction.extraction_class == "ingredient":
                attrs = extraction.attributes or {}
                name = attrs.get('name') or extraction.extraction_text
                if not name or not str(name).strip():
                    continue

                ingredients.append(Ingredient(
                    name=str(name).strip(),
                    quantity=_to_float(attrs.get('quantity')),
                    unit=attrs.get('unit') or None,
                    group=attrs.get('group') or None,
                    optional=str(attrs.get('optional', 'false')).lower() == 'true',
                    confidence=_alignment_confidence(extraction),
                ))

            elif extraction.extraction_class == "instruction":
                attrs = extraction.attributes or {}
                step_number = _to_float(attrs.get('step'))
                text = (extraction.extraction_text or '').strip()
                if text:
                    steps.append((step_number if step_number is not None else float(position),
                                  position, text))

        if not ingredients:
            _LOGGER.warning("AI parsing completed but no ingredients found")
            return None
        if not title:
            _LOGGER.warning("AI parsing completed but no title found")

        instructions = [text for _, _, text in sorted(steps)]
        _LOGGER.info("Successfully parsed recipe '%s' with %d ingredients and %d steps using AI "
                     "(servings: %s)", title, len(ingredients), len(instructions), servings)
        return Recipe(
            title=title or "",
            servings=servings,
            prep_time_minutes=prep_time,
            cook_time_minutes=cook_time,
            ingredients=ingredients,
            instructions=instructions,
            confidence=CONFIDENCE_AI_TEXT,
        )

    def parse_recipe(self, text: str) -> Recipe | None:
        """Parse recipe information from unstructured text using AI.

        Args:
            text: The raw recipe text

        Returns:
            A Recipe object with extracted information, or None if extraction fails
        """
        if not self.accepts(text):
            _LOGGER.warning(
                "Text too short for extraction: %d characters", len(text) if text else 0)
            return None

        _LOGGER.info(
            "Parsing recipe from %d characters of text using AI", len(text))

        try:
            _LOGGER.debug("Calling LangExtract with model %s", self.model)
            result = lx.extract(
                text_or_documents=text,
                prompt_description=EXTRACTION_PROMPT,
                model_id=self.model,
                examples=RECIPE_EXAMPLES,
                tokenizer=self.tokenizer,
                api_key=self.api_key
            )
        except Exception as e:
            _LOGGER.error("Error during AI recipe parsing: %s",
                          str(e), exc_info=True)
            raise

        if result and getattr(result, 'extractions', None):
            return self._build_recipe(result.extractions)

        _LOGGER.warning("No extractions found in LangExtract result")
        return None
