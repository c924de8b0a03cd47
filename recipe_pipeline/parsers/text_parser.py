"""
Heuristic Recipe Parser.

Deterministic parser for short or informal recipe text (typed notes, cleaned
transcripts, page text when no AI model is configured). It recognises section
headers, servings/time metadata, bullet and comma-separated ingredient lists
and treats the remaining sentences as title and steps.
"""
from __future__ import annotations

import logging
import re

from ..const import METHOD_HEURISTIC_TEXT
from ..models.recipe import Ingredient, Recipe
from .base_parser import BaseRecipeParser
from .ingredient_line import parse_ingredient_line, starts_with_quantity

_LOGGER = logging.getLogger(__name__)

INGREDIENT_HEADERS = ("ingredients", "ingredient list", "you will need", "zutaten", "ingredienser")
INSTRUCTION_HEADERS = ("instructions", "directions", "method", "steps", "preparation",
                       "zubereitung", "fremgangsmåde")

_SENTENCE_SPLIT_RE = re.compile(r'(?<=[.!?])\s+')
_LIST_SPLIT_RE = re.compile(r'\s*,\s*|\s+and\s+|\s*;\s*', re.IGNORECASE)
_BULLET_RE = re.compile(r'^\s*[-•*·▪]\s*')
_STEP_NUMBER_RE = re.compile(r'^\s*(?:step\s*)?\d+\s*[.):]\s+', re.IGNORECASE)
_OPTIONAL_RE = re.compile(r'\s*[(,]?\s*\b(?:optional|if desired|for garnish)\b\s*\)?', re.IGNORECASE)

SERVINGS_RE = re.compile(
    r'\b(?:serves|servings?\s*:?|makes|yields?\s*:?|portions?\s*:?)\s+(\d+)\b'
    r'|\b(\d+)\s+(?:servings|portions|people|persons)\b',
    re.IGNORECASE
)
PREP_TIME_RE = re.compile(
    r'\bprep(?:aration)?(?:\s+time\s*:?|\s*:)\s*((?:\d+\s*(?:hours?|hrs?|h|minutes?|mins?|m)\b\s*)+)',
    re.IGNORECASE
)
COOK_TIME_RE = re.compile(
    r'\b(?:cook(?:ing)?|bak(?:e|ing))(?:\s+time\s*:?|\s*:)\s*((?:\d+\s*(?:hours?|hrs?|h|minutes?|mins?|m)\b\s*)+)',
    re.IGNORECASE
)
_HOURS_RE = re.compile(r'(\d+)\s*(?:h|hrs?|hours?)\b', re.IGNORECASE)
_MINUTES_RE = re.compile(r'(\d+)\s*(?:m|mins?|minutes?)\b', re.IGNORECASE)


def parse_minutes(text: str) -> int | None:
    """Convert '1 hour 20 minutes' style text into minutes."""
    hours = sum(int(h) for h in _HOURS_RE.findall(text))
    minutes = sum(int(m) for m in _MINUTES_RE.findall(text))
    total = hours * 60 + minutes
    return total if total > 0 else None


def find_servings(text: str) -> int | None:
    """Explicit servings count stated in the text, if positive."""
    match = SERVINGS_RE.search(text)
    if not match:
        return None
    value = int(match.group(1) or match.group(2))
    return value if value > 0 else None


def _header_section(line: str) -> tuple[str | None, str]:
    """Return (section, remainder) if the line starts with a section header."""
    lowered = line.lower().strip()
    for section, headers in (("ingredients", INGREDIENT_HEADERS), ("instructions", INSTRUCTION_HEADERS)):
        for header in headers:
            if lowered == header or lowered.startswith(header + ":"):
                return section, line.strip()[len(header):].lstrip(": ").strip()
    return None, line


class TextRecipeParser(BaseRecipeParser):
    """Parses recipe text with regular expressions, no AI required."""

    method = METHOD_HEURISTIC_TEXT

    def __init__(self) -> None:
        """Initialize the heuristic text parser."""
        _LOGGER.debug("Initialized TextRecipeParser")

    def _parse_ingredient_item(self, item: str) -> Ingredient | None:
        item = item.strip().strip('.').strip()
        if not item:
            return None

        optional = bool(_OPTIONAL_RE.search(item))
        if optional:
            item = _OPTIONAL_RE.sub('', item).strip(' ,')

        ingredient = parse_ingredient_line(item)
        if not ingredient.name:
            return None
        ingredient.optional = optional
        ingredient.confidence = 0.9 if ingredient.quantity is not None else 0.6
        return ingredient

    def _split_quantity_list(self, segment: str) -> list[str] | None:
        """Split 'a, b and c' into items when every item leads with a quantity."""
        items = [item for item in _LIST_SPLIT_RE.split(segment.strip().rstrip('.')) if item.strip()]
        if items and all(starts_with_quantity(item) for item in items):
            return items
        return None

    def _strip_metadata(self, segment: str, found: dict) -> str:
        """Record servings/times found in the segment and remove them."""
        for key, pattern, parse in (
            ("servings", SERVINGS_RE, lambda m: int(m.group(1) or m.group(2))),
            ("prep_time_minutes", PREP_TIME_RE, lambda m: parse_minutes(m.group(1))),
            ("cook_time_minutes", COOK_TIME_RE, lambda m: parse_minutes(m.group(1))),
        ):
            match = pattern.search(segment)
            if not match:
                continue
            value = parse(match)
            if value and value > 0 and found.get(key) is None:
                found[key] = value
            elif key == "servings" and value == 0:
                _LOGGER.warning("Ignoring non-positive servings in '%s'", segment)
            segment = segment[:match.start()] + segment[match.end():]
        return segment.strip(' .,;:-')

    def parse_recipe(self, text: str) -> Recipe | None:
        """Parse recipe information from free text.

        Args:
            text: The raw recipe text

        Returns:
            A Recipe object, or None if nothing recipe-like was found
        """
        if not text or not text.strip():
            _LOGGER.warning("No text supplied for heuristic parsing")
            return None

        title = ""
        ingredients: list[Ingredient] = []
        instructions: list[str] = []
        metadata: dict = {}
        section = None

        for raw_line in text.splitlines():
            if not raw_line.strip():
                continue

            header, line = _header_section(raw_line)
            if header:
                section = header
                if not line:
                    continue

            is_bullet = bool(_BULLET_RE.match(line))
            line = _BULLET_RE.sub('', line).strip()

            if section != "instructions":
                line = self._strip_metadata(line, metadata)
                if not line:
                    continue

            if section == "ingredients":
                items = self._split_quantity_list(line) if not is_bullet else None
                for item in items or [line]:
                    ingredient = self._parse_ingredient_item(item)
                    if ingredient:
                        ingredients.append(ingredient)
                continue

            if section == "instructions":
                step = _STEP_NUMBER_RE.sub('', line).strip()
                if step:
                    instructions.append(step)
                continue

            if is_bullet and starts_with_quantity(line):
                ingredient = self._parse_ingredient_item(line)
                if ingredient:
                    ingredients.append(ingredient)
                continue

            for segment in _SENTENCE_SPLIT_RE.split(line):
                segment = self._strip_metadata(segment.strip(), metadata)
                if not segment:
                    continue

                items = self._split_quantity_list(segment)
                if items:
                    for item in items:
                        ingredient = self._parse_ingredient_item(item)
                        if ingredient:
                            ingredients.append(ingredient)
                elif not title and not ingredients and not instructions:
                    title = segment
                else:
                    step = _STEP_NUMBER_RE.sub('', segment).strip()
                    if not step.endswith(('.', '!', '?')):
                        step += '.'
                    instructions.append(step)

        if not ingredients:
            if instructions:
                _LOGGER.warning("Heuristic parse found %d steps but no ingredients",
                                len(instructions))
                return None
            if not title:
                _LOGGER.warning("Heuristic parse found nothing recipe-like")
                return None

        confidence = 0.5
        if title:
            confidence += 0.1
        if ingredients:
            confidence += 0.15
        if instructions:
            confidence += 0.15
        if metadata.get("servings"):
            confidence += 0.1
        confidence = min(confidence, 0.9)

        _LOGGER.info("Heuristic parse of '%s': %d ingredients, %d steps (servings: %s)",
                     title, len(ingredients), len(instructions), metadata.get("servings"))

        return Recipe(
            title=title,
            ingredients=ingredients,
            instructions=instructions,
            servings=metadata.get("servings"),
            prep_time_minutes=metadata.get("prep_time_minutes"),
            cook_time_minutes=metadata.get("cook_time_minutes"),
            confidence=round(confidence, 2),
        )
