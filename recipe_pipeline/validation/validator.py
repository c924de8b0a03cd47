"""
Recipe consistency validator.

Checks an extracted recipe against the text it came from: ingredients that
never appear in the text, quantities that disagree with the text, ingredients
the extraction missed, and ingredients without a quantity. The input recipe
is never modified; a validated copy is returned.
"""
from __future__ import annotations

import logging
import re
from typing import NamedTuple

from ..config import ValidationSettings
from ..models.recipe import Ingredient, Recipe
from ..models.validation import (
    InferredQuantity,
    IssueType,
    MissingIngredientCandidate,
    Severity,
    ValidationIssue,
    ValidationResult,
)
from ..parsers.ingredient_line import TEXT_QUANTITY_PATTERN, UNITS_PATTERN, parse_quantity_string
from ..unit_converter import format_quantity
from .matching import (
    contains_phrase,
    is_mentioned,
    mention_spans,
    quantities_near,
    same_ingredient,
    snippet,
    within_tolerance,
    words,
)

_LOGGER = logging.getLogger(__name__)


class CommonQuantity(NamedTuple):
    quantity: float
    unit: str
    confidence: float


# Typical amounts for ingredients that recipes often list without a quantity
COMMON_INGREDIENT_QUANTITIES = {
    'salt': CommonQuantity(1, 'tsp', 0.8),
    'pepper': CommonQuantity(0.5, 'tsp', 0.7),
    'black pepper': CommonQuantity(0.5, 'tsp', 0.7),
    'garlic powder': CommonQuantity(1, 'tsp', 0.7),
    'onion powder': CommonQuantity(1, 'tsp', 0.7),
    'paprika': CommonQuantity(1, 'tsp', 0.6),
    'oregano': CommonQuantity(1, 'tsp', 0.6),
    'basil': CommonQuantity(1, 'tsp', 0.6),
    'thyme': CommonQuantity(1, 'tsp', 0.6),
    'rosemary': CommonQuantity(1, 'tsp', 0.6),
    'cumin': CommonQuantity(1, 'tsp', 0.6),
    'cinnamon': CommonQuantity(1, 'tsp', 0.6),
    'vanilla extract': CommonQuantity(1, 'tsp', 0.8),
    'baking powder': CommonQuantity(1, 'tsp', 0.8),
    'baking soda': CommonQuantity(0.5, 'tsp', 0.8),
    'olive oil': CommonQuantity(2, 'tbsp', 0.7),
    'vegetable oil': CommonQuantity(2, 'tbsp', 0.7),
    'butter': CommonQuantity(2, 'tbsp', 0.7),
    'lemon juice': CommonQuantity(1, 'tbsp', 0.7),
    'lime juice': CommonQuantity(1, 'tbsp', 0.7),
    'soy sauce': CommonQuantity(1, 'tbsp', 0.7),
    'worcestershire sauce': CommonQuantity(1, 'tsp', 0.6),
    'hot sauce': CommonQuantity(0.5, 'tsp', 0.5),
}

# Phrases that imply a unit for an ingredient without a quantity
CONTEXTUAL_UNIT_PATTERNS = [
    (re.compile(r'\b(?:pinch|dash)\s+of\b', re.IGNORECASE), 'pinch', 0.9),
    (re.compile(r'\bto\s+taste\b', re.IGNORECASE), 'to taste', 0.8),
    (re.compile(r'\ba\s+little\b', re.IGNORECASE), 'pinch', 0.6),
    (re.compile(r'\ba\s+bit\s+of\b', re.IGNORECASE), 'pinch', 0.6),
    (re.compile(r'\bsprinkle\b', re.IGNORECASE), 'pinch', 0.7),
    (re.compile(r'\bdrizzle\b', re.IGNORECASE), 'tbsp', 0.6),
    (re.compile(r'\bsome\b', re.IGNORECASE), 'to taste', 0.5),
]

_STOP = r'(?=\s+(?:to|into|until|over|on|onto|in|for|while|then|before|after)\b|[.,;:!?\n]|$)'

# Cooking verbs that introduce an ingredient
MENTION_PATTERNS = [
    re.compile(rf'\badd\s+(?:the\s+)?([a-z][a-z \'-]*?){_STOP}', re.IGNORECASE),
    re.compile(rf'\bmix\s+in\s+(?:the\s+)?([a-z][a-z \'-]*?){_STOP}', re.IGNORECASE),
    re.compile(rf'\bseason\s+with\s+([a-z][a-z \'-]*?){_STOP}', re.IGNORECASE),
    re.compile(rf'\bsprinkle\s+(?:with\s+)?([a-z][a-z \'-]*?){_STOP}', re.IGNORECASE),
    re.compile(rf'\bdrizzle\s+(?:with\s+)?([a-z][a-z \'-]*?){_STOP}', re.IGNORECASE),
    re.compile(rf'\bgarnish\s+with\s+([a-z][a-z \'-]*?){_STOP}', re.IGNORECASE),
]

QUANTITY_PHRASE_RE = re.compile(
    rf'(?<![\w.])({TEXT_QUANTITY_PATTERN})\s*(?:({UNITS_PATTERN})\b\.?\s+)?(?:of\s+)?([a-z][a-z -]*?){_STOP}',
    re.IGNORECASE,
)

# Staples that extractions frequently drop
COMMONLY_MISSED = {
    'salt': ('salt', 'sea salt', 'kosher salt'),
    'pepper': ('pepper', 'black pepper', 'ground pepper'),
    'oil': ('oil', 'olive oil', 'vegetable oil', 'cooking oil'),
    'butter': ('butter', 'unsalted butter', 'melted butter'),
    'garlic': ('garlic', 'garlic cloves', 'minced garlic'),
    'onion': ('onion', 'yellow onion', 'diced onion'),
    'flour': ('flour', 'all-purpose flour', 'wheat flour'),
    'sugar': ('sugar', 'granulated sugar', 'white sugar'),
    'eggs': ('egg', 'eggs', 'large eggs'),
    'milk': ('milk', 'whole milk', 'skim milk'),
}

NON_INGREDIENT_WORDS = frozenset({
    'heat', 'temperature', 'time', 'minute', 'minutes', 'hour', 'hours', 'degree', 'degrees',
    'bowl', 'pan', 'pot', 'oven', 'stove', 'plate', 'dish', 'skillet', 'tray', 'sheet',
    'mixture', 'batter', 'dough', 'liquid', 'rest', 'remaining', 'everything', 'it', 'them',
    'taste', 'flavor', 'texture', 'color', 'serving', 'servings', 'portion', 'piece',
    'people', 'person', 'persons', 'mix', 'stir', 'cook', 'bake', 'well', 'together',
    'gently', 'slowly', 'more', 'step', 'steps', 'recipe', 'water', 'add', 'combine',
    'whisk', 'pour', 'place', 'preheat', 'serve', 'season', 'until', 'golden', 'side',
})

OPTIONAL_CONTEXT_RE = re.compile(r'\b(?:optional|if desired|to taste|garnish)\b', re.IGNORECASE)
_LEADING_WORDS_RE = re.compile(r'^(?:the|a|an|some|your|more|remaining|fresh|freshly)\s+', re.IGNORECASE)
_LIST_JOIN_RE = re.compile(r'\s+(?:and|or|&)\s+', re.IGNORECASE)


def is_likely_ingredient(name: str) -> bool:
    """Rough filter for noun phrases that could name an ingredient."""
    cleaned = name.strip().lower()
    if len(cleaned) < 3 or len(cleaned) > 30 or re.search(r'\d', cleaned):
        return False
    name_words = words(cleaned)
    if not name_words or len(name_words) > 4:
        return False
    return not any(w in NON_INGREDIENT_WORDS for w in name_words)


def common_quantity(name: str) -> CommonQuantity | None:
    """Typical amount for an ingredient, matching the longest known name it contains."""
    phrase = ' '.join(words(name))
    if phrase in COMMON_INGREDIENT_QUANTITIES:
        return COMMON_INGREDIENT_QUANTITIES[phrase]
    matches = [key for key in COMMON_INGREDIENT_QUANTITIES if contains_phrase(phrase, key)]
    if not matches:
        return None
    return COMMON_INGREDIENT_QUANTITIES[max(matches, key=lambda key: (len(key), key))]


class _Candidate:
    """Accumulates evidence for one missing-ingredient candidate."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.contexts: list[str] = []
        self.quantity: float | None = None
        self.unit: str | None = None
        self.has_unit_context = False
        self.is_staple = False


class RecipeValidator:
    """Validates an extracted recipe against its source text.

    Thresholds come from ValidationSettings. Validation is deterministic: the
    same recipe and text always give the same result.
    """

    def __init__(self, settings: ValidationSettings | None = None) -> None:
        self.settings = settings or ValidationSettings()

    def validate(self, recipe: Recipe, source_text: str | None) -> ValidationResult:
        """Validate a recipe.

        Args:
            recipe: The extracted recipe (not modified)
            source_text: Text the recipe was extracted from; may be empty

        Returns:
            ValidationResult(recipe, issues, missing, inferred) where recipe is
            an updated deep copy of the input
        """
        validated = recipe.model_copy(deep=True)
        text = source_text or ''

        issues = self._check_confidence(recipe)
        missing: list[MissingIngredientCandidate] = []

        if text.strip():
            for idx, ingredient in enumerate(validated.ingredients):
                issues.extend(self._check_ingredient(idx, ingredient, text))
            missing = self.find_missing_ingredients(validated.ingredients, text)
            issues.extend(
                ValidationIssue(
                    type=IssueType.MISSING_INGREDIENT,
                    severity=Severity.MEDIUM if candidate.confidence >= 0.7 else Severity.LOW,
                    description=f"'{candidate.name}' is mentioned in the source but not in the ingredient list",
                    suggestion="Add this ingredient to the ingredient list",
                )
                for candidate in missing
            )
        else:
            _LOGGER.info("No source text available, skipping text-based checks")

        inferred = self._infer_quantities(validated, text)

        _LOGGER.debug("Validation found %d issues, %d missing candidates, %d inferred quantities",
                      len(issues), len(missing), len(inferred))
        return ValidationResult(validated, issues, missing, inferred)

    def _check_confidence(self, recipe: Recipe) -> list[ValidationIssue]:
        threshold = self.settings.low_confidence_threshold
        issues = []

        if recipe.confidence < threshold:
            issues.append(ValidationIssue(
                type=IssueType.LOW_CONFIDENCE,
                severity=Severity.MEDIUM if recipe.confidence < threshold / 2 else Severity.LOW,
                description=f"Recipe extraction confidence is low ({recipe.confidence:.2f})",
                suggestion="Review the whole recipe against the original",
                field="confidence",
            ))

        for idx, ingredient in enumerate(recipe.ingredients):
            if ingredient.confidence >= threshold:
                continue
            issues.append(ValidationIssue(
                type=IssueType.LOW_CONFIDENCE,
                severity=Severity.MEDIUM if ingredient.confidence < threshold / 2 else Severity.LOW,
                description=f"'{ingredient.name}' was extracted with low confidence "
                            f"({ingredient.confidence:.2f})",
                suggestion="Verify the name and quantity of this ingredient",
                field=f"ingredients[{idx}]",
            ))
        return issues

    def _check_ingredient(self, idx: int, ingredient: Ingredient, text: str) -> list[ValidationIssue]:
        """Invented-ingredient and quantity checks. Updates the ingredient in place."""
        settings = self.settings

        if not is_mentioned(ingredient.name, text):
            ingredient.confidence = round(ingredient.confidence * settings.invented_confidence_penalty, 3)
            ingredient.has_issues = True
            return [ValidationIssue(
                type=IssueType.INVENTED_INGREDIENT,
                severity=Severity.HIGH,
                description=f"'{ingredient.name}' does not appear in the source text",
                suggestion="Remove this ingredient if it is not part of the recipe",
                field=f"ingredients[{idx}]",
            )]

        if ingredient.quantity is None or ingredient.quantity <= 0 or ingredient.inferred:
            return []

        found = quantities_near(ingredient.name, text, settings.mention_window)
        if not found or any(within_tolerance(ingredient.quantity, number, settings.quantity_tolerance)
                            for number in found):
            return []

        ingredient.confidence = round(ingredient.confidence * settings.mismatch_confidence_penalty, 3)
        ingredient.has_issues = True
        source_values = ', '.join(format_quantity(number) for number in found)
        return [ValidationIssue(
            type=IssueType.QUANTITY_MISMATCH,
            severity=Severity.MEDIUM,
            description=f"'{ingredient.name}' has quantity {format_quantity(ingredient.quantity)} "
                        f"but the source shows {source_values}",
            suggestion="Check the quantity against the original recipe",
            field=f"ingredients[{idx}].quantity",
        )]

    def find_missing_ingredients(
        self, ingredients: list[Ingredient], text: str
    ) -> list[MissingIngredientCandidate]:
        """Ingredient-like phrases in the text that the ingredient list lacks.

        This is a recall aid: false positives are expected and are only ever
        offered as suggestions.
        """
        candidates: dict[str, _Candidate] = {}

        def candidate_for(name: str) -> _Candidate | None:
            name = _LEADING_WORDS_RE.sub('', name.strip().lower()).strip(" -'")
            if not is_likely_ingredient(name):
                return None
            if any(same_ingredient(ing.name, name) for ing in ingredients):
                return None
            return candidates.setdefault(name, _Candidate(name))

        for pattern in MENTION_PATTERNS:
            for match in pattern.finditer(text):
                for part in _LIST_JOIN_RE.split(match.group(1)):
                    candidate = candidate_for(part)
                    if candidate is not None:
                        candidate.contexts.append(match.group(0).strip())

        for match in QUANTITY_PHRASE_RE.finditer(text):
            candidate = candidate_for(match.group(3))
            if candidate is None:
                continue
            candidate.contexts.append(match.group(0).strip())
            candidate.has_unit_context = candidate.has_unit_context or bool(match.group(2))
            if candidate.quantity is None:
                candidate.quantity = parse_quantity_string(match.group(1))
                candidate.unit = match.group(2).lower() if match.group(2) else None

        for name, patterns in COMMONLY_MISSED.items():
            if not any(mention_spans(pattern, text) for pattern in patterns):
                continue
            candidate = candidate_for(name)
            if candidate is not None:
                candidate.is_staple = True
                start, end = next(span for pattern in patterns for span in mention_spans(pattern, text))
                candidate.contexts.append(snippet(text, start, end))

        scored = [self._score(candidate, text) for candidate in candidates.values()]
        kept = [c for c in scored if c.confidence >= self.settings.missing_min_confidence]
        kept.sort(key=lambda c: (-c.confidence, c.name))
        return kept[:self.settings.max_missing_candidates]

    @staticmethod
    def _score(candidate: _Candidate, text: str) -> MissingIngredientCandidate:
        confidence = 0.3
        quantity, unit = candidate.quantity, candidate.unit
        context = ' '.join(candidate.contexts)

        common = common_quantity(candidate.name)
        if common is not None:
            confidence += common.confidence * 0.5
            if quantity is None:
                quantity, unit = common.quantity, common.unit
        elif candidate.is_staple:
            confidence += 0.2

        if OPTIONAL_CONTEXT_RE.search(context):
            confidence += 0.2

        if candidate.has_unit_context:
            confidence += 0.2
        else:
            for pattern, pattern_unit, pattern_confidence in CONTEXTUAL_UNIT_PATTERNS:
                if pattern.search(context):
                    unit = unit or pattern_unit
                    confidence += pattern_confidence * 0.3
                    break

        if len(candidate.contexts) > 1:
            confidence += min(0.3, len(candidate.contexts) * 0.1)

        if mention_spans(candidate.name, text):
            confidence += 0.2

        return MissingIngredientCandidate(
            name=candidate.name,
            confidence=round(min(1.0, confidence), 3),
            context='; '.join(candidate.contexts)[:200],
            suggested_quantity=quantity,
            suggested_unit=unit,
        )

    def _infer_quantities(self, recipe: Recipe, text: str) -> list[InferredQuantity]:
        """Fill in quantities for ingredients that have none. Updates the recipe in place."""
        inferred = []
        for ingredient in recipe.ingredients:
            if ingredient.quantity is not None:
                continue

            guess = self._infer_quantity(ingredient.name, text)
            if guess is None:
                continue
            quantity, unit, confidence, reasoning = guess

            inferred.append(InferredQuantity(
                ingredient_name=ingredient.name,
                original_quantity=ingredient.quantity,
                inferred_quantity=quantity,
                inferred_unit=unit,
                confidence=confidence,
                reasoning=reasoning,
            ))
            ingredient.quantity = quantity
            ingredient.unit = ingredient.unit or unit
            ingredient.inferred = True
            ingredient.confidence = min(ingredient.confidence, confidence)
            _LOGGER.debug("Inferred %s %s for '%s'", format_quantity(quantity), unit, ingredient.name)
        return inferred

    @staticmethod
    def _infer_quantity(name: str, text: str) -> tuple[float, str, float, str] | None:
        common = common_quantity(name)
        if common is not None:
            return float(common.quantity), common.unit, common.confidence, "Based on common cooking quantities"

        for line in text.splitlines():
            if not mention_spans(name, line):
                continue
            for pattern, unit, confidence in CONTEXTUAL_UNIT_PATTERNS:
                if pattern.search(line):
                    return 1.0, unit, confidence, f"Inferred from context: '{line.strip()[:80]}'"
        return None
