"""
Quick-fix action generation and application.

Every action carries the data it needs (an ingredient name, a step index,
a value) so it can be applied to the current recipe on its own, in any
order relative to the other actions.
"""
from __future__ import annotations

import itertools
import logging
import re
from typing import Any, Iterable

from ..config import QuickFixSettings
from ..models.recipe import Ingredient, Recipe
from ..models.validation import (
    FixType,
    InferredQuantity,
    IssueType,
    MissingIngredientCandidate,
    QuickFixAction,
    ValidationIssue,
)
from ..parsers.text_parser import COOK_TIME_RE, PREP_TIME_RE, find_servings, parse_minutes
from .matching import explicit_quantities, mention_spans, same_ingredient
from .validator import COMMONLY_MISSED, common_quantity

_LOGGER = logging.getLogger(__name__)

OPTIONAL_MARKER_RE = re.compile(r'\b(?:optional|for garnish|if desired|for serving)\b', re.IGNORECASE)
ZERO_SERVINGS_RE = re.compile(
    r'\b(?:serves|servings?\s*:?|makes|yields?\s*:?|portions?\s*:?)\s*0+\b(?![.,]\d)',
    re.IGNORECASE,
)
DANGLING_WORDS = frozenset({
    'and', 'or', 'the', 'a', 'an', 'with', 'to', 'of', 'in', 'into', 'then', 'until',
    'for', 'on', 'at', 'from', 'your',
})
_TERMINAL_PUNCTUATION = ('.', '!', '?', ')', ':')
_SENTENCE_END_RE = re.compile(r'[.!?](?=\s|$)')

# Staple added by the extraction-error pass: (quantity, unit)
STAPLE_QUANTITIES = {
    'salt': (1, 'tsp'),
    'pepper': (0.5, 'tsp'),
    'oil': (2, 'tbsp'),
    'butter': (2, 'tbsp'),
    'garlic': (2, 'clove'),
    'onion': (1, 'cup'),
    'flour': (2, 'cup'),
    'sugar': (1, 'cup'),
    'eggs': (2, 'pcs'),
    'milk': (1, 'cup'),
}
STAPLE_CONFIDENCE = 0.8


def looks_truncated(step: str) -> bool:
    """True for a step that stops mid-sentence ('Add the flour and')."""
    stripped = step.strip()
    if not stripped or stripped.endswith(_TERMINAL_PUNCTUATION):
        return False
    if stripped.endswith(','):
        return True
    last_word = stripped.split()[-1].lower()
    return last_word in DANGLING_WORDS


def _complete_step(step: str, source_text: str) -> str | None:
    """Find the rest of a truncated step in the source text."""
    stripped = step.strip().rstrip(',')
    position = source_text.lower().find(stripped.lower())
    if position < 0:
        return None
    end = _SENTENCE_END_RE.search(source_text, position + len(stripped))
    if end is None:
        return None
    completed = ' '.join(source_text[position:end.end()].split())
    return completed if len(completed) > len(stripped) + 1 else None


class QuickFixGenerator:
    """Turns validation findings into quick-fix actions.

    Action ids are unique within one call ('<type>_<n>'). auto_fix is only set
    when an action has a single unambiguous correction.
    """

    def __init__(self, settings: QuickFixSettings | None = None) -> None:
        self.settings = settings or QuickFixSettings()

    def generate(
        self,
        recipe: Recipe,
        issues: Iterable[ValidationIssue],
        missing: Iterable[MissingIngredientCandidate],
        inferred: Iterable[InferredQuantity],
        source_text: str | None = None,
    ) -> list[QuickFixAction]:
        """Generate actions for a validated recipe.

        Args:
            recipe: The validated recipe
            issues: Issues reported by the validator
            missing: Missing-ingredient candidates
            inferred: Inferred quantities
            source_text: Original text, used to look up corrections

        Returns:
            List of actions, one per distinct finding
        """
        counter = itertools.count()
        text = source_text or ''
        actions: list[QuickFixAction] = []

        def add(fix_type: FixType, data: dict[str, Any], auto_fix: bool = False) -> None:
            actions.append(QuickFixAction(
                id=f"{fix_type.value}_{next(counter)}", type=fix_type, data=data, auto_fix=auto_fix))

        for candidate in missing:
            add(FixType.ADD_INGREDIENT, {
                "name": candidate.name,
                "quantity": candidate.suggested_quantity,
                "unit": candidate.suggested_unit,
                "optional": False,
                "confidence": candidate.confidence,
            }, auto_fix=candidate.confidence >= self.settings.auto_add_confidence)

        for issue in issues:
            idx = issue.ingredient_index
            if idx is None or idx >= len(recipe.ingredients):
                # recipe-level low confidence has no discrete correction
                continue
            ingredient = recipe.ingredients[idx]

            if issue.type == IssueType.INVENTED_INGREDIENT:
                add(FixType.REMOVE_INGREDIENT, {"ingredient_name": ingredient.name})
            elif issue.type == IssueType.QUANTITY_MISMATCH:
                add(*self._quantity_fix(ingredient, text))
            elif issue.type == IssueType.LOW_CONFIDENCE:
                add(FixType.FIX_QUANTITY, {
                    "ingredient_name": ingredient.name,
                    "current_quantity": ingredient.quantity,
                    "current_unit": ingredient.unit,
                    "new_quantity": ingredient.quantity,
                    "new_unit": ingredient.unit,
                    "verify": True,
                })

        for item in inferred:
            if item.confidence >= self.settings.inferred_review_confidence:
                continue
            add(FixType.FIX_QUANTITY, {
                "ingredient_name": item.ingredient_name,
                "current_quantity": item.inferred_quantity,
                "current_unit": item.inferred_unit,
                "new_quantity": item.inferred_quantity,
                "new_unit": item.inferred_unit,
                "is_inferred": True,
                "reasoning": item.reasoning,
            })

        if text:
            for ingredient in recipe.ingredients:
                if ingredient.optional:
                    continue
                if any(OPTIONAL_MARKER_RE.search(line) and mention_spans(ingredient.name, line)
                       for line in text.splitlines()):
                    add(FixType.MARK_OPTIONAL, {"ingredient_name": ingredient.name}, auto_fix=True)

        if recipe.servings is None:
            servings = find_servings(text)
            add(FixType.FIX_SERVINGS, {"servings": servings}, auto_fix=servings is not None)

        if recipe.prep_time_minutes is None and recipe.cook_time_minutes is None:
            prep = PREP_TIME_RE.search(text)
            cook = COOK_TIME_RE.search(text)
            prep_minutes = parse_minutes(prep.group(1)) if prep else None
            cook_minutes = parse_minutes(cook.group(1)) if cook else None
            add(FixType.ADD_TIME, {
                "prep_time_minutes": prep_minutes,
                "cook_time_minutes": cook_minutes,
            }, auto_fix=prep_minutes is not None or cook_minutes is not None)

        for idx, step in enumerate(recipe.instructions):
            if len(step.strip()) < self.settings.min_instruction_length:
                add(FixType.FIX_INSTRUCTION, {
                    "step_index": idx,
                    "current_text": step,
                    "new_text": step,
                })

        _LOGGER.debug("Generated %d quick-fix actions", len(actions))
        return actions

    @staticmethod
    def _quantity_fix(ingredient: Ingredient, text: str) -> tuple[FixType, dict[str, Any], bool]:
        found = explicit_quantities(ingredient.name, text)
        distinct = {quantity for quantity, _ in found}
        new_quantity, new_unit = found[0] if found else (ingredient.quantity, ingredient.unit)
        return FixType.FIX_QUANTITY, {
            "ingredient_name": ingredient.name,
            "current_quantity": ingredient.quantity,
            "current_unit": ingredient.unit,
            "new_quantity": new_quantity,
            "new_unit": new_unit or ingredient.unit,
            "source_quantities": sorted(distinct),
        }, len(distinct) == 1

    def generate_extraction_error_fixes(self, source_text: str | None, recipe: Recipe) -> list[QuickFixAction]:
        """Look for typical extraction artifacts.

        Detects truncated steps, a zero servings value in the source, staples
        present in the source but not extracted, and explicit source quantities
        that disagree with the extracted ones.
        """
        counter = itertools.count()
        text = source_text or ''
        actions: list[QuickFixAction] = []

        def add(fix_type: FixType, data: dict[str, Any], auto_fix: bool = False) -> None:
            actions.append(QuickFixAction(
                id=f"extraction_{fix_type.value}_{next(counter)}", type=fix_type, data=data, auto_fix=auto_fix))

        for idx, step in enumerate(recipe.instructions):
            if not looks_truncated(step):
                continue
            completed = _complete_step(step, text) if text else None
            add(FixType.FIX_INSTRUCTION, {
                "step_index": idx,
                "current_text": step,
                "new_text": completed or step,
                "truncated": True,
            }, auto_fix=completed is not None)

        if not text:
            return actions

        if recipe.servings is None and ZERO_SERVINGS_RE.search(text):
            add(FixType.FIX_SERVINGS, {"servings": None, "source_value": 0})

        for name, patterns in COMMONLY_MISSED.items():
            if not any(mention_spans(pattern, text) for pattern in patterns):
                continue
            if any(same_ingredient(ing.name, pattern) for ing in recipe.ingredients for pattern in patterns):
                continue
            quantity, unit = STAPLE_QUANTITIES[name]
            common = common_quantity(name)
            if common is not None:
                quantity, unit = common.quantity, common.unit
            add(FixType.ADD_INGREDIENT, {
                "name": name,
                "quantity": quantity,
                "unit": unit,
                "optional": False,
                "confidence": STAPLE_CONFIDENCE,
            }, auto_fix=STAPLE_CONFIDENCE >= self.settings.auto_add_confidence)

        for ingredient in recipe.ingredients:
            if ingredient.quantity is None or ingredient.inferred:
                continue
            found = explicit_quantities(ingredient.name, text)
            if not found or any(abs(quantity - ingredient.quantity) <= 0.1 for quantity, _ in found):
                continue
            distinct = {quantity for quantity, _ in found}
            new_quantity, new_unit = found[0]
            add(FixType.FIX_QUANTITY, {
                "ingredient_name": ingredient.name,
                "current_quantity": ingredient.quantity,
                "current_unit": ingredient.unit,
                "new_quantity": new_quantity,
                "new_unit": new_unit or ingredient.unit,
                "source_quantities": sorted(distinct),
            }, auto_fix=len(distinct) == 1)

        _LOGGER.debug("Generated %d extraction-error actions", len(actions))
        return actions


def _insert_position(ingredients: list[Ingredient], name: str) -> int:
    """Name-ordered slot within the trailing run of inferred ingredients."""
    start = len(ingredients)
    while start > 0 and ingredients[start - 1].inferred:
        start -= 1
    for position in range(start, len(ingredients)):
        if ingredients[position].name.lower() > name.lower():
            return position
    return len(ingredients)


def apply_quick_fix(recipe: Recipe, action: QuickFixAction) -> Recipe:
    """Apply one action to a copy of the recipe.

    Actions whose target no longer exists are ignored, so applying an action
    twice or after a conflicting one is harmless.
    """
    updated = recipe.model_copy(deep=True)
    data = action.data
    name = data.get("ingredient_name") or data.get("name") or ''
    idx = updated.find_ingredient(name) if name else None

    if action.type == FixType.ADD_INGREDIENT:
        if idx is None and name:
            updated.ingredients.insert(_insert_position(updated.ingredients, name), Ingredient(
                name=name,
                quantity=data.get("quantity"),
                unit=data.get("unit"),
                optional=bool(data.get("optional", False)),
                confidence=data.get("confidence", 1.0),
                inferred=True,
            ))
    elif action.type == FixType.REMOVE_INGREDIENT:
        if idx is not None and len(updated.ingredients) == 1 and updated.instructions:
            # a recipe with steps keeps at least one ingredient
            _LOGGER.info("Not removing %s, the last ingredient of a recipe with steps", name)
        elif idx is not None:
            del updated.ingredients[idx]
    elif action.type == FixType.FIX_QUANTITY:
        if idx is not None and data.get("new_quantity") is not None:
            updated.ingredients[idx].quantity = data["new_quantity"]
            updated.ingredients[idx].unit = data.get("new_unit") or updated.ingredients[idx].unit
    elif action.type == FixType.MARK_OPTIONAL:
        if idx is not None:
            updated.ingredients[idx].optional = True
    elif action.type == FixType.ADD_TIME:
        if updated.prep_time_minutes is None and data.get("prep_time_minutes"):
            updated.prep_time_minutes = data["prep_time_minutes"]
        if updated.cook_time_minutes is None and data.get("cook_time_minutes"):
            updated.cook_time_minutes = data["cook_time_minutes"]
    elif action.type == FixType.FIX_SERVINGS:
        servings = data.get("servings")
        if isinstance(servings, int) and servings > 0:
            updated.servings = servings
    elif action.type == FixType.FIX_INSTRUCTION:
        step_index = data.get("step_index")
        if (isinstance(step_index, int) and 0 <= step_index < len(updated.instructions)
                and data.get("new_text")):
            updated.instructions[step_index] = data["new_text"]
    else:
        _LOGGER.warning("Unknown quick-fix type %s", action.type)

    return updated


def apply_auto_fixes(recipe: Recipe, actions: Iterable[QuickFixAction]) -> Recipe:
    """Apply every auto_fix action, in the given order."""
    for action in actions:
        if action.auto_fix:
            _LOGGER.debug("Applying quick fix %s", action.id)
            recipe = apply_quick_fix(recipe, action)
    return recipe
