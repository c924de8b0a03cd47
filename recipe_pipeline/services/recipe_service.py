"""
Recipe Import Service.

This module ties the pipeline stages together for callers such as the CLI:
extraction, validation, quick-fix generation and nutrition computation.
Results are returned as JSON-ready dictionaries.
"""
from __future__ import annotations

import logging
from typing import Any

from ..const import (
    DATA_EXTRACTION_METHOD,
    DATA_INFERRED,
    DATA_ISSUES,
    DATA_MISSING,
    DATA_NUTRITION,
    DATA_PROVENANCE,
    DATA_QUICK_FIXES,
    DATA_RECIPE,
    DATA_USED_AI,
    METHOD_AI_TEXT,
    METHOD_VISION,
)
from ..extractors.orchestrator import RecipeExtractor
from ..models.recipe import Recipe
from ..models.source import RecipeSource
from ..models.validation import QuickFixAction
from ..nutrition.engine import NutritionCalculator
from ..validation.quick_fix import QuickFixGenerator, apply_auto_fixes
from ..validation.validator import RecipeValidator

_LOGGER = logging.getLogger(__name__)

_AI_METHODS = (METHOD_AI_TEXT, METHOD_VISION)


def _fix_target(action: QuickFixAction) -> tuple[str, str]:
    data = action.data
    target = data.get("ingredient_name") or data.get("name") or data.get("step_index")
    return action.type.value, str(target).lower() if target is not None else ""


def merge_quick_fixes(*groups: list[QuickFixAction]) -> list[QuickFixAction]:
    """Concatenate action lists, keeping one action per (type, target).

    The first action for a target is kept unless a later one is auto-fixable
    and the kept one is not. The auto-fixable action then takes its place.
    """
    positions: dict[tuple[str, str], int] = {}
    merged: list[QuickFixAction] = []
    for group in groups:
        for action in group:
            key = _fix_target(action)
            position = positions.get(key)
            if position is None:
                positions[key] = len(merged)
                merged.append(action)
            elif action.auto_fix and not merged[position].auto_fix:
                _LOGGER.debug("Quick fix %s replaces %s", action.id, merged[position].id)
                merged[position] = action
            else:
                _LOGGER.debug("Dropping duplicate quick fix %s", action.id)
    return merged


def import_recipe(
    source: RecipeSource | dict[str, Any],
    *,
    extractor: RecipeExtractor,
    validator: RecipeValidator | None = None,
    fix_generator: QuickFixGenerator | None = None,
    apply_fixes: bool = False,
) -> dict[str, Any]:
    """Extract, validate and generate quick fixes for a recipe source.

    This function orchestrates the import process:
    1. Extracts the recipe with the orchestrator
    2. Validates it against the text it was read from
    3. Generates quick fixes (validation findings and extraction artifacts)
    4. Optionally applies the auto-fixable actions

    Args:
        source: A RecipeSource or a dict matching SOURCE_SCHEMA
        extractor: The extraction orchestrator
        validator: Recipe validator (default settings if omitted)
        fix_generator: Quick-fix generator (default settings if omitted)
        apply_fixes: Apply auto_fix actions to the returned recipe

    Returns:
        Dictionary with the recipe, provenance, issues, missing ingredients,
        inferred quantities, quick fixes and extraction metadata

    Raises:
        ExtractionFailed: If no recipe could be extracted
    """
    validator = validator or RecipeValidator()
    fix_generator = fix_generator or QuickFixGenerator()

    recipe, provenance, source_text = extractor.extract(source)
    validated, issues, missing, inferred = validator.validate(recipe, source_text)

    quick_fixes = merge_quick_fixes(
        fix_generator.generate(validated, issues, missing, inferred, source_text),
        fix_generator.generate_extraction_error_fixes(source_text, validated),
    )

    if apply_fixes:
        validated = apply_auto_fixes(validated, quick_fixes)
        _LOGGER.info("Applied %d automatic fixes", sum(1 for action in quick_fixes if action.auto_fix))

    _LOGGER.info(
        "Imported recipe '%s' with %d ingredients (%d issues, %d quick fixes)",
        validated.title,
        len(validated.ingredients),
        len(issues),
        len(quick_fixes),
    )

    method = provenance.extraction_method
    return {
        DATA_RECIPE: validated.model_dump(mode="json"),
        DATA_PROVENANCE: provenance.model_dump(mode="json"),
        DATA_ISSUES: [issue.model_dump(mode="json") for issue in issues],
        DATA_MISSING: [candidate.model_dump(mode="json") for candidate in missing],
        DATA_INFERRED: [item.model_dump(mode="json") for item in inferred],
        DATA_QUICK_FIXES: [action.model_dump(mode="json") for action in quick_fixes],
        DATA_EXTRACTION_METHOD: method,
        DATA_USED_AI: any(ai_method in method for ai_method in _AI_METHODS),
    }


def calculate_recipe_nutrition(recipe: Recipe | dict[str, Any], *, calculator: NutritionCalculator) -> dict[str, Any]:
    """Compute nutrition for a recipe.

    Independent of validation, so it can run alongside it once the
    ingredient list is final.

    Args:
        recipe: A Recipe or its dumped dict form
        calculator: Nutrition calculator with reference tables

    Returns:
        Dictionary with per_serving, total, ingredient_breakdown and
        hints_degraded (True when AI name normalization was unavailable)
    """
    if isinstance(recipe, dict):
        recipe = Recipe.model_validate(recipe)

    result, hints = calculator.calculate(recipe.ingredients, recipe.servings)
    data = result.model_dump(mode="json")
    data["hints_degraded"] = hints.degraded
    return {DATA_NUTRITION: data}
