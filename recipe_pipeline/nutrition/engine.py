"""
Nutrition computation engine.

compute_nutrition() is pure: the same ingredients, servings, tables and hints
always give the same result. NutritionCalculator adds the optional AI hint
batch in front of it.
"""
from __future__ import annotations

import logging
from typing import Mapping, Sequence

from ..models.nutrition import IngredientNutrition, NutritionFacts, NutritionResult, ReferenceTables
from ..models.recipe import Ingredient
from ..unit_converter import to_grams
from .ai_normalizer import BaseIngredientNormalizer, HintResult, build_ai_hints
from .canonicalizer import canonicalize
from .lookup import lookup
from .reference import load_reference_tables

_LOGGER = logging.getLogger(__name__)

MACRO_FIELDS = ("protein", "carbs", "fats", "fiber")


def _ingredient_nutrition(
    ingredient: Ingredient,
    tables: ReferenceTables,
    hints: Mapping[str, str],
) -> IngredientNutrition:
    canonical = canonicalize(ingredient.name, hints, tables.synonyms)
    quantity = ingredient.quantity if ingredient.quantity is not None else 1
    grams = round(to_grams(quantity, ingredient.unit, ingredient.name), 1)

    record = lookup(canonical, tables.nutrients)
    if record is None:
        return IngredientNutrition(name=ingredient.name, canonical_name=canonical, grams=grams)

    factor = grams / 100
    return IngredientNutrition(
        name=ingredient.name,
        canonical_name=canonical,
        grams=grams,
        calories=round(record.calories * factor),
        protein=round(record.protein * factor, 1),
        carbs=round(record.carbs * factor, 1),
        fats=round(record.fats * factor, 1),
        fiber=round(record.fiber * factor, 1),
        matched=True,
    )


def compute_nutrition(
    ingredients: Sequence[Ingredient],
    servings: int | None,
    tables: ReferenceTables,
    hints: Mapping[str, str] | None = None,
) -> NutritionResult:
    """Compute total and per-serving nutrition for a list of ingredients.

    Optional ingredients are skipped. Ingredients without nutrient data are
    reported with matched=False and contribute nothing to the totals.

    Args:
        ingredients: Recipe ingredients
        servings: Number of servings; missing or non-positive counts as 1
        tables: Nutrient and synonym tables
        hints: Optional AI canonical-name hints keyed by raw ingredient name

    Returns:
        NutritionResult with per_serving, total and ingredient_breakdown
    """
    hints = hints or {}
    breakdown = [
        _ingredient_nutrition(ingredient, tables, hints)
        for ingredient in ingredients
        if not ingredient.optional
    ]
    matched = [item for item in breakdown if item.matched]

    total = NutritionFacts(
        calories=sum(item.calories for item in matched),
        **{field: round(sum(getattr(item, field) for item in matched), 1) for field in MACRO_FIELDS},
    )

    divisor = max(servings or 1, 1)
    per_serving = NutritionFacts(
        calories=round(total.calories / divisor),
        **{field: round(getattr(total, field) / divisor, 1) for field in MACRO_FIELDS},
    )

    _LOGGER.debug("Matched %d of %d ingredients (%d kcal total)",
                  len(matched), len(breakdown), total.calories)
    return NutritionResult(per_serving=per_serving, total=total, ingredient_breakdown=breakdown)


class NutritionCalculator:
    """Computes recipe nutrition with optional AI name normalization.

    At most one normalization request is made per call to calculate().
    """

    def __init__(
        self,
        tables: ReferenceTables | None = None,
        normalizer: BaseIngredientNormalizer | None = None,
    ) -> None:
        self.tables = tables or load_reference_tables()
        self.normalizer = normalizer

    def hints_for(self, ingredients: Sequence[Ingredient]) -> HintResult:
        return build_ai_hints(ingredients, self.normalizer)

    def calculate(
        self, ingredients: Sequence[Ingredient], servings: int | None
    ) -> tuple[NutritionResult, HintResult]:
        """Compute nutrition, returning the hint batch alongside the result."""
        hint_result = self.hints_for(ingredients)
        result = compute_nutrition(ingredients, servings, self.tables, hint_result.hints)
        _LOGGER.info("Computed nutrition: %d kcal per serving%s",
                     result.per_serving.calories,
                     " (AI normalization degraded)" if hint_result.degraded and self.normalizer else "")
        return result, hint_result
