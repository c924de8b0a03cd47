"""Nutrition computation package."""
from .ai_normalizer import BaseIngredientNormalizer, GeminiIngredientNormalizer, HintResult, build_ai_hints
from .canonicalizer import CANONICALIZATION_STRATEGIES, canonicalize, normalize_name
from .engine import NutritionCalculator, compute_nutrition
from .lookup import lookup
from .reference import load_reference_tables

__all__ = [
    "BaseIngredientNormalizer",
    "CANONICALIZATION_STRATEGIES",
    "GeminiIngredientNormalizer",
    "HintResult",
    "NutritionCalculator",
    "build_ai_hints",
    "canonicalize",
    "compute_nutrition",
    "load_reference_tables",
    "lookup",
    "normalize_name",
]
