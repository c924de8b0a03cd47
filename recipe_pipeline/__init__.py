"""
Recipe Pipeline.

Imports recipes from web pages, free text, photos and videos, checks them
against their source, suggests quick fixes and computes nutrition.
"""
from .config import PipelineSettings, load_settings
from .exceptions import ExtractionFailed, RecipePipelineError
from .extractors.orchestrator import RecipeExtractor
from .models import Ingredient, Provenance, Recipe, RecipeSource
from .nutrition.engine import NutritionCalculator, compute_nutrition
from .services.recipe_service import calculate_recipe_nutrition, import_recipe
from .validation.quick_fix import QuickFixGenerator
from .validation.validator import RecipeValidator

__all__ = [
    "ExtractionFailed",
    "Ingredient",
    "NutritionCalculator",
    "PipelineSettings",
    "Provenance",
    "QuickFixGenerator",
    "Recipe",
    "RecipeExtractor",
    "RecipePipelineError",
    "RecipeSource",
    "RecipeValidator",
    "calculate_recipe_nutrition",
    "compute_nutrition",
    "import_recipe",
    "load_settings",
]
