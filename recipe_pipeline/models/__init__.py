"""Models package."""
from .nutrition import (
    IngredientNutrition,
    NutrientRecord,
    NutritionFacts,
    NutritionResult,
    ReferenceTables,
)
from .recipe import Ingredient, Provenance, Recipe, SourceKind
from .source import ExtractionResult, FileRef, RecipeSource
from .validation import (
    FixType,
    InferredQuantity,
    IssueType,
    MissingIngredientCandidate,
    QuickFixAction,
    Severity,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "ExtractionResult",
    "FileRef",
    "FixType",
    "InferredQuantity",
    "Ingredient",
    "IngredientNutrition",
    "IssueType",
    "MissingIngredientCandidate",
    "NutrientRecord",
    "NutritionFacts",
    "NutritionResult",
    "Provenance",
    "QuickFixAction",
    "Recipe",
    "RecipeSource",
    "ReferenceTables",
    "Severity",
    "SourceKind",
    "ValidationIssue",
    "ValidationResult",
]
