"""
Nutrition data models for the Recipe Pipeline.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NutrientRecord(BaseModel):
    """Nutrient values per 100 g of an ingredient.

    Attributes:
        calories: Energy in kcal
        protein: Protein in grams
        carbs: Carbohydrates in grams
        fats: Fat in grams
        fiber: Dietary fiber in grams
        sugar: Optional sugar in grams
        sodium: Optional sodium in milligrams
    """

    model_config = ConfigDict(frozen=True)

    calories: float = Field(ge=0)
    protein: float = Field(default=0, ge=0)
    carbs: float = Field(default=0, ge=0)
    fats: float = Field(default=0, ge=0)
    fiber: float = Field(default=0, ge=0)
    sugar: float | None = None
    sodium: float | None = None


class NutritionFacts(BaseModel):
    """Aggregated nutrition values (total or per serving)."""

    calories: int = 0
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0
    fiber: float = 0.0


class IngredientNutrition(BaseModel):
    """Contribution of one ingredient to the recipe's nutrition.

    Unmatched ingredients carry zeros for every nutrient and matched=False,
    but still report the gram weight they were converted to.
    """

    name: str
    canonical_name: str
    grams: float
    calories: int = 0
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0
    fiber: float = 0.0
    matched: bool = False


class NutritionResult(BaseModel):
    per_serving: NutritionFacts
    total: NutritionFacts
    ingredient_breakdown: list[IngredientNutrition] = Field(default_factory=list)


class ReferenceTables(BaseModel):
    """Read-only nutrient and synonym tables passed into the nutrition engine.

    Attributes:
        nutrients: Canonical ingredient key -> per-100g nutrient record
        synonyms: Alias -> canonical ingredient key
    """

    model_config = ConfigDict(frozen=True)

    nutrients: Mapping[str, NutrientRecord] = Field(default_factory=dict)
    synonyms: Mapping[str, str] = Field(default_factory=dict)

    @field_validator("nutrients", "synonyms", mode="after")
    @classmethod
    def _freeze(cls, value: Mapping) -> Mapping:
        return MappingProxyType(dict(value))
