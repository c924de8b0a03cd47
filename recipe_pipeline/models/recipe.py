"""
Recipe data models for the Recipe Pipeline.

This module defines the Pydantic models used to structure recipe data
extracted from web pages, free text, images and video transcripts.
"""
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SourceKind(str, Enum):
    """Kind of source a recipe was extracted from."""

    URL = "url"
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"


class Ingredient(BaseModel):
    """A structured representation of a single ingredient.

    Attributes:
        name: The name of the ingredient (e.g., 'all-purpose flour', 'Mehl')
        quantity: Optional numeric quantity (e.g., 2.5, 250)
        unit: Optional unit of measurement (e.g., 'cups', 'g', 'TL')
        optional: Whether the recipe marks the ingredient as optional
        confidence: Extraction confidence for this ingredient
        inferred: True when quantity/unit were guessed rather than extracted
        group: Optional ingredient group/section (e.g., 'For the dough')
        has_issues: Set by the validator, never serialized
    """

    name: str = Field(
        description="The name of the ingredient, e.g., 'all-purpose flour'"
    )
    quantity: float | None = Field(
        default=None,
        description="The numeric quantity, e.g., 2.5"
    )
    unit: str | None = Field(
        default=None,
        description="The unit of measurement, e.g., 'cups', 'grams', 'tbsp'"
    )
    optional: bool = Field(
        default=False,
        description="Whether the ingredient is optional"
    )
    confidence: float = Field(
        default=1.0, ge=0, le=1,
        description="Extraction confidence between 0 and 1"
    )
    inferred: bool = Field(
        default=False,
        description="True if quantity/unit were inferred instead of extracted"
    )
    group: str | None = Field(
        default=None,
        description="The ingredient group or section, e.g., 'For the dough', 'Für den Boden'"
    )
    has_issues: bool = Field(
        default=False,
        exclude=True,
        description="Derived flag populated by the validator"
    )


class Recipe(BaseModel):
    """The top-level schema for an extracted recipe.

    A recipe with no ingredients is only meaningful when it also has no
    instructions (a fully failed extraction). Servings, when known, are a
    positive integer.
    """

    title: str = Field(
        default="",
        description="The title of the recipe"
    )
    description: str | None = Field(
        default=None,
        description="Short description or summary"
    )
    image_ref: str | None = Field(
        default=None,
        description="URL or reference of the recipe image"
    )
    ingredients: list[Ingredient] = Field(
        default_factory=list,
        description="A list of all ingredients, structured using the Ingredient model"
    )
    instructions: list[str] = Field(
        default_factory=list,
        description="Ordered preparation steps, one string per step"
    )
    prep_time_minutes: int | None = Field(default=None, ge=0)
    cook_time_minutes: int | None = Field(default=None, ge=0)
    servings: int | None = Field(
        default=None, gt=0,
        description="Number of servings the recipe yields"
    )
    tags: set[str] = Field(default_factory=set)
    confidence: float = Field(
        default=0.0, ge=0, le=1,
        description="Overall extraction confidence"
    )

    @model_validator(mode="after")
    def _check_ingredients_present(self) -> Recipe:
        if not self.ingredients and self.instructions:
            raise ValueError(
                "A recipe with instructions must have at least one ingredient")
        return self

    def is_empty(self) -> bool:
        """True when nothing usable was extracted."""
        return not self.title.strip() and not self.ingredients and not self.instructions

    def find_ingredient(self, name: str) -> int | None:
        """Index of the first ingredient with this name (case-insensitive)."""
        wanted = name.strip().lower()
        for idx, ingredient in enumerate(self.ingredients):
            if ingredient.name.strip().lower() == wanted:
                return idx
        return None


class Provenance(BaseModel):
    """How a recipe was extracted. Read-only once created."""

    model_config = ConfigDict(frozen=True)

    source_kind: SourceKind
    extraction_method: str = Field(
        description="Human-readable description of the technique used"
    )
    confidence: float = Field(ge=0, le=1)
    parser_notes: tuple[str, ...] = Field(default_factory=tuple)
