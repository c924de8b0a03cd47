"""
Validation data models for the Recipe Pipeline.

Issues, missing-ingredient candidates, inferred quantities and quick-fix
actions produced when an extracted recipe is checked against its source text.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, NamedTuple

from pydantic import BaseModel, Field

from .recipe import Recipe


class IssueType(str, Enum):
    """Kind of problem found in an extracted recipe."""

    MISSING_INGREDIENT = "missing_ingredient"
    QUANTITY_MISMATCH = "quantity_mismatch"
    INVENTED_INGREDIENT = "invented_ingredient"
    LOW_CONFIDENCE = "low_confidence"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class FixType(str, Enum):
    """Kind of correction a quick-fix action applies."""

    ADD_INGREDIENT = "add_ingredient"
    FIX_QUANTITY = "fix_quantity"
    MARK_OPTIONAL = "mark_optional"
    REMOVE_INGREDIENT = "remove_ingredient"
    ADD_TIME = "add_time"
    FIX_SERVINGS = "fix_servings"
    FIX_INSTRUCTION = "fix_instruction"


class ValidationIssue(BaseModel):
    """A single problem detected by the validator.

    Attributes:
        type: The kind of issue
        severity: How much the issue matters to the user
        description: Human-readable explanation
        suggestion: What the user could do about it
        field: Path of the affected field, e.g. 'ingredients[2].quantity'
    """

    type: IssueType
    severity: Severity
    description: str
    suggestion: str
    field: str | None = Field(
        default=None,
        description="'ingredients[<i>]', 'ingredients[<i>].quantity' or 'confidence'"
    )

    @property
    def ingredient_index(self) -> int | None:
        """Index encoded in an 'ingredients[<i>]...' field, if any."""
        if not self.field or not self.field.startswith("ingredients["):
            return None
        try:
            return int(self.field[len("ingredients["):self.field.index("]")])
        except ValueError:
            return None


class MissingIngredientCandidate(BaseModel):
    """An ingredient mentioned in the source text but absent from the recipe."""

    name: str
    confidence: float = Field(ge=0, le=1)
    context: str = Field(description="Snippet of source text around the mention")
    suggested_quantity: float | None = None
    suggested_unit: str | None = None


class InferredQuantity(BaseModel):
    """A quantity guessed for an ingredient that had none."""

    ingredient_name: str
    original_quantity: float | None = None
    inferred_quantity: float
    inferred_unit: str
    confidence: float = Field(ge=0, le=1)
    reasoning: str


class QuickFixAction(BaseModel):
    """A self-contained correction that can be applied to a recipe.

    Ingredients are referenced by name and steps by index, so an action never
    depends on another action having been applied first.
    """

    id: str = Field(description="Unique within one generation run, '<type>_<n>'")
    type: FixType
    data: dict[str, Any] = Field(default_factory=dict)
    auto_fix: bool = False


class ValidationResult(NamedTuple):
    """Result of RecipeValidator.validate()."""

    recipe: Recipe
    issues: list[ValidationIssue]
    missing: list[MissingIngredientCandidate]
    inferred: list[InferredQuantity]
