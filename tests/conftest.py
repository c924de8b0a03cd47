"""
Shared fixtures for the recipe pipeline tests
"""
import pytest

from recipe_pipeline.models.recipe import Ingredient, Recipe
from recipe_pipeline.nutrition.reference import load_reference_tables


@pytest.fixture(scope="session")
def tables():
    """Bundled nutrient and synonym tables"""
    return load_reference_tables()


@pytest.fixture
def pancake_text():
    """Short typed recipe used across the suite"""
    return "Pancakes. Serves 4. 2 cups flour, 2 eggs, 1 cup milk. Mix and cook."


@pytest.fixture
def pancake_recipe():
    """The recipe the heuristic parser reads from pancake_text"""
    return Recipe(
        title="Pancakes",
        ingredients=[
            Ingredient(name="flour", quantity=2, unit="cups", confidence=0.9),
            Ingredient(name="eggs", quantity=2, confidence=0.9),
            Ingredient(name="milk", quantity=1, unit="cup", confidence=0.9),
        ],
        instructions=["Mix and cook."],
        servings=4,
        confidence=0.9,
    )
