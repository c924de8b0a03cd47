"""Services package."""
from .recipe_service import calculate_recipe_nutrition, import_recipe, merge_quick_fixes

__all__ = [
    "calculate_recipe_nutrition",
    "import_recipe",
    "merge_quick_fixes",
]
