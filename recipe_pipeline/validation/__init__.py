"""Recipe validation and quick-fix package."""
from .quick_fix import QuickFixGenerator, apply_auto_fixes, apply_quick_fix
from .validator import RecipeValidator

__all__ = [
    "QuickFixGenerator",
    "RecipeValidator",
    "apply_auto_fixes",
    "apply_quick_fix",
]
