"""
Unit tests for the nutrition engine and reference tables
"""
import json
from unittest.mock import Mock

import pytest

from recipe_pipeline.exceptions import NormalizationUnavailable
from recipe_pipeline.models.nutrition import NutrientRecord, ReferenceTables
from recipe_pipeline.models.recipe import Ingredient
from recipe_pipeline.nutrition.ai_normalizer import BaseIngredientNormalizer, HintResult
from recipe_pipeline.nutrition.engine import NutritionCalculator, compute_nutrition
from recipe_pipeline.nutrition.lookup import lookup
from recipe_pipeline.nutrition.reference import load_reference_tables


class TestReferenceTables:
    """Test cases for the bundled tables"""

    def test_bundled_tables_load(self, tables):
        """Test the bundled tables contain the common staples"""
        assert tables.nutrients["flour"].calories == 364
        assert tables.nutrients["banana"].calories == 89
        assert tables.synonyms["eggs"] == "egg"

    def test_every_synonym_points_at_a_record(self, tables):
        """Test the synonym table only targets known keys"""
        missing = {canonical for canonical in tables.synonyms.values()
                   if canonical not in tables.nutrients}
        assert missing == set()

    def test_tables_are_read_only(self, tables):
        """Test the mappings cannot be modified"""
        with pytest.raises(TypeError):
            tables.nutrients["flour"] = NutrientRecord(calories=1)

    def test_load_from_directory(self, tmp_path):
        """Test loading tables from a custom directory"""
        (tmp_path / "nutrients.json").write_text(json.dumps({"yam": {"calories": 118}}))
        (tmp_path / "synonyms.json").write_text(json.dumps({"yams": "yam"}))

        tables = load_reference_tables(tmp_path)

        assert tables.nutrients["yam"].calories == 118
        assert tables.nutrients["yam"].protein == 0
        assert tables.synonyms == {"yams": "yam"}

    def test_lookup(self, tables):
        """Test lookup hit and miss"""
        assert lookup("milk", tables.nutrients).calories == 61
        assert lookup("xyzzynonfood", tables.nutrients) is None


class TestComputeNutrition:
    """Test cases for compute_nutrition"""

    def test_single_banana(self, tables):
        """Test one banana is 120 g at 89 kcal/100 g"""
        result = compute_nutrition([Ingredient(name="banana", quantity=1, unit="piece")], 1, tables)

        assert result.per_serving.calories == 107
        assert result.total.calories == 107
        item = result.ingredient_breakdown[0]
        assert item.canonical_name == "banana"
        assert item.grams == 120
        assert item.matched is True
        assert item.carbs == pytest.approx(27.4)

    def test_missing_quantity_counts_as_one(self, tables):
        """Test an ingredient without a quantity counts as one item"""
        result = compute_nutrition([Ingredient(name="Bananas")], 1, tables)

        assert result.total.calories == 107

    def test_unknown_ingredient_contributes_zero(self, tables):
        """Test an unmatched ingredient is reported but not counted"""
        ingredients = [
            Ingredient(name="banana", quantity=1),
            Ingredient(name="xyzzy-nonfood", quantity=100, unit="g"),
        ]

        result = compute_nutrition(ingredients, 1, tables)

        unknown = result.ingredient_breakdown[1]
        assert unknown.matched is False
        assert unknown.canonical_name == "xyzzynonfood"
        assert unknown.grams == 100
        assert unknown.calories == 0
        assert unknown.protein == 0
        assert result.total.calories == 107

    def test_optional_ingredients_are_skipped(self, tables):
        """Test optional ingredients are not part of the totals"""
        ingredients = [
            Ingredient(name="banana", quantity=1),
            Ingredient(name="butter", quantity=1, unit="tbsp", optional=True),
        ]

        result = compute_nutrition(ingredients, 1, tables)

        assert result.total.calories == 107
        assert [item.name for item in result.ingredient_breakdown] == ["banana"]

    def test_pancakes_per_serving(self, tables, pancake_recipe):
        """Test a small recipe split over four servings"""
        result = compute_nutrition(pancake_recipe.ingredients, pancake_recipe.servings, tables)

        assert [item.calories for item in result.ingredient_breakdown] == [1747, 143, 146]
        assert result.total.calories == 2036
        assert result.per_serving.calories == 509
        assert result.total.protein == pytest.approx(69.7)
        assert result.per_serving.protein == pytest.approx(17.4)

    @pytest.mark.parametrize("servings", [None, 0, -2])
    def test_missing_servings_count_as_one(self, tables, servings):
        """Test per serving equals total without a usable servings value"""
        result = compute_nutrition([Ingredient(name="milk", quantity=1, unit="cup")], servings, tables)

        assert result.per_serving == result.total

    def test_hints_are_used(self, tables):
        """Test AI hints take priority over the synonym table"""
        ingredients = [Ingredient(name="Mystery fruit", quantity=100, unit="g")]

        result = compute_nutrition(ingredients, 1, tables, {"Mystery fruit": "banana"})

        assert result.total.calories == 89

    def test_deterministic(self, tables, pancake_recipe):
        """Test identical input gives identical output"""
        first = compute_nutrition(pancake_recipe.ingredients, 4, tables)
        second = compute_nutrition(pancake_recipe.ingredients, 4, tables)

        assert first == second

    def test_empty_recipe(self, tables):
        """Test no ingredients gives zero totals"""
        result = compute_nutrition([], 2, tables)

        assert result.total.calories == 0
        assert result.ingredient_breakdown == []

    def test_custom_tables(self):
        """Test the engine only uses the tables it is given"""
        tables = ReferenceTables(
            nutrients={"yam": NutrientRecord(calories=118, carbs=27.9)},
            synonyms={"sweet yam": "yam"},
        )

        result = compute_nutrition([Ingredient(name="Sweet Yam", quantity=200, unit="g")], 2, tables)

        assert result.total.calories == 236
        assert result.per_serving.calories == 118
        assert result.per_serving.carbs == pytest.approx(27.9)


class TestNutritionCalculator:
    """Test cases for NutritionCalculator"""

    def test_without_normalizer(self, tables):
        """Test the calculator degrades to the synonym table"""
        calculator = NutritionCalculator(tables)

        result, hints = calculator.calculate([Ingredient(name="banana", quantity=1)], 1)

        assert result.total.calories == 107
        assert hints.degraded is True

    def test_uses_normalizer_hints_once(self, tables):
        """Test one normalization request per calculation"""
        normalizer = Mock(spec=BaseIngredientNormalizer)
        normalizer.normalize.return_value = HintResult({"Mystery fruit": "banana"})
        calculator = NutritionCalculator(tables, normalizer=normalizer)
        ingredients = [Ingredient(name="Mystery fruit", quantity=100, unit="g")]

        result, hints = calculator.calculate(ingredients, 1)

        normalizer.normalize.assert_called_once_with(ingredients)
        assert hints.degraded is False
        assert result.total.calories == 89

    def test_normalizer_failure_is_degraded(self, tables):
        """Test an unavailable normalizer does not fail the computation"""
        normalizer = Mock(spec=BaseIngredientNormalizer)
        normalizer.normalize.side_effect = NormalizationUnavailable("quota exceeded")
        calculator = NutritionCalculator(tables, normalizer=normalizer)

        result, hints = calculator.calculate([Ingredient(name="eggs", quantity=2)], 1)

        assert hints.degraded is True
        assert hints.hints == {}
        assert result.total.calories == 143
