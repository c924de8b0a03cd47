"""
Unit tests for AI ingredient name normalization
"""
from unittest.mock import patch

import pytest

from recipe_pipeline.exceptions import NormalizationUnavailable
from recipe_pipeline.models.recipe import Ingredient
from recipe_pipeline.nutrition.ai_normalizer import (
    GeminiIngredientNormalizer,
    HintResult,
    build_ai_hints,
    format_ingredient_line,
    parse_hint_response,
)


class TestParseHintResponse:
    """Test cases for parsing the model answer"""

    def test_maps_lines_to_ingredients(self):
        """Test each line is attributed to the ingredient it mentions"""
        ingredients = [Ingredient(name="diced tomatoes"), Ingredient(name="ground beef")]
        text = "2 cups diced tomatoes -> tomato\n500 g ground beef -> Ground Beef\n"

        hints = parse_hint_response(text, ingredients)

        assert hints == {"diced tomatoes": "tomato", "ground beef": "ground_beef"}

    def test_strips_quotes(self):
        """Test quoted canonical names"""
        hints = parse_hint_response('olive oil -> "olive oil"', [Ingredient(name="Olive Oil")])

        assert hints == {"Olive Oil": "olive_oil"}

    def test_ignores_unparseable_lines(self):
        """Test chatter and unknown ingredients are skipped"""
        text = "Here are the results:\n\nsaffron -> saffron\neggs -> egg"

        hints = parse_hint_response(text, [Ingredient(name="eggs")])

        assert hints == {"eggs": "egg"}

    def test_empty_answer(self):
        """Test an empty answer gives no hints"""
        assert parse_hint_response("", [Ingredient(name="eggs")]) == {}

    def test_format_ingredient_line(self):
        """Test the prompt line format"""
        assert format_ingredient_line(Ingredient(name="flour", quantity=2.0, unit="cups")) == "2 cups flour"
        assert format_ingredient_line(Ingredient(name="salt")) == "salt"


class TestGeminiIngredientNormalizer:
    """Test cases for GeminiIngredientNormalizer"""

    @patch("recipe_pipeline.nutrition.ai_normalizer.genai")
    def test_single_batched_request(self, mock_genai):
        """Test all ingredients go out in one request"""
        model = mock_genai.GenerativeModel.return_value
        model.generate_content.return_value.text = "2 eggs -> egg\n1 cup whole milk -> milk"
        normalizer = GeminiIngredientNormalizer(api_key="test-key", model="gemini-test")
        ingredients = [
            Ingredient(name="eggs", quantity=2),
            Ingredient(name="whole milk", quantity=1, unit="cup"),
        ]

        result = normalizer.normalize(ingredients)

        assert result == HintResult({"eggs": "egg", "whole milk": "milk"}, False)
        mock_genai.configure.assert_called_once_with(api_key="test-key")
        mock_genai.GenerativeModel.assert_called_once_with("gemini-test")
        model.generate_content.assert_called_once()
        prompt = model.generate_content.call_args[0][0]
        assert "2 eggs" in prompt
        assert "1 cup whole milk" in prompt

    @patch("recipe_pipeline.nutrition.ai_normalizer.genai")
    def test_optional_ingredients_not_sent(self, mock_genai):
        """Test nothing is requested when every ingredient is optional"""
        normalizer = GeminiIngredientNormalizer(api_key="test-key")

        result = normalizer.normalize([Ingredient(name="parsley", optional=True)])

        assert result == HintResult({})
        mock_genai.GenerativeModel.assert_not_called()

    def test_missing_api_key(self):
        """Test a normalizer without a key is unavailable"""
        normalizer = GeminiIngredientNormalizer(api_key=None)

        with pytest.raises(NormalizationUnavailable):
            normalizer.normalize([Ingredient(name="eggs")])

    @patch("recipe_pipeline.nutrition.ai_normalizer.genai")
    def test_api_error(self, mock_genai):
        """Test API errors are wrapped and chained"""
        error = RuntimeError("quota exceeded")
        mock_genai.GenerativeModel.return_value.generate_content.side_effect = error
        normalizer = GeminiIngredientNormalizer(api_key="test-key")

        with pytest.raises(NormalizationUnavailable) as excinfo:
            normalizer.normalize([Ingredient(name="eggs")])

        assert excinfo.value.__cause__ is error

    @patch("recipe_pipeline.nutrition.ai_normalizer.genai")
    def test_empty_response(self, mock_genai):
        """Test an empty answer is treated as unavailable"""
        mock_genai.GenerativeModel.return_value.generate_content.return_value.text = "  "
        normalizer = GeminiIngredientNormalizer(api_key="test-key")

        with pytest.raises(NormalizationUnavailable):
            normalizer.normalize([Ingredient(name="eggs")])


class TestBuildAiHints:
    """Test cases for build_ai_hints"""

    def test_no_normalizer(self):
        """Test a missing normalizer degrades"""
        assert build_ai_hints([Ingredient(name="eggs")], None) == HintResult({}, degraded=True)

    @patch("recipe_pipeline.nutrition.ai_normalizer.genai")
    def test_failure_degrades(self, mock_genai):
        """Test a failing request degrades instead of raising"""
        mock_genai.GenerativeModel.return_value.generate_content.side_effect = RuntimeError("offline")

        result = build_ai_hints([Ingredient(name="eggs")], GeminiIngredientNormalizer(api_key="test-key"))

        assert result.degraded is True
        assert result.hints == {}
