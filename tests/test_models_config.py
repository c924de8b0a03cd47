"""
Unit tests for the data models, settings and exceptions
"""
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from recipe_pipeline.config import PipelineSettings, QuickFixSettings, ValidationSettings, load_settings
from recipe_pipeline.const import DEFAULT_MODEL, MESSAGE_EXTRACTION_FAILED
from recipe_pipeline.exceptions import ExtractionFailed, RecipePipelineError
from recipe_pipeline.models.recipe import Ingredient, Provenance, Recipe, SourceKind
from recipe_pipeline.models.validation import IssueType, Severity, ValidationIssue


class TestRecipeModel:
    """Test cases for Recipe and Ingredient"""

    def test_instructions_require_ingredients(self):
        """Test steps without ingredients are rejected"""
        with pytest.raises(ValidationError):
            Recipe(title="Toast", instructions=["Toast the bread."])

    def test_empty_recipe_allowed(self):
        """Test a fully failed extraction is representable"""
        recipe = Recipe()

        assert recipe.is_empty()
        assert recipe.confidence == 0.0

    @pytest.mark.parametrize("servings", [0, -3])
    def test_servings_must_be_positive(self, servings):
        """Test zero and negative servings are rejected"""
        with pytest.raises(ValidationError):
            Recipe(servings=servings)

    def test_confidence_bounds(self):
        """Test confidences outside [0, 1] are rejected"""
        with pytest.raises(ValidationError):
            Ingredient(name="salt", confidence=1.5)

    def test_has_issues_not_serialized(self):
        """Test the validator flag stays out of dumps"""
        ingredient = Ingredient(name="salt", has_issues=True)

        assert "has_issues" not in ingredient.model_dump()

    def test_find_ingredient(self, pancake_recipe):
        """Test case-insensitive lookup by name"""
        assert pancake_recipe.find_ingredient(" Milk ") == 2
        assert pancake_recipe.find_ingredient("sugar") is None

    def test_provenance_frozen(self):
        """Test provenance cannot be changed after creation"""
        provenance = Provenance(source_kind=SourceKind.TEXT, extraction_method="heuristic text parse",
                                confidence=0.9, parser_notes=("classified as text",))

        with pytest.raises(ValidationError):
            provenance.confidence = 0.1

    @pytest.mark.parametrize("field,index", [
        ("ingredients[3]", 3),
        ("ingredients[12].quantity", 12),
        ("confidence", None),
        (None, None),
        ("ingredients[x]", None),
    ])
    def test_issue_ingredient_index(self, field, index):
        """Test the ingredient index encoded in an issue field"""
        issue = ValidationIssue(type=IssueType.LOW_CONFIDENCE, severity=Severity.LOW,
                                description="low", suggestion="check", field=field)

        assert issue.ingredient_index == index


class TestSettings:
    """Test cases for settings loading"""

    def test_defaults(self):
        """Test the default thresholds"""
        validation = ValidationSettings()
        quick_fix = QuickFixSettings()

        assert validation.low_confidence_threshold == 0.6
        assert validation.quantity_tolerance == 0.25
        assert validation.max_missing_candidates == 5
        assert quick_fix.auto_add_confidence == 0.85
        assert PipelineSettings().ai_enabled is False

    def test_invalid_threshold(self):
        """Test thresholds are validated"""
        with pytest.raises(ValidationError):
            ValidationSettings(low_confidence_threshold=2)

    @patch("recipe_pipeline.config.load_dotenv")
    def test_load_from_environment(self, mock_load_dotenv, monkeypatch):
        """Test the API key and models come from the environment"""
        monkeypatch.setenv("RECIPE_PIPELINE_API_KEY", "env-key")
        monkeypatch.setenv("RECIPE_PIPELINE_VISION_MODEL", "gemini-2.5-pro")
        monkeypatch.delenv("RECIPE_PIPELINE_MODEL", raising=False)

        settings = load_settings()

        mock_load_dotenv.assert_called_once_with(None)
        assert settings.api_key == "env-key"
        assert settings.ai_enabled is True
        assert settings.model == DEFAULT_MODEL
        assert settings.vision_model == "gemini-2.5-pro"

    @patch("recipe_pipeline.config.load_dotenv")
    def test_legacy_key_and_overrides(self, mock_load_dotenv, monkeypatch):
        """Test the LangExtract key fallback and explicit overrides"""
        monkeypatch.delenv("RECIPE_PIPELINE_API_KEY", raising=False)
        monkeypatch.setenv("LANGEXTRACT_API_KEY", "legacy-key")
        monkeypatch.delenv("RECIPE_PIPELINE_LOG_LEVEL", raising=False)

        settings = load_settings(model="gemini-2.5-flash", log_level=None)

        assert settings.api_key == "legacy-key"
        assert settings.model == "gemini-2.5-flash"
        assert settings.log_level == "INFO"

    @patch("recipe_pipeline.config.load_dotenv")
    def test_blank_key_disables_ai(self, mock_load_dotenv, monkeypatch):
        """Test a whitespace key counts as missing"""
        monkeypatch.setenv("RECIPE_PIPELINE_API_KEY", "   ")
        monkeypatch.delenv("LANGEXTRACT_API_KEY", raising=False)

        assert load_settings().ai_enabled is False


class TestExtractionFailed:
    """Test cases for ExtractionFailed"""

    def test_user_message_and_reason(self):
        """Test the user message hides the internal reason"""
        error = ExtractionFailed("video page has no caption text", "video")

        assert str(error).startswith(MESSAGE_EXTRACTION_FAILED)
        assert "caption" not in str(error)
        assert error.reason == "video page has no caption text"
        assert error.source_kind == "video"
        assert isinstance(error, RecipePipelineError)
