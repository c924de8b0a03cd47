"""
Unit tests for the AI text parser, vision parser and transcriber
"""
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from recipe_pipeline.const import CONFIDENCE_AI_TEXT, CONFIDENCE_VISION
from recipe_pipeline.extractors.transcriber import GeminiTranscriber
from recipe_pipeline.parsers.ai_parser import AIRecipeParser
from recipe_pipeline.parsers.vision_parser import VisionRecipeParser, recipe_from_json

RECIPE_TEXT = (
    "Tomato Soup. Serves 4. Prep 10 minutes, cook 30 minutes. "
    "You need 800 g tomatoes, 1 onion and salt if you like. "
    "Chop the onion. Simmer the tomatoes with the onion. Blend and season."
)


def extraction(extraction_class, text, alignment=None, **attributes):
    return SimpleNamespace(
        extraction_class=extraction_class,
        extraction_text=text,
        attributes=attributes or None,
        alignment_status=alignment,
    )


@pytest.fixture
def parser():
    return AIRecipeParser(api_key="test-key")


class TestAIRecipeParser:
    """Test cases for AIRecipeParser"""

    def test_empty_api_key(self):
        """Test the parser refuses an empty key"""
        with pytest.raises(ValueError):
            AIRecipeParser(api_key="  ")

    @patch("recipe_pipeline.parsers.ai_parser.lx")
    def test_parse_recipe(self, mock_lx, parser):
        """Test extractions are assembled into a recipe"""
        mock_lx.extract.return_value = SimpleNamespace(extractions=[
            extraction("title", "Tomato Soup"),
            extraction("servings", "4"),
            extraction("prep_time", "10 minutes", minutes="10"),
            extraction("cook_time", "30 minutes", minutes="30"),
            extraction("ingredient", "800 g tomatoes", "match_exact",
                       name="tomatoes", quantity="800", unit="g"),
            extraction("ingredient", "1 onion", "match_fuzzy", name="onion", quantity="1"),
            extraction("ingredient", "salt", None, name="salt", optional="true"),
            extraction("instruction", "Blend and season.", step="3"),
            extraction("instruction", "Chop the onion.", step="1"),
            extraction("instruction", "Simmer the tomatoes with the onion.", step="2"),
        ])

        recipe = parser.parse_recipe(RECIPE_TEXT)

        assert recipe.title == "Tomato Soup"
        assert recipe.servings == 4
        assert (recipe.prep_time_minutes, recipe.cook_time_minutes) == (10, 30)
        assert [i.name for i in recipe.ingredients] == ["tomatoes", "onion", "salt"]
        assert recipe.ingredients[0].quantity == 800
        assert recipe.ingredients[0].unit == "g"
        assert [i.confidence for i in recipe.ingredients] == [0.9, 0.7, 0.5]
        assert recipe.ingredients[2].optional is True
        assert recipe.instructions == [
            "Chop the onion.", "Simmer the tomatoes with the onion.", "Blend and season."]
        assert recipe.confidence == CONFIDENCE_AI_TEXT

        kwargs = mock_lx.extract.call_args.kwargs
        assert kwargs["text_or_documents"] == RECIPE_TEXT
        assert kwargs["api_key"] == "test-key"
        assert kwargs["examples"]

    @patch("recipe_pipeline.parsers.ai_parser.lx")
    def test_invalid_values_are_dropped(self, mock_lx, parser):
        """Test zero servings and unparseable numbers"""
        mock_lx.extract.return_value = SimpleNamespace(extractions=[
            extraction("servings", "0"),
            extraction("prep_time", "a while", minutes="soon"),
            extraction("ingredient", "some rice", name="rice", quantity="some"),
            extraction("ingredient", "", name="  "),
        ])

        recipe = parser.parse_recipe(RECIPE_TEXT)

        assert recipe.servings is None
        assert recipe.prep_time_minutes is None
        assert [(i.name, i.quantity) for i in recipe.ingredients] == [("rice", None)]
        assert recipe.instructions == []

    @patch("recipe_pipeline.parsers.ai_parser.lx")
    def test_non_finite_values_are_dropped(self, mock_lx, parser):
        """Test infinite servings and times"""
        mock_lx.extract.return_value = SimpleNamespace(extractions=[
            extraction("servings", "inf"),
            extraction("cook_time", "forever", minutes="Infinity"),
            extraction("ingredient", "salt", name="salt", quantity="nan"),
        ])

        recipe = parser.parse_recipe(RECIPE_TEXT)

        assert recipe.servings is None
        assert recipe.cook_time_minutes is None
        assert recipe.ingredients[0].quantity is None

    @patch("recipe_pipeline.parsers.ai_parser.lx")
    def test_no_ingredients(self, mock_lx, parser):
        """Test an answer without ingredients gives no recipe"""
        mock_lx.extract.return_value = SimpleNamespace(extractions=[
            extraction("title", "Tomato Soup"),
            extraction("instruction", "Chop the onion.", step="1"),
        ])

        assert parser.parse_recipe(RECIPE_TEXT) is None

    @patch("recipe_pipeline.parsers.ai_parser.lx")
    def test_empty_result(self, mock_lx, parser):
        """Test an empty LangExtract result"""
        mock_lx.extract.return_value = SimpleNamespace(extractions=[])

        assert parser.parse_recipe(RECIPE_TEXT) is None

    @patch("recipe_pipeline.parsers.ai_parser.lx")
    def test_short_text_not_sent(self, mock_lx, parser):
        """Test short text never reaches the model"""
        assert parser.accepts("2 eggs") is False
        assert parser.parse_recipe("2 eggs") is None
        mock_lx.extract.assert_not_called()

    @patch("recipe_pipeline.parsers.ai_parser.lx")
    def test_errors_propagate(self, mock_lx, parser):
        """Test API errors reach the caller"""
        mock_lx.extract.side_effect = RuntimeError("quota exceeded")

        with pytest.raises(RuntimeError, match="quota"):
            parser.parse_recipe(RECIPE_TEXT)


class TestRecipeFromJson:
    """Test cases for recipe_from_json"""

    def test_code_fenced_json(self):
        """Test a fenced answer is decoded"""
        answer = (
            "```json\n"
            '{"title": "Card Cake", "servings": "8", "prep_time_minutes": 0,'
            ' "ingredients": [{"name": "flour", "quantity": "250", "unit": "g"},'
            ' {"name": "sugar", "quantity": "lots"}, "2 eggs", {"quantity": 1}],'
            ' "instructions": ["Mix.", " ", "Bake."]}\n'
            "```"
        )

        recipe = recipe_from_json(answer)

        assert recipe.title == "Card Cake"
        assert recipe.servings == 8
        assert recipe.prep_time_minutes is None
        assert [(i.name, i.quantity) for i in recipe.ingredients] == [
            ("flour", 250.0), ("sugar", None), ("2 eggs", None)]
        assert recipe.instructions == ["Mix.", "Bake."]
        assert recipe.confidence == CONFIDENCE_VISION

    @pytest.mark.parametrize("answer", [
        "not json",
        "[1, 2, 3]",
        '{"title": "Empty", "ingredients": []}',
    ])
    def test_unusable_answers(self, answer):
        """Test invalid or empty answers give no recipe"""
        assert recipe_from_json(answer) is None

    def test_non_finite_numbers(self):
        """Test infinite and NaN values are dropped"""
        recipe = recipe_from_json({
            "servings": "Infinity",
            "prep_time_minutes": float("nan"),
            "cook_time_minutes": "-inf",
            "ingredients": [{"name": "salt", "quantity": "inf"}],
        })

        assert recipe.servings is None
        assert recipe.prep_time_minutes is None
        assert recipe.cook_time_minutes is None
        assert recipe.ingredients[0].quantity is None

    def test_dict_payload(self):
        """Test an already decoded answer and a custom confidence"""
        recipe = recipe_from_json({"ingredients": ["salt"]}, confidence=0.4)

        assert recipe.ingredients[0].confidence == 0.4
        assert recipe.title == ""


class TestVisionRecipeParser:
    """Test cases for VisionRecipeParser"""

    @patch("recipe_pipeline.parsers.vision_parser.genai")
    def test_parse_image(self, mock_genai):
        """Test the image is sent with the prompt and the answer decoded"""
        model = mock_genai.GenerativeModel.return_value
        model.generate_content.return_value = SimpleNamespace(
            text='{"title": "Scones", "ingredients": [{"name": "flour", "quantity": 2, "unit": "cups"}],'
                 ' "instructions": ["Bake."]}')

        recipe = VisionRecipeParser(api_key="test-key").parse_image(b"jpeg-bytes", "image/jpeg")

        mock_genai.configure.assert_called_once_with(api_key="test-key")
        contents = model.generate_content.call_args.args[0]
        assert contents[1] == {"mime_type": "image/jpeg", "data": b"jpeg-bytes"}
        assert recipe.title == "Scones"
        assert recipe.ingredients[0].unit == "cups"

    @patch("recipe_pipeline.parsers.vision_parser.genai")
    def test_empty_answer(self, mock_genai):
        """Test an empty answer gives no recipe"""
        mock_genai.GenerativeModel.return_value.generate_content.return_value = SimpleNamespace(text="")

        assert VisionRecipeParser(api_key="test-key").parse_image(b"x", "image/png") is None

    @patch("recipe_pipeline.parsers.vision_parser.genai")
    def test_errors_propagate(self, mock_genai):
        """Test API errors reach the caller"""
        mock_genai.GenerativeModel.return_value.generate_content.side_effect = RuntimeError("blocked")

        with pytest.raises(RuntimeError):
            VisionRecipeParser(api_key="test-key").parse_image(b"x", "image/png")

    def test_empty_api_key(self):
        """Test the parser refuses an empty key"""
        with pytest.raises(ValueError):
            VisionRecipeParser(api_key="")


class TestGeminiTranscriber:
    """Test cases for GeminiTranscriber"""

    @patch("recipe_pipeline.extractors.transcriber.genai")
    def test_transcribe(self, mock_genai):
        """Test the video is sent with the prompt and the text stripped"""
        model = mock_genai.GenerativeModel.return_value
        model.generate_content.return_value = SimpleNamespace(text="  2 eggs, 1 cup milk. Whisk.  \n")

        transcriber = GeminiTranscriber(api_key="test-key", model="gemini-2.5-flash")
        transcript = transcriber.transcribe(b"mp4-bytes", "video/mp4")

        assert transcript == "2 eggs, 1 cup milk. Whisk."
        mock_genai.GenerativeModel.assert_called_once_with("gemini-2.5-flash")
        contents = model.generate_content.call_args.args[0]
        assert contents[1] == {"mime_type": "video/mp4", "data": b"mp4-bytes"}

    @patch("recipe_pipeline.extractors.transcriber.genai")
    def test_empty_answer(self, mock_genai):
        """Test a missing answer gives an empty transcript"""
        mock_genai.GenerativeModel.return_value.generate_content.return_value = SimpleNamespace(text=None)

        assert GeminiTranscriber(api_key="test-key").transcribe(b"x", "video/mp4") == ""

    @patch("recipe_pipeline.extractors.transcriber.genai")
    def test_urls_not_supported(self, mock_genai):
        """Test hosted videos are left to the caption fallback"""
        assert GeminiTranscriber(api_key="test-key").transcribe_url("https://youtu.be/abc") is None

    def test_empty_api_key(self):
        """Test the transcriber refuses an empty key"""
        with pytest.raises(ValueError):
            GeminiTranscriber(api_key=None)
