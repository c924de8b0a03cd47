"""
Unit tests for text cleaning
"""
from recipe_pipeline.extractors.text_cleaner import CleanResult, clean_text


class TestCleanText:
    """Test cases for clean_text"""

    def test_social_media_noise(self):
        """Test emoji, hashtags and mentions are removed"""
        result = clean_text("Best pasta \U0001F35D #dinner @chef\n\n\n2 cups flour")

        assert result.text == "Best pasta\n\n2 cups flour"
        assert set(result.operations) == {"emoji-removal", "hashtag-removal", "mention-removal"}

    def test_urls(self):
        """Test links are removed"""
        result = clean_text("Full recipe at https://example.com/pasta today")

        assert result.text == "Full recipe at today"
        assert result.operations == ["url-removal"]

    def test_typos(self):
        """Test common transcription mistakes are corrected"""
        result = clean_text("Bake for 20 rninutes untill golden")

        assert result.text == "Bake for 20 minutes until golden"
        assert result.operations == ["typo-correction"]

    def test_bullets_and_fractions(self):
        """Test bullet glyphs and spaced fractions"""
        result = clean_text("• 1 / 2 cup sugar\n• 2 eggs")

        assert result.text == "1/2 cup sugar\n2 eggs"
        assert "bullet-removal" in result.operations

    def test_clean_text_unchanged(self, pancake_text):
        """Test clean text passes through untouched"""
        result = clean_text(pancake_text)

        assert result.text == pancake_text
        assert result.operations == []

    def test_empty(self):
        """Test empty input"""
        assert clean_text("") == CleanResult("", [])
        assert clean_text(None) == CleanResult("", [])
