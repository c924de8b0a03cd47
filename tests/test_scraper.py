"""
Unit tests for page fetching and recipe content discovery
"""
import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from recipe_pipeline.extractors.scraper import (
    extract_caption_text,
    extract_main_text,
    fetch_page_html,
    find_jsonld_recipe,
    validate_url,
)


def _jsonld(data):
    return f'<script type="application/ld+json">{json.dumps(data)}</script>'


def _response(body=b"<html><body>ok</body></html>", content_type="text/html; charset=utf-8"):
    response = MagicMock()
    response.headers = {"content-type": content_type}
    response.iter_content.return_value = [body]
    return response


class TestFindJsonldRecipe:
    """Test cases for find_jsonld_recipe"""

    def test_single_object(self):
        """Test a top-level Recipe object"""
        html = f"<html><head>{_jsonld({'@type': 'Recipe', 'name': 'Soup'})}</head></html>"

        assert find_jsonld_recipe(html)["name"] == "Soup"

    def test_graph_container(self):
        """Test a Recipe inside an @graph list"""
        data = {
            "@context": "https://schema.org",
            "@graph": [{"@type": "WebPage", "name": "Page"}, {"@type": "Recipe", "name": "Stew"}],
        }

        assert find_jsonld_recipe(_jsonld(data))["name"] == "Stew"

    def test_list_and_type_list(self):
        """Test a top-level list and a list-valued @type"""
        data = [{"@type": "Organization"}, {"@type": ["Recipe", "NewsArticle"], "name": "Curry"}]

        assert find_jsonld_recipe(_jsonld(data))["name"] == "Curry"

    def test_skips_invalid_scripts(self):
        """Test broken JSON-LD blocks are skipped"""
        html = ('<script type="application/ld+json">{broken</script>'
                + _jsonld({"@type": "Recipe", "name": "Salad"}))

        assert find_jsonld_recipe(html)["name"] == "Salad"

    def test_no_recipe(self):
        """Test a page without a Recipe object"""
        assert find_jsonld_recipe(_jsonld({"@type": "WebPage"})) is None
        assert find_jsonld_recipe("<html></html>") is None


class TestExtractText:
    """Test cases for page text and caption extraction"""

    def test_main_text_uses_recipe_container(self):
        """Test navigation, scripts and ads are removed"""
        html = """
        <html><body>
          <nav>Home | Recipes</nav>
          <article>
            <h1>Soup</h1>
            <p>2 cups water</p>
            <div class="advertisement">Buy now</div>
            <script>var x = 1;</script>
          </article>
          <footer>Copyright</footer>
        </body></html>
        """

        text = extract_main_text(html)

        assert text.splitlines() == ["Soup", "2 cups water"]

    def test_main_text_truncated(self):
        """Test the max_length limit"""
        html = "<main><p>" + "a" * 500 + "</p></main>"

        assert len(extract_main_text(html, max_length=100)) == 100

    def test_caption_prefers_longest(self):
        """Test the longest caption source wins"""
        long_caption = "Pancakes. Serves 4. 2 cups flour, 2 eggs, 1 cup milk. Mix and cook."
        html = (
            '<html><head><meta property="og:description" content="Pancakes. Serves 4...">'
            + _jsonld({"@type": "VideoObject", "description": long_caption})
            + "</head></html>"
        )

        assert extract_caption_text(html) == long_caption

    def test_caption_missing(self):
        """Test a page without a caption"""
        assert extract_caption_text("<html><head></head></html>") == ""


class TestFetchPageHtml:
    """Test cases for fetch_page_html"""

    @pytest.mark.parametrize("url", ["ftp://example.com/recipe", "http://127.0.0.1/admin",
                                     "http://192.168.1.10/", "file:///etc/passwd"])
    def test_validate_url_rejects(self, url):
        """Test non-HTTP schemes and internal addresses are rejected"""
        with pytest.raises(ValueError):
            validate_url(url)

    def test_validate_url_accepts_public_host(self):
        """Test an ordinary recipe URL passes"""
        validate_url("https://www.example.com/recipe/1")

    def test_empty_url(self):
        """Test an empty URL is rejected before any request"""
        with pytest.raises(ValueError):
            fetch_page_html("  ")

    @patch("recipe_pipeline.extractors.scraper.cloudscraper")
    def test_fetch_html(self, mock_cloudscraper):
        """Test a successful fetch returns decoded HTML"""
        session = mock_cloudscraper.create_scraper.return_value
        session.get.return_value = _response()

        html = fetch_page_html("https://www.example.com/recipe/1")

        assert html == "<html><body>ok</body></html>"
        session.get.assert_called_once()

    @patch("recipe_pipeline.extractors.scraper.cloudscraper")
    def test_rejects_non_html(self, mock_cloudscraper):
        """Test non-HTML responses are refused"""
        session = mock_cloudscraper.create_scraper.return_value
        session.get.return_value = _response(b"{}", content_type="application/json")

        with pytest.raises(ValueError):
            fetch_page_html("https://www.example.com/api")

    @patch("recipe_pipeline.extractors.scraper.time.sleep")
    @patch("recipe_pipeline.extractors.scraper.cloudscraper")
    def test_retries_then_raises(self, mock_cloudscraper, mock_sleep):
        """Test connection errors are retried with backoff"""
        session = mock_cloudscraper.create_scraper.return_value
        session.get.side_effect = requests.exceptions.ConnectionError("down")

        with pytest.raises(requests.exceptions.RequestException):
            fetch_page_html("https://www.example.com/recipe/1")

        assert session.get.call_count == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1, 2]
