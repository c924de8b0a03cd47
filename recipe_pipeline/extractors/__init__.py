"""Extractors package."""
from .orchestrator import RecipeExtractor
from .scraper import fetch_page_html
from .source_detection import SOURCE_SCHEMA, classify_source
from .text_cleaner import clean_text
from .transcriber import BaseTranscriber, GeminiTranscriber

__all__ = [
    "BaseTranscriber",
    "GeminiTranscriber",
    "RecipeExtractor",
    "SOURCE_SCHEMA",
    "classify_source",
    "clean_text",
    "fetch_page_html",
]
