"""
Recipe extraction orchestrator.

Classifies a source, routes it to the matching extraction method and returns
the recipe together with its provenance. Each method assigns its own
confidence; the orchestrator reports the one that produced the recipe.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable
from urllib.parse import unquote, urlparse

import voluptuous as vol

from ..config import PipelineSettings
from ..const import (
    CONFIDENCE_PAGE_TEXT_PENALTY,
    CONFIDENCE_TRANSCRIPT_PENALTY,
    METHOD_CAPTION_PREFIX,
    METHOD_PAGE_TEXT_PREFIX,
    METHOD_TRANSCRIPT_PREFIX,
)
from ..exceptions import ExtractionFailed
from ..models.recipe import Provenance, Recipe, SourceKind
from ..models.source import ExtractionResult, FileRef, RecipeSource
from ..parsers.ai_parser import AIRecipeParser
from ..parsers.jsonld_parser import JSONLDRecipeParser
from ..parsers.text_parser import TextRecipeParser
from ..parsers.vision_parser import BaseVisionParser, VisionRecipeParser
from .scraper import extract_caption_text, extract_main_text, fetch_page_html, find_jsonld_recipe
from .source_detection import Detection, classify_source, coerce_source, guess_mime_type
from .text_cleaner import clean_text
from .transcriber import BaseTranscriber, GeminiTranscriber

_LOGGER = logging.getLogger(__name__)

PageFetcher = Callable[[str], str]


class _Trace:
    """Per-call notes and the text the recipe was read from."""

    def __init__(self) -> None:
        self.notes: list[str] = []
        self.source_text = ""


class RecipeExtractor:
    """Extracts a structured Recipe from a URL, text, image, or video source.

    Collaborators are injected so that network and model access can be
    replaced in tests. Without an AI parser, free text is handled by the
    heuristic parser only; without a vision parser or transcriber, image and
    video files cannot be extracted.
    """

    def __init__(
        self,
        *,
        text_parser: TextRecipeParser | None = None,
        ai_parser: AIRecipeParser | None = None,
        jsonld_parser: JSONLDRecipeParser | None = None,
        vision_parser: BaseVisionParser | None = None,
        transcriber: BaseTranscriber | None = None,
        page_fetcher: PageFetcher | None = fetch_page_html,
    ) -> None:
        self.text_parser = text_parser or TextRecipeParser()
        self.ai_parser = ai_parser
        self.jsonld_parser = jsonld_parser or JSONLDRecipeParser()
        self.vision_parser = vision_parser
        self.transcriber = transcriber
        self.page_fetcher = page_fetcher

    @classmethod
    def from_settings(cls, settings: PipelineSettings, **overrides: Any) -> RecipeExtractor:
        """Build an extractor with the Gemini-backed collaborators when an API key is set."""
        collaborators: dict[str, Any] = {}
        if settings.ai_enabled:
            collaborators = {
                "ai_parser": AIRecipeParser(api_key=settings.api_key, model=settings.model),
                "vision_parser": VisionRecipeParser(api_key=settings.api_key,
                                                    model=settings.vision_model),
                "transcriber": GeminiTranscriber(api_key=settings.api_key,
                                                 model=settings.vision_model),
            }
        else:
            _LOGGER.info("No API key configured, AI extraction methods are disabled")
        collaborators.update(overrides)
        return cls(**collaborators)

    def extract(self, source: RecipeSource | dict[str, Any]) -> ExtractionResult:
        """Extract a recipe from a source.

        Args:
            source: A RecipeSource, or a dict matching SOURCE_SCHEMA

        Returns:
            ExtractionResult with the recipe and its provenance

        Raises:
            ExtractionFailed: If no usable input was given, a needed collaborator
                is missing or fails, or nothing recipe-like was extracted
        """
        try:
            source = coerce_source(source)
        except vol.Invalid as e:
            _LOGGER.warning("Invalid recipe source: %s", e)
            raise ExtractionFailed(f"invalid source payload: {e}") from e

        detection = classify_source(source)
        if detection is None:
            raise ExtractionFailed("no url, text, or file supplied")

        trace = _Trace()
        trace.notes = [f"classified as {detection.kind.value} (confidence {detection.confidence:.2f})"]
        if detection.platform:
            trace.notes.append(f"video platform: {detection.platform}")
        _LOGGER.info("Extracting recipe from %s source", detection.kind.value)

        recipe, method = self._dispatch(source, detection, trace)

        if recipe is None or recipe.is_empty():
            _LOGGER.warning("Extraction via %s produced no recipe", method)
            raise ExtractionFailed(f"{method} produced no recipe", detection.kind.value)

        provenance = Provenance(
            source_kind=detection.kind,
            extraction_method=method,
            confidence=recipe.confidence,
            parser_notes=tuple(trace.notes),
        )
        _LOGGER.info("Extracted '%s' via %s (confidence %.2f)",
                     recipe.title, method, recipe.confidence)
        return ExtractionResult(recipe, provenance, trace.source_text)

    def _dispatch(self, source: RecipeSource, detection: Detection,
                  trace: _Trace) -> tuple[Recipe | None, str]:
        url = (source.url or source.text or '').strip()

        if detection.kind == SourceKind.URL:
            return self._extract_page(url, trace)
        if detection.kind == SourceKind.TEXT:
            return self._extract_text(source.text or '', trace)
        if detection.kind == SourceKind.VIDEO:
            # only hosted videos carry a platform
            if detection.platform:
                return self._extract_video_url(url, trace)
            return self._extract_video_file(source.file_ref, trace)
        return self._extract_image(source.file_ref, trace)

    def _extract_text(self, text: str, trace: _Trace) -> tuple[Recipe | None, str]:
        """Free-text path: clean, then AI parser when available, else heuristic parser."""
        cleaned = clean_text(text)
        if cleaned.operations:
            trace.notes.append(f"cleaned text: {', '.join(cleaned.operations)}")
        trace.source_text = cleaned.text
        if not cleaned.text:
            return None, self.text_parser.method

        if self.ai_parser is not None and self.ai_parser.accepts(cleaned.text):
            try:
                recipe = self.ai_parser.parse_recipe(cleaned.text)
            except Exception as e:
                _LOGGER.warning("AI parser failed, falling back to heuristic parser: %s", e)
                trace.notes.append("AI parser failed; used heuristic text parser")
            else:
                if recipe is not None:
                    return recipe, self.ai_parser.method
                trace.notes.append("AI parser returned no recipe; used heuristic text parser")
        elif self.ai_parser is not None:
            trace.notes.append("text too short for AI parser; used heuristic text parser")

        return self.text_parser.parse_recipe(cleaned.text), self.text_parser.method

    def _fetch(self, url: str, kind: SourceKind) -> str:
        if self.page_fetcher is None:
            raise ExtractionFailed("no page fetcher configured", kind.value)
        try:
            return self.page_fetcher(url)
        except Exception as e:
            _LOGGER.error("Page fetch failed for %s: %s", url, e, exc_info=True)
            raise ExtractionFailed(f"page fetch failed: {e}", kind.value) from e

    def _extract_page(self, url: str, trace: _Trace) -> tuple[Recipe | None, str]:
        """Structured-data scrape, falling back to the page's main text."""
        html = self._fetch(url, SourceKind.URL)

        data = find_jsonld_recipe(html)
        if data:
            recipe = self.jsonld_parser.parse_data(data)
            if recipe is not None:
                trace.source_text = clean_text(extract_main_text(html)).text
                return recipe, self.jsonld_parser.method
            trace.notes.append("JSON-LD recipe had no ingredients; parsed page text")
        else:
            trace.notes.append("no JSON-LD recipe found; parsed page text")

        recipe, method = self._extract_text(extract_main_text(html), trace)
        return self._penalize(recipe, CONFIDENCE_PAGE_TEXT_PENALTY), METHOD_PAGE_TEXT_PREFIX + method

    def _extract_video_url(self, url: str, trace: _Trace) -> tuple[Recipe | None, str]:
        """Hosted video: transcript when the transcriber supports URLs, else the post caption."""
        transcript = None
        if self.transcriber is not None:
            try:
                transcript = self.transcriber.transcribe_url(url)
            except Exception as e:
                _LOGGER.error("Transcription failed for %s: %s", url, e, exc_info=True)
                raise ExtractionFailed(f"transcription failed: {e}", SourceKind.VIDEO.value) from e

        if transcript:
            recipe, method = self._extract_text(transcript, trace)
            return self._penalize(recipe, CONFIDENCE_TRANSCRIPT_PENALTY), METHOD_TRANSCRIPT_PREFIX + method

        trace.notes.append("no URL transcript available; used video caption")
        caption = extract_caption_text(self._fetch(url, SourceKind.VIDEO))
        if not caption:
            raise ExtractionFailed("video page has no caption text", SourceKind.VIDEO.value)
        recipe, method = self._extract_text(caption, trace)
        return self._penalize(recipe, CONFIDENCE_TRANSCRIPT_PENALTY), METHOD_CAPTION_PREFIX + method

    def _extract_video_file(self, file_ref: FileRef, trace: _Trace) -> tuple[Recipe | None, str]:
        if self.transcriber is None:
            raise ExtractionFailed("no transcriber configured", SourceKind.VIDEO.value)

        data = _load_bytes(file_ref)
        try:
            transcript = self.transcriber.transcribe(data, guess_mime_type(file_ref))
        except Exception as e:
            _LOGGER.error("Transcription failed for %s: %s", file_ref.display_name, e, exc_info=True)
            raise ExtractionFailed(f"transcription failed: {e}", SourceKind.VIDEO.value) from e

        recipe, method = self._extract_text(transcript or '', trace)
        return self._penalize(recipe, CONFIDENCE_TRANSCRIPT_PENALTY), METHOD_TRANSCRIPT_PREFIX + method

    def _extract_image(self, file_ref: FileRef, trace: _Trace) -> tuple[Recipe | None, str]:
        if self.vision_parser is None:
            raise ExtractionFailed("no vision parser configured", SourceKind.IMAGE.value)

        data = _load_bytes(file_ref)
        try:
            recipe = self.vision_parser.parse_image(data, guess_mime_type(file_ref))
        except Exception as e:
            _LOGGER.error("Vision parsing failed for %s: %s", file_ref.display_name, e, exc_info=True)
            raise ExtractionFailed(f"vision parse failed: {e}", SourceKind.IMAGE.value) from e
        return recipe, self.vision_parser.method

    @staticmethod
    def _penalize(recipe: Recipe | None, factor: float) -> Recipe | None:
        if recipe is None:
            return None
        return recipe.model_copy(update={"confidence": round(recipe.confidence * factor, 3)})


def _load_bytes(file_ref: FileRef) -> bytes:
    """Return the file's bytes, reading a local path or file:// URI if needed."""
    if file_ref.data:
        return file_ref.data

    uri = file_ref.uri or ''
    parsed = urlparse(uri)
    if parsed.scheme in ('', 'file'):
        path = Path(unquote(parsed.path) if parsed.scheme == 'file' else uri)
        try:
            return path.read_bytes()
        except OSError as e:
            _LOGGER.error("Cannot read %s: %s", uri, e)
            raise ExtractionFailed(f"cannot read file: {e}") from e

    raise ExtractionFailed(f"unsupported file location: {uri}")
