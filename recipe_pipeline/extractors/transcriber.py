"""
Media transcription collaborators.

The orchestrator only needs text out of a video. BaseTranscriber is the seam;
GeminiTranscriber is the default implementation using a multimodal model.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import google.generativeai as genai

from ..const import DEFAULT_VISION_MODEL
from ..parsers.ai_prompts import TRANSCRIPTION_PROMPT

_LOGGER = logging.getLogger(__name__)


class BaseTranscriber(ABC):
    """Turns video or audio into plain text."""

    @abstractmethod
    def transcribe(self, data: bytes, mime_type: str) -> str:
        """Transcribe media bytes.

        Args:
            data: Raw media bytes
            mime_type: Media mime type, e.g. 'video/mp4'

        Returns:
            The transcript (may be empty)
        """

    def transcribe_url(self, url: str) -> str | None:
        """Transcribe a hosted video. Returns None when URLs are not supported."""
        return None


class GeminiTranscriber(BaseTranscriber):
    """Transcribes uploaded videos with a Gemini multimodal model."""

    def __init__(self, api_key: str, model: str = DEFAULT_VISION_MODEL) -> None:
        """Initialize the transcriber.

        Args:
            api_key: Gemini API key
            model: Multimodal model name

        Raises:
            ValueError: If API key is empty
        """
        if not api_key or not api_key.strip():
            raise ValueError("API key cannot be empty")

        genai.configure(api_key=api_key)
        self.model = model
        _LOGGER.debug("Initialized GeminiTranscriber with model %s", model)

    def transcribe(self, data: bytes, mime_type: str) -> str:
        _LOGGER.info("Transcribing %d bytes of %s using %s", len(data), mime_type, self.model)
        try:
            response = genai.GenerativeModel(self.model).generate_content(
                [TRANSCRIPTION_PROMPT, {"mime_type": mime_type, "data": data}]
            )
        except Exception as e:
            _LOGGER.error("Error during transcription: %s", str(e), exc_info=True)
            raise

        transcript = (getattr(response, 'text', None) or '').strip()
        _LOGGER.info("Transcript has %d characters", len(transcript))
        return transcript
