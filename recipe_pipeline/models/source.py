"""
Source models for the Recipe Pipeline.

A RecipeSource bundles whatever the user supplied (a URL, typed text, or an
uploaded file). ExtractionResult pairs the extracted Recipe with its
Provenance.
"""
from __future__ import annotations

from typing import NamedTuple

from pydantic import BaseModel, Field

from .recipe import Provenance, Recipe


class FileRef(BaseModel):
    """Reference to an uploaded image or video file.

    Attributes:
        data: Raw file bytes, if already loaded
        uri: Location of the file (path or remote URI)
        mime_type: Declared mime type (e.g., 'image/jpeg', 'video/mp4')
        name: Original filename, used for extension-based detection
    """

    data: bytes | None = None
    uri: str | None = None
    mime_type: str | None = None
    name: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.uri or "<upload>"


class RecipeSource(BaseModel):
    """User-supplied input for one extraction."""

    url: str | None = Field(default=None, description="Recipe page or video URL")
    text: str | None = Field(default=None, description="Pasted or typed recipe text")
    file_ref: FileRef | None = Field(default=None, description="Uploaded image or video")


class ExtractionResult(NamedTuple):
    """Result of RecipeExtractor.extract().

    Attributes:
        recipe: The extracted recipe
        provenance: How it was extracted
        source_text: The cleaned text the recipe was read from (page text,
            transcript or typed text), empty for images
    """

    recipe: Recipe
    provenance: Provenance
    source_text: str = ""
