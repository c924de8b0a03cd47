"""
Pipeline configuration.

Settings are plain pydantic models so thresholds can be overridden per call.
load_settings() reads the API key and model names from the environment
(optionally via a .env file).
"""
from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .const import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_MODEL,
    DEFAULT_VISION_MODEL,
    ENV_API_KEY,
    ENV_LEGACY_API_KEY,
    ENV_LOG_LEVEL,
    ENV_MODEL,
    ENV_VISION_MODEL,
)

_LOGGER = logging.getLogger(__name__)


class ValidationSettings(BaseModel):
    """Thresholds used by the recipe consistency validator.

    None of these values were tuned against a recipe corpus; they are
    starting points meant to be overridden.
    """

    low_confidence_threshold: float = Field(
        default=0.6, ge=0, le=1,
        description="Confidence below which a low_confidence issue is raised"
    )
    quantity_tolerance: float = Field(
        default=0.25, ge=0,
        description="Allowed relative difference between extracted and source quantity"
    )
    mention_window: int = Field(
        default=24, ge=1,
        description="Characters before an ingredient mention searched for a quantity"
    )
    missing_min_confidence: float = Field(
        default=0.5, ge=0, le=1,
        description="Minimum score for a missing-ingredient candidate to be reported"
    )
    max_missing_candidates: int = Field(
        default=5, ge=0,
        description="Maximum number of missing-ingredient candidates reported"
    )
    invented_confidence_penalty: float = Field(
        default=0.5, ge=0, le=1,
        description="Multiplier applied to an ingredient not found in the source"
    )
    mismatch_confidence_penalty: float = Field(
        default=0.75, ge=0, le=1,
        description="Multiplier applied to an ingredient with a quantity mismatch"
    )


class QuickFixSettings(BaseModel):
    """Thresholds used by the quick-fix generator."""

    auto_add_confidence: float = Field(
        default=0.85, ge=0, le=1,
        description="Missing-ingredient confidence at which adding it is auto-applied"
    )
    inferred_review_confidence: float = Field(
        default=0.7, ge=0, le=1,
        description="Inferred quantities below this confidence get a review action"
    )
    min_instruction_length: int = Field(
        default=10, ge=0,
        description="Steps shorter than this get an expand-step action"
    )


class PipelineSettings(BaseModel):
    """Top-level settings for the pipeline and its AI collaborators."""

    api_key: str | None = Field(
        default=None, description="Gemini API key; AI paths are skipped without it"
    )
    model: str = Field(default=DEFAULT_MODEL, description="Text extraction model")
    vision_model: str = Field(
        default=DEFAULT_VISION_MODEL, description="Image/audio model"
    )
    log_level: str = Field(default=DEFAULT_LOG_LEVEL)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)
    quick_fix: QuickFixSettings = Field(default_factory=QuickFixSettings)

    @property
    def ai_enabled(self) -> bool:
        return bool(self.api_key and self.api_key.strip())


def load_settings(dotenv_path: str | None = None, **overrides) -> PipelineSettings:
    """Build settings from the environment.

    Args:
        dotenv_path: Optional path to a .env file (defaults to searching upwards)
        **overrides: Explicit values that win over the environment

    Returns:
        Validated PipelineSettings
    """
    load_dotenv(dotenv_path)

    values = {
        "api_key": os.getenv(ENV_API_KEY) or os.getenv(ENV_LEGACY_API_KEY),
        "model": os.getenv(ENV_MODEL, DEFAULT_MODEL),
        "vision_model": os.getenv(ENV_VISION_MODEL, DEFAULT_VISION_MODEL),
        "log_level": os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})

    settings = PipelineSettings(**values)
    _LOGGER.debug("Loaded settings (model=%s, ai_enabled=%s)",
                  settings.model, settings.ai_enabled)
    return settings
