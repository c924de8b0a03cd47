"""
Exceptions raised by the Recipe Pipeline.

Only ExtractionFailed reaches callers. Lookup misses, unavailable AI
normalization and missing source text are degraded outcomes that are encoded
in the returned data instead of being raised.
"""
from __future__ import annotations

from .const import MESSAGE_EXTRACTION_FAILED, MESSAGE_EXTRACTION_HINT


class RecipePipelineError(Exception):
    """Base class for all pipeline errors."""


class ExtractionFailed(RecipePipelineError):
    """No recipe could be extracted from the supplied source.

    The string form is safe to show to a user. The internal reason is kept on
    ``reason`` for logging and the original exception is chained as
    ``__cause__`` by the raiser.
    """

    def __init__(
        self,
        reason: str,
        source_kind: str | None = None,
        hint: str = MESSAGE_EXTRACTION_HINT,
    ) -> None:
        super().__init__(f"{MESSAGE_EXTRACTION_FAILED} {hint}")
        self.reason = reason
        self.source_kind = source_kind
        self.hint = hint


class NormalizationUnavailable(RecipePipelineError):
    """The AI ingredient normalization call failed or is not configured."""
