"""Nutrient table lookup."""
from __future__ import annotations

import logging
from typing import Mapping

from ..models.nutrition import NutrientRecord

_LOGGER = logging.getLogger(__name__)


def lookup(canonical_key: str, nutrients: Mapping[str, NutrientRecord]) -> NutrientRecord | None:
    """Return the per-100g record for a canonical key, or None on a miss."""
    record = nutrients.get(canonical_key)
    if record is None:
        _LOGGER.debug("No nutrient data for '%s'", canonical_key)
    return record
