"""
Bundled reference tables.

The default nutrient and synonym tables ship as JSON package data. Callers
with their own food database can build a ReferenceTables directly.
"""
from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path

from ..models.nutrition import NutrientRecord, ReferenceTables

_LOGGER = logging.getLogger(__name__)

NUTRIENTS_FILE = "nutrients.json"
SYNONYMS_FILE = "synonyms.json"


def _read_json(directory: Path | None, filename: str) -> dict:
    if directory is None:
        text = resources.files(__package__).joinpath("data", filename).read_text(encoding="utf-8")
    else:
        text = (directory / filename).read_text(encoding="utf-8")
    return json.loads(text)


def load_reference_tables(path: str | Path | None = None) -> ReferenceTables:
    """Load nutrient and synonym tables.

    Args:
        path: Directory containing nutrients.json and synonyms.json. Defaults
            to the tables bundled with the package.

    Returns:
        Read-only ReferenceTables

    Raises:
        OSError: If a table file cannot be read
        ValueError: If a table is not valid JSON or a record is invalid
    """
    directory = Path(path) if path is not None else None

    nutrients = {
        key: NutrientRecord(**values)
        for key, values in _read_json(directory, NUTRIENTS_FILE).items()
    }
    synonyms = {
        alias: str(canonical)
        for alias, canonical in _read_json(directory, SYNONYMS_FILE).items()
    }

    _LOGGER.debug("Loaded %d nutrient records and %d synonyms",
                  len(nutrients), len(synonyms))
    return ReferenceTables(nutrients=nutrients, synonyms=synonyms)
