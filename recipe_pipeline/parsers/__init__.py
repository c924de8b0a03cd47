"""Parsers package."""
from .base_parser import BaseRecipeParser
from .ingredient_line import parse_ingredient_line, parse_quantity_string
from .jsonld_parser import JSONLDRecipeParser, parse_iso8601_duration
from .text_parser import TextRecipeParser

__all__ = [
    "BaseRecipeParser",
    "JSONLDRecipeParser",
    "TextRecipeParser",
    "parse_ingredient_line",
    "parse_iso8601_duration",
    "parse_quantity_string",
]
