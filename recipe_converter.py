#!/usr/bin/env python3
"""
Recipe Converter - Import recipes from URLs, text, photos and videos

Extracts a structured recipe, validates it against its source, suggests
quick fixes and optionally computes nutrition. Prints or saves the result
as JSON.
"""
import argparse
import json
import logging
import mimetypes
import sys
from pathlib import Path

import google.generativeai as genai

from recipe_pipeline.config import load_settings
from recipe_pipeline.const import DATA_ERROR, DATA_RECIPE, DEFAULT_MODEL
from recipe_pipeline.exceptions import ExtractionFailed
from recipe_pipeline.extractors.orchestrator import RecipeExtractor
from recipe_pipeline.models.recipe import Recipe
from recipe_pipeline.models.source import FileRef, RecipeSource
from recipe_pipeline.nutrition.ai_normalizer import GeminiIngredientNormalizer
from recipe_pipeline.nutrition.engine import NutritionCalculator
from recipe_pipeline.services.recipe_service import calculate_recipe_nutrition, import_recipe
from recipe_pipeline.unit_converter import convert_to_metric, format_quantity
from recipe_pipeline.validation.quick_fix import QuickFixGenerator
from recipe_pipeline.validation.validator import RecipeValidator

logger = logging.getLogger(__name__)


def list_models(api_key: str) -> None:
    """Print the Gemini models that support content generation."""
    genai.configure(api_key=api_key)

    print("Available Gemini models:")
    print("-" * 60)
    for model in genai.list_models():
        if 'generateContent' in model.supported_generation_methods:
            print(f"Model: {model.name}")
            print(f"  Display Name: {model.display_name}")
            print(f"  Description: {model.description}")
            print("-" * 60)


def build_source(args: argparse.Namespace) -> RecipeSource:
    """Turn the command line arguments into a recipe source."""
    if args.file:
        path = Path(args.file)
        mime_type = args.mime_type or mimetypes.guess_type(path.name)[0]
        return RecipeSource(file_ref=FileRef(data=path.read_bytes(), mime_type=mime_type, name=path.name))
    if args.text == '-':
        return RecipeSource(text=sys.stdin.read())
    return RecipeSource(url=args.url, text=args.text)


def print_summary(recipe: Recipe, result: dict) -> None:
    """Print a short human-readable summary to stderr."""
    print(f"\nTitle: {recipe.title or '(untitled)'}", file=sys.stderr)
    print(f"Method: {result['extraction_method']}", file=sys.stderr)
    if recipe.servings:
        print(f"Servings: {recipe.servings}", file=sys.stderr)
    print(f"Ingredients ({len(recipe.ingredients)}):", file=sys.stderr)
    for ingredient in recipe.ingredients:
        quantity, unit = convert_to_metric(ingredient.quantity, ingredient.unit)
        amount = ' '.join(part for part in (format_quantity(quantity), unit or '') if part)
        marker = ' (optional)' if ingredient.optional else ''
        line = ' '.join(part for part in (amount, ingredient.name) if part)
        print(f"  - {line}{marker}", file=sys.stderr)
    print(f"Issues: {len(result['issues'])}, quick fixes: {len(result['quick_fixes'])}", file=sys.stderr)


def main():
    """Main entry point for the recipe converter."""
    parser = argparse.ArgumentParser(
        description="Import a recipe into structured JSON with validation and nutrition"
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--url", help="Recipe page or video URL")
    source.add_argument("--text", help="Recipe text ('-' reads standard input)")
    source.add_argument("--file", help="Recipe photo or video file")
    parser.add_argument("--mime-type", help="Mime type of --file (guessed from the extension by default)")
    parser.add_argument("--nutrition", action="store_true", help="Also compute nutrition")
    parser.add_argument("--apply-fixes", action="store_true", help="Apply automatic quick fixes")
    parser.add_argument("--output", type=Path, help="Write the JSON result to this file")
    parser.add_argument(
        "--model",
        help=f"Model to use for text extraction (default: {DEFAULT_MODEL})"
    )
    parser.add_argument("--list-models", action="store_true", help="List available Gemini models and exit")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    settings = load_settings(model=args.model)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.list_models:
        if not settings.ai_enabled:
            logger.error("API key not provided. Set RECIPE_PIPELINE_API_KEY or LANGEXTRACT_API_KEY")
            sys.exit(1)
        list_models(settings.api_key)
        sys.exit(0)

    if not (args.url or args.text or args.file):
        parser.error("one of --url, --text or --file is required")

    extractor = RecipeExtractor.from_settings(settings)
    try:
        result = import_recipe(
            build_source(args),
            extractor=extractor,
            validator=RecipeValidator(settings.validation),
            fix_generator=QuickFixGenerator(settings.quick_fix),
            apply_fixes=args.apply_fixes,
        )
    except ExtractionFailed as e:
        logger.error("Extraction failed: %s", e.reason)
        print(json.dumps({DATA_ERROR: str(e)}, indent=2, ensure_ascii=False))
        sys.exit(1)
    except OSError as e:
        logger.error("Cannot read input: %s", e)
        sys.exit(1)

    recipe = Recipe.model_validate(result[DATA_RECIPE])
    if args.nutrition:
        normalizer = GeminiIngredientNormalizer(settings.api_key, settings.model) if settings.ai_enabled else None
        result.update(calculate_recipe_nutrition(recipe, calculator=NutritionCalculator(normalizer=normalizer)))

    output = json.dumps(result, indent=2, ensure_ascii=False)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output, encoding='utf-8')
        logger.info("Saved result to %s", args.output)
    else:
        print(output)

    print_summary(recipe, result)


if __name__ == "__main__":
    main()
