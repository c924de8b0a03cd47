"""Constants for the Recipe Pipeline."""

# Environment variable names
ENV_API_KEY = "RECIPE_PIPELINE_API_KEY"
ENV_LEGACY_API_KEY = "LANGEXTRACT_API_KEY"
ENV_MODEL = "RECIPE_PIPELINE_MODEL"
ENV_VISION_MODEL = "RECIPE_PIPELINE_VISION_MODEL"
ENV_LOG_LEVEL = "RECIPE_PIPELINE_LOG_LEVEL"

# Default values
DEFAULT_MODEL = "gemini-2.5-flash-lite"
DEFAULT_VISION_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT = 30
DEFAULT_MAX_TEXT_LENGTH = 8000
DEFAULT_MAX_RESPONSE_SIZE = 5 * 1024 * 1024
DEFAULT_MAX_REDIRECTS = 5
DEFAULT_LOG_LEVEL = "INFO"

# Minimum text length before the AI parser is worth calling
MIN_AI_TEXT_LENGTH = 100

# Per-method confidence estimates
CONFIDENCE_JSONLD = 0.9
CONFIDENCE_AI_TEXT = 0.8
CONFIDENCE_VISION = 0.7
CONFIDENCE_TRANSCRIPT_PENALTY = 0.85
CONFIDENCE_PAGE_TEXT_PENALTY = 0.9

# Extraction method labels (human readable, reported in provenance)
METHOD_JSONLD = "json-ld structured data"
METHOD_AI_TEXT = "ai text parse (langextract)"
METHOD_HEURISTIC_TEXT = "heuristic text parse"
METHOD_VISION = "ai vision parse"
METHOD_TRANSCRIPT_PREFIX = "transcript + "
METHOD_PAGE_TEXT_PREFIX = "page text + "
METHOD_CAPTION_PREFIX = "video caption + "

# Source payload keys
DATA_URL = "url"
DATA_TEXT = "text"
DATA_FILE = "file_ref"

# Result keys returned by the service layer
DATA_RECIPE = "recipe"
DATA_PROVENANCE = "provenance"
DATA_ISSUES = "issues"
DATA_MISSING = "missing_ingredients"
DATA_INFERRED = "inferred_quantities"
DATA_QUICK_FIXES = "quick_fixes"
DATA_EXTRACTION_METHOD = "extraction_method"
DATA_USED_AI = "used_ai"
DATA_NUTRITION = "nutrition"
DATA_ERROR = "error"

# User-facing failure text
MESSAGE_EXTRACTION_FAILED = "Could not extract a recipe from this source."
MESSAGE_EXTRACTION_HINT = (
    "Try the transcription option or attach a different source "
    "(a recipe URL, pasted text, or a clear photo of the recipe)."
)
