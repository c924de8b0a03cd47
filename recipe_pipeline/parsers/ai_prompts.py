"""
Prompts for AI recipe extraction (LangExtract text parsing and Gemini vision).
"""

EXTRACTION_PROMPT = """
Extract recipe information from the provided text in any language (English, German, Danish, etc.).
The text may be a recipe page, typed notes, or a spoken video transcript.

Identify and extract, in order of appearance:
1. The recipe title (extraction_class "title")
2. The number of servings/portions if specified (extraction_class "servings") - look for patterns like:
   - "Servings: 4", "Serves: 4", "Yield: 4", "Makes 12 cookies"
   - "Portionen: 4", "Für 4 Portionen", "4 personer"
   - Extract ONLY the number (e.g., extract "4" from "Für 4 Portionen")
3. Preparation and cooking time if stated (extraction_class "prep_time" / "cook_time"),
   with attribute "minutes" holding the total number of minutes
4. ALL ingredients with their quantities and units (extraction_class "ingredient")
5. Each preparation step (extraction_class "instruction"), with attribute "step" holding its number

For each ingredient, break it down into:
- name: the ingredient name INCLUDING any preparation notes (e.g., "butter, softened", "Salz, gehäuft")
- quantity: the numeric amount (e.g., 2.5, 250, 0.5), or null if not specified
- unit: ONLY the base measurement unit WITHOUT annotations (e.g., "g", "ml", "TL", "EL", "cups"), or null
- group: the ingredient section name if ingredients are organized into subsections
  (e.g., "For the dough", "Für den Boden"), otherwise null
- optional: "true" if the recipe marks the ingredient as optional, for garnish, or "if desired", otherwise "false"

CRITICAL RULES:
- DO NOT TRANSLATE - keep ingredient names and steps in their ORIGINAL LANGUAGE
- Only extract ingredients that are actually mentioned in the text; never add ingredients that are not there
- Extract every ingredient ONLY ONCE, even if it is mentioned again in the steps
- Extract ingredients even when they have no quantity or unit (set both to null)
- If a line contains both metric and imperial measurements (e.g., "1.75kg/ 3.5lb"), extract ONLY the FIRST one
- Use the exact step text from the source; do not merge or summarize steps
"""

VISION_PROMPT = """
You are reading a photo of a recipe (a cookbook page, a handwritten card, or a screenshot).
Transcribe the recipe into JSON with exactly this structure and nothing else:

{
  "title": "Recipe title",
  "description": null,
  "servings": 4,
  "prep_time_minutes": null,
  "cook_time_minutes": null,
  "ingredients": [
    {"name": "flour", "quantity": 2.0, "unit": "cups", "optional": false, "group": null}
  ],
  "instructions": ["First step.", "Second step."]
}

Rules:
- Only include text that is visible in the image; use null for anything that is not shown
- Keep ingredient names in the original language
- quantity is a number (convert fractions like 1/2 to 0.5), unit is the bare unit or null
"""

TRANSCRIPTION_PROMPT = """
Transcribe everything said in this cooking video, including ingredient amounts and steps.
Also include any recipe text shown on screen (captions, overlays). Return plain text only.
"""
