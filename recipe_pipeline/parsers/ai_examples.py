"""
Few-shot examples for recipe extraction with LangExtract.
"""
from langextract.data import ExampleData, Extraction


RECIPE_EXAMPLES = [
    ExampleData(
        text="""
Chocolate Chip Cookies
Makes 24 cookies. Prep time: 15 minutes. Cook time: 12 minutes.

Ingredients:
- 2 1/4 cups all-purpose flour
- 1 tsp baking soda
- 1 cup butter, softened
- 3/4 cup granulated sugar
- 2 large eggs
- 2 cups chocolate chips
- Flaky sea salt (optional)

Instructions:
1. Preheat the oven to 375°F.
2. Cream the butter and sugar, then beat in the eggs.
3. Stir in the flour and baking soda, fold in the chocolate chips.
4. Bake for 10-12 minutes until golden.
""",
        extractions=[
            Extraction(
                extraction_class="title",
                extraction_text="Chocolate Chip Cookies"
            ),
            Extraction(
                extraction_class="servings",
                extraction_text="24"
            ),
            Extraction(
                extraction_class="prep_time",
                extraction_text="15 minutes",
                attributes={"minutes": "15"}
            ),
            Extraction(
                extraction_class="cook_time",
                extraction_text="12 minutes",
                attributes={"minutes": "12"}
            ),
            Extraction(
                extraction_class="ingredient",
                extraction_text="2 1/4 cups all-purpose flour",
                attributes={"name": "all-purpose flour", "quantity": "2.25", "unit": "cups",
                            "group": None, "optional": "false"}
            ),
            Extraction(
                extraction_class="ingredient",
                extraction_text="1 tsp baking soda",
                attributes={"name": "baking soda", "quantity": "1.0", "unit": "tsp",
                            "group": None, "optional": "false"}
            ),
            Extraction(
                extraction_class="ingredient",
                extraction_text="1 cup butter, softened",
                attributes={"name": "butter, softened", "quantity": "1.0", "unit": "cup",
                            "group": None, "optional": "false"}
            ),
            Extraction(
                extraction_class="ingredient",
                extraction_text="3/4 cup granulated sugar",
                attributes={"name": "granulated sugar", "quantity": "0.75", "unit": "cup",
                            "group": None, "optional": "false"}
            ),
            Extraction(
                extraction_class="ingredient",
                extraction_text="2 large eggs",
                attributes={"name": "eggs", "quantity": "2.0", "unit": "large",
                            "group": None, "optional": "false"}
            ),
            Extraction(
                extraction_class="ingredient",
                extraction_text="2 cups chocolate chips",
                attributes={"name": "chocolate chips", "quantity": "2.0", "unit": "cups",
                            "group": None, "optional": "false"}
            ),
            Extraction(
                extraction_class="ingredient",
                extraction_text="Flaky sea salt (optional)",
                attributes={"name": "Flaky sea salt", "quantity": None, "unit": None,
                            "group": None, "optional": "true"}
            ),
            Extraction(
                extraction_class="instruction",
                extraction_text="Preheat the oven to 375°F.",
                attributes={"step": "1"}
            ),
            Extraction(
                extraction_class="instruction",
                extraction_text="Cream the butter and sugar, then beat in the eggs.",
                attributes={"step": "2"}
            ),
            Extraction(
                extraction_class="instruction",
                extraction_text="Stir in the flour and baking soda, fold in the chocolate chips.",
                attributes={"step": "3"}
            ),
            Extraction(
                extraction_class="instruction",
                extraction_text="Bake for 10-12 minutes until golden.",
                attributes={"step": "4"}
            )
        ]
    ),

    ExampleData(
        text="""
Gewürzkuchen
Für 12 Stücke

Für den Teig:
- 4 Ei(er)
- 300 g Zucker
- 350 g Mehl
- 1 Pck. Backpulver
- 1 TL, gehäuft Zimt

Für die Glasur:
- 100 g Puderzucker
- Zitronensaft

Zubereitung:
Eier und Zucker schaumig schlagen. Mehl, Backpulver und Zimt unterheben.
Bei 180 Grad 40 Minuten backen.
""",
        extractions=[
            Extraction(
                extraction_class="title",
                extraction_text="Gewürzkuchen"
            ),
            Extraction(
                extraction_class="servings",
                extraction_text="12"
            ),
            Extraction(
                extraction_class="ingredient",
                extraction_text="4 Ei(er)",
                attributes={"name": "Ei(er)", "quantity": "4.0", "unit": None,
                            "group": "Für den Teig", "optional": "false"}
            ),
            Extraction(
                extraction_class="ingredient",
                extraction_text="300 g Zucker",
                attributes={"name": "Zucker", "quantity": "300.0", "unit": "g",
                            "group": "Für den Teig", "optional": "false"}
            ),
            Extraction(
                extraction_class="ingredient",
                extraction_text="350 g Mehl",
                attributes={"name": "Mehl", "quantity": "350.0", "unit": "g",
                            "group": "Für den Teig", "optional": "false"}
            ),
            Extraction(
                extraction_class="ingredient",
                extraction_text="1 Pck. Backpulver",
                attributes={"name": "Backpulver", "quantity": "1.0", "unit": "Pck.",
                            "group": "Für den Teig", "optional": "false"}
            ),
            Extraction(
                extraction_class="ingredient",
                extraction_text="1 TL, gehäuft Zimt",
                attributes={"name": "Zimt, gehäuft", "quantity": "1.0", "unit": "TL",
                            "group": "Für den Teig", "optional": "false"}
            ),
            Extraction(
                extraction_class="ingredient",
                extraction_text="100 g Puderzucker",
                attributes={"name": "Puderzucker", "quantity": "100.0", "unit": "g",
                            "group": "Für die Glasur", "optional": "false"}
            ),
            Extraction(
                extraction_class="ingredient",
                extraction_text="Zitronensaft",
                attributes={"name": "Zitronensaft", "quantity": None, "unit": None,
                            "group": "Für die Glasur", "optional": "false"}
            ),
            Extraction(
                extraction_class="instruction",
                extraction_text="Eier und Zucker schaumig schlagen.",
                attributes={"step": "1"}
            ),
            Extraction(
                extraction_class="instruction",
                extraction_text="Mehl, Backpulver und Zimt unterheben.",
                attributes={"step": "2"}
            ),
            Extraction(
                extraction_class="instruction",
                extraction_text="Bei 180 Grad 40 Minuten backen.",
                attributes={"step": "3"}
            )
        ]
    ),

    ExampleData(
        text="""
so tonight we're making my 10 minute garlic noodles for 2
you need 200g spaghetti, 4 cloves of garlic, 3 tbsp butter
and a splash of soy sauce. boil the noodles, fry the garlic in the butter
then toss everything together. top with green onions if you like
""",
        extractions=[
            Extraction(
                extraction_class="title",
                extraction_text="garlic noodles"
            ),
            Extraction(
                extraction_class="servings",
                extraction_text="2"
            ),
            Extraction(
                extraction_class="cook_time",
                extraction_text="10 minute",
                attributes={"minutes": "10"}
            ),
            Extraction(
                extraction_class="ingredient",
                extraction_text="200g spaghetti",
                attributes={"name": "spaghetti", "quantity": "200.0", "unit": "g",
                            "group": None, "optional": "false"}
            ),
            Extraction(
                extraction_class="ingredient",
                extraction_text="4 cloves of garlic",
                attributes={"name": "garlic", "quantity": "4.0", "unit": "cloves",
                            "group": None, "optional": "false"}
            ),
            Extraction(
                extraction_class="ingredient",
                extraction_text="3 tbsp butter",
                attributes={"name": "butter", "quantity": "3.0", "unit": "tbsp",
                            "group": None, "optional": "false"}
            ),
            Extraction(
                extraction_class="ingredient",
                extraction_text="a splash of soy sauce",
                attributes={"name": "soy sauce", "quantity": None, "unit": "splash",
                            "group": None, "optional": "false"}
            ),
            Extraction(
                extraction_class="ingredient",
                extraction_text="green onions",
                attributes={"name": "green onions", "quantity": None, "unit": None,
                            "group": None, "optional": "true"}
            ),
            Extraction(
                extraction_class="instruction",
                extraction_text="boil the noodles",
                attributes={"step": "1"}
            ),
            Extraction(
                extraction_class="instruction",
                extraction_text="fry the garlic in the butter",
                attributes={"step": "2"}
            ),
            Extraction(
                extraction_class="instruction",
                extraction_text="toss everything together",
                attributes={"step": "3"}
            )
        ]
    )
]
