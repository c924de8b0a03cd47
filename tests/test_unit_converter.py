"""
Unit tests for unit conversion
"""
import pytest

from recipe_pipeline.unit_converter import (
    convert_to_metric,
    format_quantity,
    normalize_unit,
    per_item_weight,
    to_grams,
)


class TestToGrams:
    """Test cases for to_grams"""

    def test_volume_units(self):
        """Test cups, spoons and litres use the water-like volume table"""
        assert to_grams(2, "cups", "flour") == 480
        assert to_grams(1, "tbsp", "butter") == 15
        assert to_grams(2, "tsp", "salt") == 10
        assert to_grams(0.5, "l", "milk") == 500

    def test_weight_units(self):
        """Test metric and imperial weights"""
        assert to_grams(3, "g", "salt") == 3
        assert to_grams(1, "kg", "potatoes") == 1000
        assert to_grams(1, "oz", "cheese") == pytest.approx(28.35)

    def test_localised_spoon_units(self):
        """Test German and Danish spoon abbreviations"""
        assert to_grams(1, "EL", "Butter") == 15
        assert to_grams(2, "TL", "Salz") == 10
        assert to_grams(1, "spsk", "olie") == 15

    def test_count_units_use_per_item_weight(self):
        """Test eggs and bananas without a unit"""
        assert to_grams(3, None, "eggs") == 150
        assert to_grams(1, "", "banana") == 120
        assert to_grams(1, "large", "banana") == 120
        assert to_grams(2, "pieces", "chicken breast") == 348

    def test_count_unit_without_known_item(self):
        """Test unknown items fall back to the default item weight"""
        assert to_grams(2, None, "dragon fruit") == 200

    def test_unit_weights(self):
        """Test units that carry their own weight"""
        assert to_grams(3, "cloves", "garlic") == 9
        assert to_grams(2, "pinch", "salt") == 1

    def test_containers(self):
        """Test can, jar and packet weights"""
        assert to_grams(1, "can", "black beans") == 240
        assert to_grams(1, "can", "chopped tomatoes") == 400
        assert to_grams(1, "can", "coconut milk") == 300
        assert to_grams(1, "jar", "pesto") == 350
        assert to_grams(1, "packet", "rice") == 250
        assert to_grams(1, "packet", "frozen peas") == 300
        assert to_grams(1, "packet", "crisps") == 200

    def test_unknown_unit_with_known_item(self):
        """Test an unknown unit on a countable ingredient uses the item weight"""
        assert to_grams(2, "handful", "egg") == 100

    def test_unknown_unit_treated_as_grams(self):
        """Test an unknown unit on an unknown ingredient passes the quantity through"""
        assert to_grams(5, "handful", "basil") == 5

    def test_never_raises(self):
        """Test odd input degrades instead of failing"""
        assert to_grams(0, None, None) == 0
        assert to_grams(-1, "g", "flour") == -1


class TestUnitHelpers:
    """Test cases for unit helpers"""

    def test_normalize_unit(self):
        """Test unit normalization"""
        assert normalize_unit(" Tbsp. ") == "tbsp"
        assert normalize_unit("EL") == "tbsp"
        assert normalize_unit("TL") == "tsp"
        assert normalize_unit(None) == ""

    def test_per_item_weight(self):
        """Test per-item weights prefer the longer key"""
        assert per_item_weight("Chicken Breast fillets") == 174
        assert per_item_weight("red onion") == 110
        assert per_item_weight("water") is None

    def test_convert_to_metric(self):
        """Test display conversion to metric units"""
        assert convert_to_metric(1, "cup") == (240, "ml")
        assert convert_to_metric(5, "cups") == (1.2, "l")
        assert convert_to_metric(2, "lb") == (907, "g")
        assert convert_to_metric(350, "f") == (177, "°C")
        assert convert_to_metric(2, "pinch") == (2, "pinch")
        assert convert_to_metric(None, "cup") == (None, "cup")

    def test_format_quantity(self):
        """Test quantity formatting"""
        assert format_quantity(2.0) == "2"
        assert format_quantity(2.5) == "2.5"
        assert format_quantity(0.333) == "0.33"
        assert format_quantity(None) == ""
