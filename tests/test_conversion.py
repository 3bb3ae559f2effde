"""Unit tests for the ingredient unit policy and quantity conversion."""

import pytest

from nextmeal.errors import InvalidQuantity, UnitNotAllowed
from nextmeal.normalize.ingredients import Ingredient, IngredientUnitPolicy, QuantityConverter


class TestIngredient:
    """Tests for Ingredient construction."""

    def test_units_are_normalized(self):
        ingredient = Ingredient(
            id="i1", name="sugar", base_unit="Grams", allowed_units=frozenset({"Kilograms", "cups"})
        )
        assert ingredient.base_unit == "g"
        assert ingredient.allowed_units == frozenset({"kg", "cup"})

    def test_missing_base_unit_defaults_to_pieces(self):
        assert Ingredient(id="i1", name="lemon", base_unit="").base_unit == "pcs"

    def test_conversions_are_normalized(self):
        ingredient = Ingredient(
            id="i1",
            name="egg",
            conversions={"Grams": 0.02, "bad": 0, "cup": float("nan"), "tbsp": None},
        )
        assert ingredient.conversions == {"g": 0.02}


class TestIngredientUnitPolicy:
    """Tests for allowed unit resolution."""

    def test_base_unit_always_allowed(self, flour):
        policy = IngredientUnitPolicy()
        assert policy.allowed_units_for(flour) == frozenset({"g", "kg"})

    def test_base_unit_unioned_when_absent(self, egg):
        policy = IngredientUnitPolicy()
        assert egg.allowed_units == frozenset()
        assert policy.allowed_units_for(egg) == frozenset({"pcs"})

    def test_is_allowed_normalizes(self, flour):
        policy = IngredientUnitPolicy()
        assert policy.is_allowed(flour, "Kilograms")
        assert policy.is_allowed(flour, "grams")
        assert not policy.is_allowed(flour, "cup")


class TestQuantityConverter:
    """Tests for QuantityConverter.to_base_quantity."""

    @pytest.mark.parametrize(
        "unit,factor",
        [("kg", 1000.0), ("mg", 0.001), ("lb", 453.592), ("g", 1.0)],
    )
    def test_quantity_times_factor(self, converter, flour, unit, factor):
        """Test converting multiplies by the unit's factor into the base unit."""
        result = converter.to_base_quantity(flour, 2.5, unit)
        assert result.quantity == pytest.approx(2.5 * factor)
        assert result.unit == "g"

    def test_base_unit_is_identity(self, converter, milk):
        """Test converting a base-unit quantity returns it unchanged."""
        assert converter.to_base_quantity(milk, 330.0, "ml").quantity == 330.0

    def test_synonym_units(self, converter, milk):
        assert converter.to_base_quantity(milk, 1, "Litres").quantity == 1000.0

    def test_zero_quantity(self, converter, flour):
        assert converter.to_base_quantity(flour, 0, "kg").quantity == 0.0

    def test_negative_quantity_clamped(self, converter, flour):
        """Test stored negative quantities are treated as zero."""
        assert converter.to_base_quantity(flour, -3, "kg").quantity == 0.0

    @pytest.mark.parametrize("quantity", [None, float("nan"), float("inf"), "a handful"])
    def test_unusable_quantity_read_as_zero(self, converter, flour, quantity):
        """Test quantities that are not finite numbers convert to 0 and are flagged."""
        converted = converter.to_base_quantity(flour, quantity, "kg")

        assert converted.quantity == 0.0
        assert converted.unit == "g"
        assert not converted.valid

    def test_numeric_strings_accepted(self, converter, flour):
        converted = converter.to_base_quantity(flour, "1.5", "kg")
        assert converted == (1500.0, "g", True)

    def test_unknown_unit_uses_factor_one(self, converter, flour):
        """Test legacy rows with unknown units still convert."""
        assert converter.to_base_quantity(flour, 3, "handful").quantity == 3.0

    def test_missing_unit_means_base_unit(self, converter, flour):
        assert converter.to_base_quantity(flour, 120, None).quantity == 120.0
        assert converter.to_base_quantity(flour, 120, "").quantity == 120.0

    def test_mismatched_kind_uses_factor_as_given(self, converter, flour):
        """Test a unit of another kind still applies its declared factor."""
        result = converter.to_base_quantity(flour, 2, "l")
        assert result.quantity == 2000.0
        assert result.unit == "g"

    def test_ingredient_conversion_takes_precedence(self, converter, butter):
        """Test ingredient-specific factors override the catalog."""
        assert converter.to_base_quantity(butter, 2, "tbsp").quantity == pytest.approx(28.4)

    def test_default_unit_lookup(self, flour):
        """Test the converter works with the default catalog."""
        assert QuantityConverter().to_base_quantity(flour, 1, "kg").quantity == 1000.0


class TestConvertForEntry:
    """Tests for write-path validation."""

    def test_allowed_unit(self, converter, flour):
        assert converter.convert_for_entry(flour, 1.5, "kg").quantity == 1500.0

    def test_unit_not_allowed(self, converter, flour):
        with pytest.raises(UnitNotAllowed) as exc_info:
            converter.convert_for_entry(flour, 1, "cup")

        assert exc_info.value.ingredient_id == "ing-flour"
        assert exc_info.value.unit == "cup"
        assert exc_info.value.allowed_units == ["g", "kg"]

    def test_negative_quantity(self, converter, flour):
        with pytest.raises(InvalidQuantity):
            converter.convert_for_entry(flour, -1, "g")

    def test_invalid_quantity_is_value_error(self, converter, flour):
        with pytest.raises(ValueError):
            converter.convert_for_entry(flour, -0.5, "g")

    def test_zero_quantity_allowed(self, converter, flour):
        assert converter.convert_for_entry(flour, 0, "g").quantity == 0.0

    @pytest.mark.parametrize("quantity", [None, float("nan"), float("-inf"), "lots"])
    def test_non_numeric_quantity_rejected(self, converter, flour, quantity):
        with pytest.raises(InvalidQuantity):
            converter.convert_for_entry(flour, quantity, "g")
