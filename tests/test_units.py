"""Unit tests for unit normalization and the unit catalog."""

import pytest

from nextmeal.normalize.units import (
    DEFAULT_UNIT_CODE,
    Unit,
    UnitCatalog,
    UnitKind,
    normalize_unit_code,
)


class TestNormalizeUnitCode:
    """Tests for normalize_unit_code function."""

    def test_codes_pass_through(self):
        """Test canonical codes are unchanged."""
        assert normalize_unit_code("g") == "g"
        assert normalize_unit_code("tbsp") == "tbsp"
        assert normalize_unit_code("pcs") == "pcs"

    def test_case_and_whitespace(self):
        """Test normalization is case-insensitive and trims whitespace."""
        assert normalize_unit_code("  KG ") == "kg"
        assert normalize_unit_code("Ml") == "ml"

    def test_synonyms(self):
        """Test full words map to canonical codes."""
        assert normalize_unit_code("grams") == "g"
        assert normalize_unit_code("Tablespoons") == "tbsp"
        assert normalize_unit_code("teaspoon") == "tsp"
        assert normalize_unit_code("pieces") == "pcs"
        assert normalize_unit_code("pc") == "pcs"
        assert normalize_unit_code("litres") == "l"
        assert normalize_unit_code("cups") == "cup"

    def test_strips_non_letters(self):
        """Test digits and punctuation are removed, underscore kept."""
        assert normalize_unit_code("500g") == "g"
        assert normalize_unit_code("(tbsp.)") == "tbsp"
        assert normalize_unit_code("to_taste") == "to_taste"

    def test_empty(self):
        """Test empty input normalizes to an empty code."""
        assert normalize_unit_code("") == ""
        assert normalize_unit_code(None) == ""
        assert normalize_unit_code("123") == ""


class TestUnit:
    """Tests for the Unit value type."""

    def test_base_unit_requires_factor_one(self):
        """Test a base unit must convert to itself with factor 1.0."""
        with pytest.raises(ValueError):
            Unit("g", UnitKind.MASS, "g", 2.0)

    def test_factor_must_be_positive(self):
        """Test non-positive factors are rejected."""
        with pytest.raises(ValueError):
            Unit("kg", UnitKind.MASS, "g", 0.0)

    @pytest.mark.parametrize("factor", [float("nan"), float("inf")])
    def test_factor_must_be_finite(self, factor):
        with pytest.raises(ValueError):
            Unit("kg", UnitKind.MASS, "g", factor)

    def test_is_base(self):
        assert Unit("g", UnitKind.MASS, "g", 1.0).is_base
        assert not Unit("kg", UnitKind.MASS, "g", 1000.0).is_base


class TestUnitCatalog:
    """Tests for UnitCatalog lookups."""

    def test_lookup_known(self, unit_catalog):
        """Test known units resolve with their factor."""
        kg = unit_catalog.lookup("kg")
        assert kg.kind == UnitKind.MASS
        assert kg.base_unit == "g"
        assert kg.to_base_factor == 1000.0

    def test_lookup_synonym(self, unit_catalog):
        """Test lookups normalize the code first."""
        assert unit_catalog.lookup("Kilograms").code == "kg"
        assert unit_catalog.lookup("tablespoons").to_base_factor == pytest.approx(14.7868)

    def test_lookup_unknown_synthesizes(self, unit_catalog):
        """Test unknown codes never error."""
        unit = unit_catalog.lookup("Handful")
        assert unit.code == "handful"
        assert unit.kind == UnitKind.OTHER
        assert unit.base_unit == "handful"
        assert unit.to_base_factor == 1.0

    def test_lookup_empty_defaults_to_pieces(self, unit_catalog):
        """Test missing unit text resolves to the default unit."""
        assert unit_catalog.lookup("").code == DEFAULT_UNIT_CODE
        assert unit_catalog.lookup(None).code == DEFAULT_UNIT_CODE

    def test_base_units_have_factor_one(self, unit_catalog):
        """Test every registered base unit converts with factor 1.0."""
        for code in unit_catalog.codes():
            unit = unit_catalog.lookup(code)
            if unit.code == unit.base_unit:
                assert unit.to_base_factor == 1.0

    def test_register_overrides(self):
        """Test registering a unit replaces the existing entry."""
        catalog = UnitCatalog()
        catalog.register(Unit("cup", UnitKind.VOLUME, "ml", 236.588))
        assert catalog.lookup("cups").to_base_factor == 236.588

    def test_register_normalizes_code(self):
        """Test registered units are keyed by their normalized code."""
        catalog = UnitCatalog([])
        catalog.register(Unit("Pinch", UnitKind.OTHER, "Pinch", 1.0))
        assert "pinch" in catalog
        assert catalog.is_known("PINCH")
        assert len(catalog) == 1
