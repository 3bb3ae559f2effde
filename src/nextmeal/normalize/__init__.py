"""Unit normalization and conversion to per-ingredient base units."""

from nextmeal.normalize.ingredients import (
    BaseQuantity,
    Ingredient,
    IngredientUnitPolicy,
    QuantityConverter,
)
from nextmeal.normalize.units import (
    DEFAULT_UNIT_CODE,
    DEFAULT_UNITS,
    Unit,
    UnitCatalog,
    UnitKind,
    normalize_unit_code,
)

__all__ = [
    "DEFAULT_UNIT_CODE",
    "DEFAULT_UNITS",
    "BaseQuantity",
    "Ingredient",
    "IngredientUnitPolicy",
    "QuantityConverter",
    "Unit",
    "UnitCatalog",
    "UnitKind",
    "normalize_unit_code",
]
