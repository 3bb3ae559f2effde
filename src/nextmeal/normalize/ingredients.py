"""Per-ingredient unit policy and conversion to base-unit quantities."""

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import NamedTuple

from nextmeal.errors import InvalidQuantity, UnitNotAllowed
from nextmeal.logging_config import get_logger
from nextmeal.normalize.units import DEFAULT_UNIT_CODE, Unit, UnitCatalog, normalize_unit_code

logger = get_logger(__name__)


@dataclass
class Ingredient:
    """
    Catalog ingredient as seen by the engine.

    Unit codes are normalized on construction. An ingredient without a base unit
    is counted in pieces.
    """

    id: str
    name: str
    base_unit: str = DEFAULT_UNIT_CODE
    allowed_units: frozenset[str] = field(default_factory=frozenset)
    conversions: Mapping[str, float] = field(default_factory=dict)  # unit code -> factor to base
    default_days_until_expiry: int | None = None

    def __post_init__(self) -> None:
        self.base_unit = normalize_unit_code(self.base_unit) or DEFAULT_UNIT_CODE
        self.allowed_units = frozenset(
            code for code in (normalize_unit_code(u) for u in self.allowed_units) if code
        )
        self.conversions = {
            normalize_unit_code(code): float(factor)
            for code, factor in self.conversions.items()
            if normalize_unit_code(code) and (coerce_quantity(factor) or 0) > 0
        }


class BaseQuantity(NamedTuple):
    """A quantity expressed in an ingredient's base unit."""

    quantity: float
    unit: str
    valid: bool = True  # False when the input quantity was unusable and read as 0


def coerce_quantity(value: object) -> float | None:
    """Read a stored quantity as a finite float, or None when it is not one."""
    try:
        quantity = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return quantity if math.isfinite(quantity) else None


class IngredientUnitPolicy:
    """Decides which units may be entered for an ingredient."""

    def allowed_units_for(self, ingredient: Ingredient) -> frozenset[str]:
        """Get the allowed unit codes, always including the base unit."""
        return ingredient.allowed_units | {ingredient.base_unit}

    def is_allowed(self, ingredient: Ingredient, unit: str | None) -> bool:
        """Check if unit text is allowed for the ingredient once normalized."""
        code = normalize_unit_code(unit) or ingredient.base_unit
        return code in self.allowed_units_for(ingredient)


class QuantityConverter:
    """
    Converts (quantity, unit) pairs to an ingredient's base unit.

    `to_base_quantity` is the recompute path: it accepts any unit, falling back
    to factor 1.0 for units the catalog does not know. `convert_for_entry` is the
    write path and enforces the ingredient's unit policy.
    """

    def __init__(
        self,
        unit_lookup: Callable[[str], Unit] | None = None,
        policy: IngredientUnitPolicy | None = None,
    ):
        self.unit_lookup = unit_lookup or UnitCatalog().lookup
        self.policy = policy or IngredientUnitPolicy()

    def factor_for(self, ingredient: Ingredient, unit: str | None) -> float:
        """Get the multiplier that takes `unit` to the ingredient's base unit."""
        code = normalize_unit_code(unit) or ingredient.base_unit

        if code == ingredient.base_unit:
            return 1.0

        if code in ingredient.conversions:
            return ingredient.conversions[code]

        looked_up = self.unit_lookup(code)
        if looked_up.base_unit != ingredient.base_unit:
            # Factor is applied as declared even when the bases disagree
            logger.debug(
                f"Unit '{code}' has base '{looked_up.base_unit}' but ingredient "
                f"{ingredient.id} uses '{ingredient.base_unit}'"
            )
        return looked_up.to_base_factor

    def to_base_quantity(
        self,
        ingredient: Ingredient,
        quantity: float,
        unit: str | None,
    ) -> BaseQuantity:
        """
        Convert a stored quantity to the ingredient's base unit.

        Never raises for bad data. A quantity that is not a finite number is read
        as 0 and flagged with `valid=False`; negatives are clamped to 0.
        """
        coerced = coerce_quantity(quantity)
        if coerced is None:
            logger.warning(
                f"Unusable quantity {quantity!r} for ingredient {ingredient.id}, treating as 0"
            )
            return BaseQuantity(quantity=0.0, unit=ingredient.base_unit, valid=False)

        quantity = coerced
        if quantity < 0:
            logger.warning(
                f"Negative quantity {quantity} for ingredient {ingredient.id}, treating as 0"
            )
            quantity = 0.0

        return BaseQuantity(
            quantity=quantity * self.factor_for(ingredient, unit),
            unit=ingredient.base_unit,
        )

    def convert_for_entry(
        self,
        ingredient: Ingredient,
        quantity: float,
        unit: str | None,
    ) -> BaseQuantity:
        """
        Validate and convert a newly entered quantity.

        Raises:
            InvalidQuantity: If quantity is not a finite number >= 0.
            UnitNotAllowed: If the unit is not allowed for the ingredient.
        """
        coerced = coerce_quantity(quantity)
        if coerced is None or coerced < 0:
            raise InvalidQuantity(quantity)

        if not self.policy.is_allowed(ingredient, unit):
            raise UnitNotAllowed(
                ingredient_id=ingredient.id,
                unit=unit or "",
                allowed_units=self.policy.allowed_units_for(ingredient),
            )

        return self.to_base_quantity(ingredient, quantity, unit)

