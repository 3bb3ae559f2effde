"""Unit normalization and the canonical unit catalog."""

import math
import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from nextmeal.logging_config import get_logger

logger = get_logger(__name__)

# Unit text with no code left after normalization resolves to this unit
DEFAULT_UNIT_CODE = "pcs"


class UnitKind(str, Enum):
    """Physical dimension a unit measures."""

    MASS = "mass"
    VOLUME = "volume"
    COUNT = "count"
    OTHER = "other"


@dataclass(frozen=True)
class Unit:
    """A measurement unit and its conversion to the base unit of its kind."""

    code: str
    kind: UnitKind
    base_unit: str
    to_base_factor: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.to_base_factor) or self.to_base_factor <= 0:
            raise ValueError(f"to_base_factor must be a finite number > 0 for unit '{self.code}'")
        if self.code == self.base_unit and self.to_base_factor != 1.0:
            raise ValueError(f"Base unit '{self.code}' must have to_base_factor 1.0")

    @property
    def is_base(self) -> bool:
        """Check if this unit is the base unit of its kind."""
        return self.code == self.base_unit


# =============================================================================
# Unit Tables
# =============================================================================

# Textual spellings -> canonical unit codes
UNIT_ALIASES: dict[str, str] = {
    # Mass
    "gram": "g",
    "grams": "g",
    "gr": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "kilo": "kg",
    "kilos": "kg",
    "milligram": "mg",
    "milligrams": "mg",
    "ounce": "oz",
    "ounces": "oz",
    "pound": "lb",
    "pounds": "lb",
    "lbs": "lb",
    # Volume
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    "deciliter": "dl",
    "deciliters": "dl",
    "centiliter": "cl",
    "centiliters": "cl",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tbs": "tbsp",
    "cups": "cup",
    # Count
    "piece": "pcs",
    "pieces": "pcs",
    "pc": "pcs",
    "unit": "pcs",
    "units": "pcs",
    # Qualitative
    "totaste": "to_taste",
}

DEFAULT_UNITS: tuple[Unit, ...] = (
    # Mass (base: g)
    Unit("g", UnitKind.MASS, "g", 1.0),
    Unit("kg", UnitKind.MASS, "g", 1000.0),
    Unit("mg", UnitKind.MASS, "g", 0.001),
    Unit("oz", UnitKind.MASS, "g", 28.3495),
    Unit("lb", UnitKind.MASS, "g", 453.592),
    # Volume (base: ml)
    Unit("ml", UnitKind.VOLUME, "ml", 1.0),
    Unit("l", UnitKind.VOLUME, "ml", 1000.0),
    Unit("dl", UnitKind.VOLUME, "ml", 100.0),
    Unit("cl", UnitKind.VOLUME, "ml", 10.0),
    Unit("tsp", UnitKind.VOLUME, "ml", 4.92892),
    Unit("tbsp", UnitKind.VOLUME, "ml", 14.7868),
    Unit("cup", UnitKind.VOLUME, "ml", 240.0),
    # Count (base: pcs)
    Unit("pcs", UnitKind.COUNT, "pcs", 1.0),
    # Qualitative
    Unit("to_taste", UnitKind.OTHER, "to_taste", 1.0),
)

_NON_CODE_CHARS = re.compile(r"[^a-z_]")


def normalize_unit_code(code: str | None) -> str:
    """
    Normalize unit text to a compact canonical code.

    Lower-cases, strips everything except letters and underscore, then maps
    known spellings to their code:
    - "Grams" -> "g"
    - "tablespoons" -> "tbsp"
    - "500g" -> "g"
    - "to_taste" -> "to_taste"

    Returns an empty string when nothing is left.
    """
    if not code:
        return ""

    normalized = _NON_CODE_CHARS.sub("", code.strip().lower())
    return UNIT_ALIASES.get(normalized, normalized)


class UnitCatalog:
    """
    Registry of measurement units keyed by normalized code.

    Lookups never fail: unknown codes synthesize a unit of kind "other" that is
    its own base with factor 1.0.
    """

    def __init__(self, units: Iterable[Unit] = DEFAULT_UNITS):
        self._units: dict[str, Unit] = {}
        for unit in units:
            self.register(unit)

    def register(self, unit: Unit) -> None:
        """Add or replace a unit, keyed by its normalized code."""
        code = normalize_unit_code(unit.code)
        if code != unit.code:
            unit = Unit(
                code=code,
                kind=unit.kind,
                base_unit=normalize_unit_code(unit.base_unit) or code,
                to_base_factor=unit.to_base_factor,
            )
        self._units[code] = unit

    def lookup(self, code: str | None) -> Unit:
        """Get the unit for any unit text, synthesizing one when unknown."""
        normalized = normalize_unit_code(code) or DEFAULT_UNIT_CODE

        unit = self._units.get(normalized)
        if unit is not None:
            return unit

        logger.debug(f"Unknown unit '{code}', treating as '{normalized}' with factor 1.0")
        return Unit(
            code=normalized,
            kind=UnitKind.OTHER,
            base_unit=normalized,
            to_base_factor=1.0,
        )

    def is_known(self, code: str | None) -> bool:
        """Check if the unit text resolves to a registered unit."""
        return normalize_unit_code(code) in self._units

    def codes(self) -> list[str]:
        """Get all registered unit codes, sorted."""
        return sorted(self._units)

    def __len__(self) -> int:
        return len(self._units)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and self.is_known(code)
