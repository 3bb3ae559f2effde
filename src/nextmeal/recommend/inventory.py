"""Reduce raw inventory rows to one base-unit stock level per ingredient."""

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime

from nextmeal.errors import IngredientNotFound
from nextmeal.logging_config import get_logger
from nextmeal.normalize.ingredients import Ingredient, QuantityConverter

logger = get_logger(__name__)

IngredientLookup = Callable[[str], Ingredient]


@dataclass(frozen=True)
class InventoryEntry:
    """A single inventory row as entered by the user."""

    ingredient_id: str
    quantity: float
    unit: str | None
    expiry_date: date | None = None
    entry_id: str | None = None

    @property
    def expiry(self) -> date | None:
        """Expiry as a calendar date (datetimes are truncated)."""
        if isinstance(self.expiry_date, datetime):
            return self.expiry_date.date()
        return self.expiry_date


@dataclass
class StockLevel:
    """Aggregated stock of one ingredient."""

    base_quantity: float
    base_unit: str
    nearest_expiry: date | None = None
    entry_count: int = 0


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal problem found while reading inventory or recipes."""

    kind: str  # "ingredient_not_found" or "invalid_quantity"
    ingredient_id: str
    message: str
    recipe_id: str | None = None


@dataclass
class AggregatedInventory(Mapping[str, StockLevel]):
    """Stock levels keyed by ingredient id, plus diagnostics for skipped rows."""

    stock: dict[str, StockLevel] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def __getitem__(self, ingredient_id: str) -> StockLevel:
        return self.stock[ingredient_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self.stock)

    def __len__(self) -> int:
        return len(self.stock)

    def available(self, ingredient_id: str) -> float:
        """Get the base quantity on hand, 0.0 when absent."""
        level = self.stock.get(ingredient_id)
        return level.base_quantity if level else 0.0


class InventoryAggregator:
    """
    Sums a user's inventory per ingredient in base units.

    Multiple rows for the same ingredient (e.g. two purchases) are added together
    and the nearest expiry date across them is kept. Rows for ingredients the
    catalog does not know cannot be converted; they are skipped and reported as
    diagnostics.
    Rows whose quantity is not a finite number are skipped the same way.
    """

    def __init__(self, converter: QuantityConverter, ingredient_lookup: IngredientLookup):
        self.converter = converter
        self.ingredient_lookup = ingredient_lookup

    def aggregate(self, entries: Iterable[InventoryEntry]) -> AggregatedInventory:
        """Aggregate inventory entries into per-ingredient stock levels."""
        result = AggregatedInventory()
        ingredients: dict[str, Ingredient | None] = {}

        for entry in entries:
            if entry.ingredient_id not in ingredients:
                ingredients[entry.ingredient_id] = self._resolve(entry.ingredient_id, result)

            ingredient = ingredients[entry.ingredient_id]
            if ingredient is None:
                continue

            converted = self.converter.to_base_quantity(ingredient, entry.quantity, entry.unit)
            if not converted.valid:
                result.diagnostics.append(
                    Diagnostic(
                        kind="invalid_quantity",
                        ingredient_id=entry.ingredient_id,
                        message=(
                            f"Inventory row skipped: quantity {entry.quantity!r} is not a number"
                        ),
                    )
                )
                continue

            level = result.stock.get(entry.ingredient_id)
            if level is None:
                level = StockLevel(base_quantity=0.0, base_unit=converted.unit)
                result.stock[entry.ingredient_id] = level

            level.base_quantity += converted.quantity
            level.entry_count += 1

            expiry = entry.expiry
            if expiry is not None:
                if level.nearest_expiry is None or expiry < level.nearest_expiry:
                    level.nearest_expiry = expiry

        if result.diagnostics:
            logger.warning(f"Inventory has {len(result.diagnostics)} diagnostic(s), see response")

        return result

    def _resolve(self, ingredient_id: str, result: AggregatedInventory) -> Ingredient | None:
        try:
            return self.ingredient_lookup(ingredient_id)
        except IngredientNotFound as e:
            result.diagnostics.append(
                Diagnostic(
                    kind="ingredient_not_found",
                    ingredient_id=ingredient_id,
                    message=f"Inventory row skipped: {e}",
                )
            )
            return None
