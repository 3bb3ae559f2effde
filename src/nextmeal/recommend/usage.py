"""Deduct a cooked recipe's requirements from inventory, soonest expiry first."""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from nextmeal.errors import IngredientNotFound
from nextmeal.logging_config import get_logger
from nextmeal.normalize.ingredients import QuantityConverter
from nextmeal.recommend.inventory import IngredientLookup, InventoryEntry
from nextmeal.recommend.scoring import RecipeRequirement

logger = get_logger(__name__)


@dataclass(frozen=True)
class EntryUpdate:
    """New remaining quantity for one inventory row, in base units."""

    entry_id: str | None
    ingredient_id: str
    remaining_base_quantity: float
    base_unit: str


@dataclass
class UsagePlan:
    """Result of planning a recipe's usage against inventory."""

    deducted: dict[str, float] = field(default_factory=dict)
    updates: list[EntryUpdate] = field(default_factory=list)
    skipped_ingredient_ids: list[str] = field(default_factory=list)

    @property
    def updated_count(self) -> int:
        return len(self.updates)


def _fifo_key(entry: InventoryEntry) -> tuple[bool, date]:
    # Rows without expiry go last
    return (entry.expiry is None, entry.expiry or date.max)


def plan_recipe_usage(
    requirements: Iterable[RecipeRequirement],
    entries: Iterable[InventoryEntry],
    converter: QuantityConverter,
    ingredient_lookup: IngredientLookup,
) -> UsagePlan:
    """
    Plan deducting each requirement from the user's inventory.

    Amounts are compared in base units. Rows are consumed soonest expiry first
    and never go below zero; a shortfall simply empties the rows.

    Returns:
        UsagePlan with the amount deducted per ingredient and the touched rows.
    """
    by_ingredient: dict[str, list[InventoryEntry]] = defaultdict(list)
    for entry in entries:
        by_ingredient[entry.ingredient_id].append(entry)

    plan = UsagePlan()

    for requirement in requirements:
        try:
            ingredient = ingredient_lookup(requirement.ingredient_id)
        except IngredientNotFound as e:
            logger.warning(f"Skipping usage for recipe {requirement.recipe_id}: {e}")
            plan.skipped_ingredient_ids.append(requirement.ingredient_id)
            continue

        required = converter.to_base_quantity(
            ingredient, requirement.quantity, requirement.unit
        ).quantity

        rows: list[InventoryEntry] = []
        row_bases: list[float] = []
        for row in sorted(by_ingredient.get(requirement.ingredient_id, []), key=_fifo_key):
            converted = converter.to_base_quantity(ingredient, row.quantity, row.unit)
            # Rows with unusable quantities are left untouched
            if converted.valid:
                rows.append(row)
                row_bases.append(converted.quantity)

        to_deduct = min(required, sum(row_bases))
        plan.deducted[requirement.ingredient_id] = to_deduct

        still_to_deduct = to_deduct
        for row, row_base in zip(rows, row_bases):
            if still_to_deduct <= 0:
                break
            take = min(row_base, still_to_deduct)
            still_to_deduct -= take
            plan.updates.append(
                EntryUpdate(
                    entry_id=row.entry_id,
                    ingredient_id=requirement.ingredient_id,
                    remaining_base_quantity=row_base - take,
                    base_unit=ingredient.base_unit,
                )
            )

    logger.info(
        f"Planned usage: {len(plan.deducted)} ingredients, {plan.updated_count} rows updated"
    )
    return plan
