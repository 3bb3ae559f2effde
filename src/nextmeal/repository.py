"""SQLAlchemy-backed catalog, inventory and recipe sources."""

from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from nextmeal import models
from nextmeal.config import get_settings
from nextmeal.errors import IngredientNotFound
from nextmeal.logging_config import get_logger
from nextmeal.normalize.ingredients import Ingredient, QuantityConverter, coerce_quantity
from nextmeal.normalize.units import Unit, UnitCatalog, UnitKind, normalize_unit_code
from nextmeal.recommend.expiry import resolve_expiry_date
from nextmeal.recommend.inventory import InventoryEntry
from nextmeal.recommend.scoring import RecipeCandidate, RecipeRequirement
from nextmeal.recommend.usage import UsagePlan, plan_recipe_usage

logger = get_logger(__name__)

# Owner of the built-in recipes every user can see
SYSTEM_USER_ID = "00000000-0000-0000-0000-000000000000"


def ingredient_from_row(row: models.Ingredient) -> Ingredient:
    """Build the engine's ingredient from a database row."""
    base_unit = normalize_unit_code(row.base_unit)
    conversions: dict[str, float] = {}

    for conv in row.conversions:
        from_unit = normalize_unit_code(conv.from_unit)
        to_unit = normalize_unit_code(conv.to_unit)
        factor = coerce_quantity(conv.factor)
        if factor is None or factor <= 0:
            continue
        if to_unit == base_unit:
            conversions[from_unit] = factor
        elif from_unit == base_unit and to_unit not in conversions:
            conversions[to_unit] = 1.0 / factor

    return Ingredient(
        id=row.ingredient_id,
        name=row.name,
        base_unit=base_unit,
        allowed_units=frozenset(a.unit_code for a in row.allowed_units),
        conversions=conversions,
        default_days_until_expiry=row.default_days_until_expiry,
    )


class SqlCatalogSource:
    """
    Catalog snapshot read from the database.

    Units stored in the database override the built-in defaults. Ingredients are
    loaded on first use and kept for the lifetime of this object, which should
    not outlive a request.
    """

    def __init__(self, session: Session):
        self.session = session
        self._units: UnitCatalog | None = None
        self._ingredients: dict[str, Ingredient] = {}

    @property
    def units(self) -> UnitCatalog:
        if self._units is None:
            self._units = self._load_units()
        return self._units

    def _load_units(self) -> UnitCatalog:
        catalog = UnitCatalog()
        for row in self.session.scalars(select(models.Unit)):
            try:
                kind = UnitKind(row.unit_kind)
            except ValueError:
                kind = UnitKind.OTHER
            try:
                catalog.register(
                    Unit(
                        code=row.unit_code,
                        kind=kind,
                        base_unit=row.base_unit,
                        to_base_factor=float(row.to_base_factor),
                    )
                )
            except (TypeError, ValueError) as e:
                logger.warning(f"Ignoring invalid unit row '{row.unit_code}': {e}")
        return catalog

    def ingredient(self, ingredient_id: str) -> Ingredient:
        if ingredient_id in self._ingredients:
            return self._ingredients[ingredient_id]

        row = self.session.scalar(
            select(models.Ingredient)
            .where(models.Ingredient.ingredient_id == ingredient_id)
            .options(
                selectinload(models.Ingredient.allowed_units),
                selectinload(models.Ingredient.conversions),
            )
        )
        if row is None:
            raise IngredientNotFound(ingredient_id)

        ingredient = ingredient_from_row(row)
        self._ingredients[ingredient_id] = ingredient
        return ingredient

    def unit(self, code: str) -> Unit:
        return self.units.lookup(code)


class SqlInventorySource:
    """Reads and writes a user's inventory rows."""

    def __init__(self, session: Session, catalog: SqlCatalogSource | None = None):
        self.session = session
        self.catalog = catalog or SqlCatalogSource(session)
        self.converter = QuantityConverter(unit_lookup=self.catalog.unit)

    def add_item(
        self,
        user_id: str,
        ingredient_id: str,
        quantity: float,
        unit: str,
        expiry_date: date | None = None,
        today: date | None = None,
        fallback_days: int | None = None,
    ) -> models.InventoryItem:
        """
        Validate and store a new inventory row.

        Without an expiry date the ingredient default applies, then
        `fallback_days` (the configured default_days_until_expiry when None).

        Raises:
            IngredientNotFound: If the ingredient is not in the catalog.
            UnitNotAllowed: If the unit is not allowed for the ingredient.
            InvalidQuantity: If quantity is negative.
        """
        if fallback_days is None:
            fallback_days = get_settings().default_days_until_expiry

        ingredient = self.catalog.ingredient(ingredient_id)
        self.converter.convert_for_entry(ingredient, quantity, unit)

        item = models.InventoryItem(
            user_id=user_id,
            ingredient_id=ingredient_id,
            input_quantity=quantity,
            input_unit=normalize_unit_code(unit) or ingredient.base_unit,
            expiration_date=resolve_expiry_date(
                expiry_date, ingredient, today or date.today(), fallback_days
            ),
        )
        self.session.add(item)
        self.session.commit()

        logger.info(f"Added {quantity} {unit} of {ingredient.name} for user {user_id}")
        return item

    def use_recipe(self, user_id: str, recipe: RecipeCandidate) -> UsagePlan:
        """Deduct a cooked recipe's requirements from the user's inventory."""
        plan = plan_recipe_usage(
            recipe.requirements,
            self.list(user_id),
            self.converter,
            self.catalog.ingredient,
        )

        for update in plan.updates:
            item = self.session.get(models.InventoryItem, update.entry_id)
            if item is None:
                continue
            item.input_quantity = update.remaining_base_quantity
            item.input_unit = update.base_unit

        self.session.commit()
        return plan

    def list(self, user_id: str) -> list[InventoryEntry]:
        rows = self.session.scalars(
            select(models.InventoryItem)
            .where(models.InventoryItem.user_id == user_id)
            .order_by(models.InventoryItem.expiration_date)
        )
        return [
            InventoryEntry(
                ingredient_id=row.ingredient_id,
                quantity=row.input_quantity,
                unit=row.input_unit,
                expiry_date=row.expiration_date,
                entry_id=row.inventory_id,
            )
            for row in rows
        ]


class SqlRecipeSource:
    """Reads recipes visible to a user: their own plus the system's."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, recipe_id: str) -> RecipeCandidate | None:
        row = self.session.scalar(
            select(models.Recipe)
            .where(models.Recipe.recipe_id == recipe_id)
            .options(selectinload(models.Recipe.ingredients))
        )
        return _candidate_from_row(row) if row else None

    def list(self, visible_to_user_id: str) -> list[RecipeCandidate]:
        rows = self.session.scalars(
            select(models.Recipe)
            .where(models.Recipe.owner_user_id.in_([SYSTEM_USER_ID, visible_to_user_id]))
            .options(selectinload(models.Recipe.ingredients))
            .order_by(models.Recipe.created_at.desc())
        )
        return [_candidate_from_row(row) for row in rows]


def _candidate_from_row(row: models.Recipe) -> RecipeCandidate:
    return RecipeCandidate(
        recipe_id=row.recipe_id,
        name=row.recipe_name,
        requirements=[
            RecipeRequirement(
                recipe_id=row.recipe_id,
                ingredient_id=ri.ingredient_id,
                quantity=ri.required_quantity,
                unit=ri.required_unit,
            )
            for ri in row.ingredients
        ],
    )
