"""Recommendation engine entry point and the sources it reads from."""

from collections.abc import Iterable
from typing import Protocol

from nextmeal.config import RecommendationConfig
from nextmeal.errors import IngredientNotFound
from nextmeal.logging_config import LoggingContext, get_logger
from nextmeal.normalize.ingredients import Ingredient, QuantityConverter
from nextmeal.normalize.units import DEFAULT_UNITS, Unit, UnitCatalog
from nextmeal.recommend.inventory import InventoryAggregator, InventoryEntry
from nextmeal.recommend.ranker import RecommendationRanker
from nextmeal.recommend.scoring import ExpirationUrgencyScorer, MatchScorer, RecipeCandidate
from nextmeal.schemas import RecommendationResponse

logger = get_logger(__name__)


class InventorySource(Protocol):
    """Loads a user's inventory rows."""

    def list(self, user_id: str) -> list[InventoryEntry]: ...


class RecipeSource(Protocol):
    """Loads the recipes a user may be recommended, in default display order."""

    def list(self, visible_to_user_id: str) -> list[RecipeCandidate]: ...


class CatalogSource(Protocol):
    """Read-only access to ingredients and units."""

    def ingredient(self, ingredient_id: str) -> Ingredient:
        """Get an ingredient, raising IngredientNotFound when absent."""
        ...

    def unit(self, code: str) -> Unit: ...


class InMemoryCatalog:
    """CatalogSource over ingredients and units already held in memory."""

    def __init__(
        self,
        ingredients: Iterable[Ingredient] = (),
        units: Iterable[Unit] = DEFAULT_UNITS,
    ):
        self.units = UnitCatalog(units)
        self.ingredients = {ingredient.id: ingredient for ingredient in ingredients}

    def ingredient(self, ingredient_id: str) -> Ingredient:
        try:
            return self.ingredients[ingredient_id]
        except KeyError:
            raise IngredientNotFound(ingredient_id) from None

    def unit(self, code: str) -> Unit:
        return self.units.lookup(code)


class RecommendationEngine:
    """
    Recommends recipes for a user from a snapshot of inventory, recipes and catalog.

    Each call recomputes from the sources and holds no state between calls. The
    read path never raises for bad data: unknown ingredients and units degrade
    the affected item's score and are reported as diagnostics.
    """

    def __init__(
        self,
        catalog: CatalogSource,
        inventory_source: InventorySource,
        recipe_source: RecipeSource,
    ):
        self.catalog = catalog
        self.inventory_source = inventory_source
        self.recipe_source = recipe_source

    def recommend(
        self,
        user_id: str,
        config: RecommendationConfig | None = None,
    ) -> RecommendationResponse:
        """
        Rank the recipes visible to a user against their inventory.

        Args:
            user_id: The user to recommend for.
            config: Engine configuration for this call. Defaults apply when None.

        Returns:
            Ranked results with summary counts and diagnostics.
        """
        config = config or RecommendationConfig()

        with LoggingContext(user_id=user_id):
            converter = QuantityConverter(unit_lookup=self.catalog.unit)
            aggregator = InventoryAggregator(converter, self.catalog.ingredient)
            ranker = RecommendationRanker(
                match_scorer=MatchScorer(converter, self.catalog.ingredient),
                urgency_scorer=ExpirationUrgencyScorer(config.expiration_reference_days),
            )

            inventory = aggregator.aggregate(self.inventory_source.list(user_id))
            recipes = self.recipe_source.list(user_id)

            logger.info(
                f"Recommending for user {user_id}: {len(recipes)} recipes, "
                f"h={config.expiration_reference_days}"
            )

            return ranker.rank(recipes, inventory, config.reference_date())
