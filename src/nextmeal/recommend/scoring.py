"""Recipe scoring: inventory coverage and expiration urgency."""

from dataclasses import dataclass, field
from datetime import date

from nextmeal.errors import IngredientNotFound
from nextmeal.logging_config import get_logger
from nextmeal.normalize.ingredients import QuantityConverter
from nextmeal.recommend.expiry import days_until
from nextmeal.recommend.inventory import AggregatedInventory, Diagnostic, IngredientLookup

logger = get_logger(__name__)


@dataclass(frozen=True)
class RecipeRequirement:
    """Quantity of one ingredient a recipe needs."""

    recipe_id: str
    ingredient_id: str
    quantity: float
    unit: str | None = None


@dataclass
class RecipeCandidate:
    """A recipe visible to the user, with its requirements."""

    recipe_id: str
    name: str
    requirements: list[RecipeRequirement] = field(default_factory=list)


@dataclass
class MatchScore:
    """How well the inventory covers one recipe."""

    recipe_id: str
    matched_ingredient_ids: list[str] = field(default_factory=list)
    missing_ingredient_ids: list[str] = field(default_factory=list)
    per_ingredient_match: dict[str, float] = field(default_factory=dict)
    match_percentage: float = 0.0
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def has_match(self) -> bool:
        """Check if at least one required ingredient is on hand."""
        return bool(self.matched_ingredient_ids)


@dataclass
class UrgencyScore:
    """Expiration urgency of a recipe's matched ingredients."""

    per_ingredient_urgency: dict[str, float] = field(default_factory=dict)
    urgency_average: float = 0.0

    @property
    def uses_expiring_ingredients(self) -> bool:
        return self.urgency_average > 0


class MatchScorer:
    """
    Scores recipes by inventory coverage, comparing quantities in base units.

    For each requirement j: m_j = min(available_j / required_j, 1), with m_j = 1
    when nothing is required and m_j = 0 when the ingredient is not on hand.
    A requirement whose quantity is not a finite number also scores 0.
    The match percentage is 100 * sum(m_j) / n over all n requirements.
    """

    def __init__(self, converter: QuantityConverter, ingredient_lookup: IngredientLookup):
        self.converter = converter
        self.ingredient_lookup = ingredient_lookup

    def score(self, recipe: RecipeCandidate, inventory: AggregatedInventory) -> MatchScore:
        """Score one recipe against aggregated inventory."""
        result = MatchScore(recipe_id=recipe.recipe_id)
        total = 0.0

        for requirement in recipe.requirements:
            ingredient_id = requirement.ingredient_id
            m = self._score_requirement(requirement, inventory, result)
            result.per_ingredient_match[ingredient_id] = m
            total += m

        n = len(recipe.requirements)
        result.match_percentage = 100.0 * total / n if n else 0.0
        return result

    def _score_requirement(
        self,
        requirement: RecipeRequirement,
        inventory: AggregatedInventory,
        result: MatchScore,
    ) -> float:
        ingredient_id = requirement.ingredient_id

        try:
            ingredient = self.ingredient_lookup(ingredient_id)
        except IngredientNotFound as e:
            logger.warning(f"Recipe {requirement.recipe_id} requires unknown ingredient: {e}")
            result.diagnostics.append(
                Diagnostic(
                    kind="ingredient_not_found",
                    ingredient_id=ingredient_id,
                    message=f"Requirement scored as 0: {e}",
                    recipe_id=requirement.recipe_id,
                )
            )
            _append_unique(result.missing_ingredient_ids, ingredient_id)
            return 0.0

        required = self.converter.to_base_quantity(
            ingredient, requirement.quantity, requirement.unit
        )
        if not required.valid:
            result.diagnostics.append(
                Diagnostic(
                    kind="invalid_quantity",
                    ingredient_id=ingredient_id,
                    message=(
                        f"Required quantity {requirement.quantity!r} is not a number, scored as 0"
                    ),
                    recipe_id=requirement.recipe_id,
                )
            )
            _append_unique(result.missing_ingredient_ids, ingredient_id)
            return 0.0

        if ingredient_id not in inventory:
            _append_unique(result.missing_ingredient_ids, ingredient_id)
            return 0.0

        available = inventory.available(ingredient_id)

        if available > 0:
            _append_unique(result.matched_ingredient_ids, ingredient_id)
        else:
            _append_unique(result.missing_ingredient_ids, ingredient_id)

        if required.quantity == 0:
            return 1.0
        m = available / required.quantity
        # NaN fails the comparison and scores 0
        return min(m, 1.0) if m >= 0 else 0.0


class ExpirationUrgencyScorer:
    """
    Scores how urgently a recipe should be cooked given ingredient expiry.

    With reference window h and d days until expiry:
    u = 1 when d <= 0, u = (h - d) / h when 0 < d <= h, u = 0 otherwise.
    """

    def __init__(self, reference_days: int):
        self.reference_days = reference_days

    def urgency(self, expiry: date | None, today: date) -> float:
        """Urgency of a single ingredient, 0..1."""
        h = self.reference_days
        if expiry is None or h <= 0:
            return 0.0

        d = max(days_until(expiry, today), 0)
        if d > h:
            return 0.0
        return (h - d) / h

    def score(self, match: MatchScore, inventory: AggregatedInventory, today: date) -> UrgencyScore:
        """
        Score urgency over a recipe's matched ingredients.

        Ingredients without expiry data get 0 but are left out of the average.
        """
        result = UrgencyScore()
        dated: list[float] = []

        for ingredient_id in match.matched_ingredient_ids:
            expiry = inventory[ingredient_id].nearest_expiry
            u = self.urgency(expiry, today)
            result.per_ingredient_urgency[ingredient_id] = u
            if expiry is not None:
                dated.append(u)

        if dated:
            result.urgency_average = sum(dated) / len(dated)
        return result


def _append_unique(ids: list[str], ingredient_id: str) -> None:
    if ingredient_id not in ids:
        ids.append(ingredient_id)
