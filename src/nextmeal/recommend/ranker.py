"""Rank scored recipes: expiring ingredients first, then best match."""

from collections.abc import Iterable
from datetime import date

from nextmeal.logging_config import LoggingContext, get_logger
from nextmeal.recommend.inventory import AggregatedInventory, Diagnostic
from nextmeal.recommend.scoring import (
    ExpirationUrgencyScorer,
    MatchScorer,
    RecipeCandidate,
)
from nextmeal.schemas import (
    DiagnosticOut,
    RecommendationMeta,
    RecommendationResponse,
    RecommendationResult,
)

logger = get_logger(__name__)


class RecommendationRanker:
    """
    Scores every visible recipe and orders the recommendable ones.

    Recipes with no matched ingredient are dropped. The rest are sorted by
    uses_expiring_ingredients (True first), then match percentage descending.
    The sort is stable, so ties keep their input order.
    """

    def __init__(self, match_scorer: MatchScorer, urgency_scorer: ExpirationUrgencyScorer):
        self.match_scorer = match_scorer
        self.urgency_scorer = urgency_scorer

    def rank(
        self,
        recipes: Iterable[RecipeCandidate],
        inventory: AggregatedInventory,
        today: date,
    ) -> RecommendationResponse:
        """Score, filter and order recipes against the aggregated inventory."""
        results: list[RecommendationResult] = []
        diagnostics: list[Diagnostic] = list(inventory.diagnostics)
        considered = 0

        for recipe in recipes:
            considered += 1
            with LoggingContext(recipe_id=recipe.recipe_id):
                match = self.match_scorer.score(recipe, inventory)
            diagnostics.extend(match.diagnostics)

            if not match.has_match:
                continue

            urgency = self.urgency_scorer.score(match, inventory, today)
            results.append(
                RecommendationResult(
                    recipe_id=recipe.recipe_id,
                    name=recipe.name,
                    matched_ingredient_ids=match.matched_ingredient_ids,
                    missing_ingredient_ids=match.missing_ingredient_ids,
                    match_percentage=round(match.match_percentage, 2),
                    per_ingredient_match=match.per_ingredient_match,
                    per_ingredient_urgency=urgency.per_ingredient_urgency,
                    urgency_average=round(urgency.urgency_average, 4),
                    uses_expiring_ingredients=urgency.uses_expiring_ingredients,
                )
            )

        ranked = sorted(results, key=_sort_key)

        logger.info(
            f"Ranked {len(ranked)} of {considered} recipes "
            f"({len(inventory)} ingredients in inventory)"
        )

        return RecommendationResponse(
            results=ranked,
            meta=RecommendationMeta(
                total_recipes_considered=considered,
                total_recommended=len(ranked),
                distinct_inventory_ingredients=len(inventory),
                expiration_reference_days=self.urgency_scorer.reference_days,
            ),
            diagnostics=[
                DiagnosticOut(
                    kind=d.kind,
                    ingredient_id=d.ingredient_id,
                    message=d.message,
                    recipe_id=d.recipe_id,
                )
                for d in diagnostics
            ],
        )


def _sort_key(result: RecommendationResult) -> tuple[bool, float]:
    return (not result.uses_expiring_ingredients, -result.match_percentage)
