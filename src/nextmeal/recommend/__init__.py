"""Inventory-driven recipe recommendation."""

from nextmeal.recommend.engine import (
    CatalogSource,
    InMemoryCatalog,
    InventorySource,
    RecipeSource,
    RecommendationEngine,
)
from nextmeal.recommend.expiry import (
    ExpirationNotice,
    days_until,
    expiration_notice,
    resolve_expiry_date,
)
from nextmeal.recommend.inventory import (
    AggregatedInventory,
    Diagnostic,
    InventoryAggregator,
    InventoryEntry,
    StockLevel,
)
from nextmeal.recommend.ranker import RecommendationRanker
from nextmeal.recommend.scoring import (
    ExpirationUrgencyScorer,
    MatchScore,
    MatchScorer,
    RecipeCandidate,
    RecipeRequirement,
    UrgencyScore,
)
from nextmeal.recommend.usage import EntryUpdate, UsagePlan, plan_recipe_usage

__all__ = [
    "AggregatedInventory",
    "CatalogSource",
    "Diagnostic",
    "EntryUpdate",
    "ExpirationNotice",
    "ExpirationUrgencyScorer",
    "InMemoryCatalog",
    "InventoryAggregator",
    "InventoryEntry",
    "InventorySource",
    "MatchScore",
    "MatchScorer",
    "RecipeCandidate",
    "RecipeRequirement",
    "RecipeSource",
    "RecommendationEngine",
    "RecommendationRanker",
    "StockLevel",
    "UrgencyScore",
    "UsagePlan",
    "days_until",
    "expiration_notice",
    "plan_recipe_usage",
    "resolve_expiry_date",
]
