"""Output schemas for recommendation results."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys for API consumers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecommendationResult(CamelModel):
    """A scored recipe recommendation."""

    recipe_id: str
    name: str = ""
    matched_ingredient_ids: list[str] = Field(default_factory=list)
    missing_ingredient_ids: list[str] = Field(default_factory=list)
    match_percentage: float = Field(ge=0, le=100)
    per_ingredient_match: dict[str, float] = Field(default_factory=dict)
    per_ingredient_urgency: dict[str, float] = Field(default_factory=dict)
    urgency_average: float = Field(0.0, ge=0, le=1)
    uses_expiring_ingredients: bool = False


class DiagnosticOut(CamelModel):
    """A non-fatal data problem degraded during scoring."""

    kind: str
    ingredient_id: str
    message: str
    recipe_id: str | None = None


class RecommendationMeta(CamelModel):
    """Summary counts for a recommendation run."""

    total_recipes_considered: int
    total_recommended: int
    distinct_inventory_ingredients: int
    expiration_reference_days: int


class RecommendationResponse(CamelModel):
    """Ranked recommendations with summary and diagnostics."""

    results: list[RecommendationResult] = Field(default_factory=list)
    meta: RecommendationMeta
    diagnostics: list[DiagnosticOut] = Field(default_factory=list)
