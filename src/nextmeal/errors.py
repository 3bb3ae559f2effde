"""Error taxonomy for the recommendation engine and its write path."""

from collections.abc import Iterable


class NextMealError(Exception):
    """Base exception for nextmeal errors."""


class UnitNotAllowed(NextMealError):
    """Raised when an entered unit is not allowed for an ingredient.

    Only the write path (new inventory rows, new recipe requirements) raises this.
    The recommendation read path tolerates any stored unit.
    """

    def __init__(self, ingredient_id: str, unit: str, allowed_units: Iterable[str] = ()):
        self.ingredient_id = ingredient_id
        self.unit = unit
        self.allowed_units = sorted(allowed_units)
        super().__init__(
            f"Unit '{unit}' is not allowed for ingredient {ingredient_id} "
            f"(allowed: {', '.join(self.allowed_units) or 'none'})"
        )


class IngredientNotFound(NextMealError, LookupError):
    """Raised when an ingredient id is not present in the catalog."""

    def __init__(self, ingredient_id: str):
        self.ingredient_id = ingredient_id
        super().__init__(f"Ingredient not found: {ingredient_id}")


class InvalidQuantity(NextMealError, ValueError):
    """Raised on the write path for quantities that are not finite numbers >= 0."""

    def __init__(self, quantity: float):
        self.quantity = quantity
        super().__init__(f"Quantity must be a finite number >= 0, got {quantity!r}")
