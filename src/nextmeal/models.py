"""SQLAlchemy database models."""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nextmeal.database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class Unit(Base):
    """Measurement unit and its factor to the base unit of its kind."""

    __tablename__ = "units"

    unit_code: Mapped[str] = mapped_column(String(20), primary_key=True)  # "g", "tbsp"
    unit_kind: Mapped[str] = mapped_column(String(30), nullable=False)  # mass/volume/count/other
    base_unit: Mapped[str] = mapped_column(String(20), nullable=False)
    to_base_factor: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)


class Ingredient(Base):
    """Catalog ingredient."""

    __tablename__ = "ingredients"

    ingredient_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    base_unit: Mapped[str | None] = mapped_column(String(20), nullable=True)
    default_days_until_expiry: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    allowed_units: Mapped[list["IngredientAllowedUnit"]] = relationship(
        "IngredientAllowedUnit", back_populates="ingredient", cascade="all, delete-orphan"
    )
    conversions: Mapped[list["IngredientUnitConversion"]] = relationship(
        "IngredientUnitConversion", back_populates="ingredient", cascade="all, delete-orphan"
    )


class IngredientAllowedUnit(Base):
    """Unit a user may enter for an ingredient besides its base unit."""

    __tablename__ = "ingredient_allowed_units"

    ingredient_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("ingredients.ingredient_id", ondelete="CASCADE"), primary_key=True
    )
    unit_code: Mapped[str] = mapped_column(String(20), primary_key=True)

    ingredient: Mapped["Ingredient"] = relationship("Ingredient", back_populates="allowed_units")


class IngredientUnitConversion(Base):
    """Ingredient-specific conversion: 1 from_unit = factor to_unit."""

    __tablename__ = "ingredient_unit_conversions"

    ingredient_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("ingredients.ingredient_id", ondelete="CASCADE"), primary_key=True
    )
    from_unit: Mapped[str] = mapped_column(String(20), primary_key=True)
    to_unit: Mapped[str] = mapped_column(String(20), primary_key=True)
    factor: Mapped[float] = mapped_column(Float, nullable=False)
    is_approx: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    ingredient: Mapped["Ingredient"] = relationship("Ingredient", back_populates="conversions")


class InventoryItem(Base):
    """A row of a user's inventory, stored as the user entered it."""

    __tablename__ = "inventory"

    inventory_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    ingredient_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("ingredients.ingredient_id"), nullable=False
    )
    input_quantity: Mapped[float] = mapped_column(Float, nullable=False)
    input_unit: Mapped[str | None] = mapped_column(String(20), nullable=True)
    expiration_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        Index("idx_inventory_user_id", "user_id"),
        Index("idx_inventory_user_ingredient", "user_id", "ingredient_id"),
    )


class Recipe(Base):
    """Recipe owned by a user or by the system."""

    __tablename__ = "recipes"

    recipe_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    recipe_name: Mapped[str] = mapped_column(String, nullable=False)
    owner_user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    ingredients: Mapped[list["RecipeIngredient"]] = relationship(
        "RecipeIngredient", back_populates="recipe", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("idx_recipes_owner_user_id", "owner_user_id"),)


class RecipeIngredient(Base):
    """Quantity of one ingredient a recipe requires."""

    __tablename__ = "recipe_ingredients"

    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.recipe_id", ondelete="CASCADE"), primary_key=True
    )
    # Not a foreign key: may reference ingredients removed from the catalog
    ingredient_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    required_quantity: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    required_unit: Mapped[str | None] = mapped_column(String(20), nullable=True)

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="ingredients")
