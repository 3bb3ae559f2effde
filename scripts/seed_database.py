#!/usr/bin/env python
"""
Database seeding script for a local nextmeal database.

It will:

1. Create all tables
2. Store the built-in unit table
3. Create a few catalog ingredients and system recipes (skipped if present)
4. Optionally give a demo user some inventory

Run with: python scripts/seed_database.py [--demo-user USER_ID]

Environment Variables:
    DATABASE_URL: SQLAlchemy connection string (default: sqlite:///./nextmeal.db)
    LOG_LEVEL: Minimum log level
"""

import argparse
import os
import sys
from datetime import date, timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from nextmeal import models
from nextmeal.database import Base, create_db_engine
from nextmeal.logging_config import configure_logging, get_logger
from nextmeal.normalize.units import DEFAULT_UNITS
from nextmeal.repository import SYSTEM_USER_ID, SqlInventorySource

configure_logging(log_level=os.getenv("LOG_LEVEL", "INFO"))
logger = get_logger(__name__)

# name -> (base unit, allowed units, days until expiry, {unit: factor to base})
INGREDIENTS: dict[str, tuple[str, list[str], int | None, dict[str, float]]] = {
    "flour": ("g", ["kg", "cup"], 180, {"cup": 125.0}),
    "sugar": ("g", ["kg", "tbsp", "tsp"], 365, {"tbsp": 12.5, "tsp": 4.2}),
    "butter": ("g", ["kg", "tbsp"], 30, {"tbsp": 14.2}),
    "egg": ("pcs", [], 21, {}),
    "milk": ("ml", ["l", "dl", "cup"], 5, {}),
    "cheese": ("g", ["kg"], 14, {}),
    "tomato": ("pcs", ["g", "kg"], 7, {"g": 0.008, "kg": 8.0}),
    "salt": ("g", ["tsp", "to_taste"], None, {"tsp": 6.0}),
}

# name -> [(ingredient, quantity, unit)]
RECIPES: dict[str, list[tuple[str, float, str]]] = {
    "Pancakes": [("flour", 200, "g"), ("egg", 2, "pcs"), ("milk", 3, "dl"), ("butter", 1, "tbsp")],
    "Omelette": [("egg", 3, "pcs"), ("cheese", 50, "g"), ("salt", 1, "to_taste")],
    "Tomato salad": [("tomato", 4, "pcs"), ("salt", 1, "to_taste")],
    "Shortbread": [("flour", 300, "g"), ("butter", 200, "g"), ("sugar", 100, "g")],
}

DEMO_INVENTORY: list[tuple[str, float, str, int | None]] = [
    ("egg", 6, "pcs", 2),
    ("milk", 1, "l", 1),
    ("flour", 1, "kg", None),
    ("butter", 250, "g", None),
    ("tomato", 500, "g", 4),
]


def init_database(engine) -> None:
    """Initialize database tables."""
    logger.info("Initializing database tables...")
    Base.metadata.create_all(engine)
    logger.info("Database tables initialized")


def seed_units(session: Session) -> int:
    """Store the built-in unit table, keeping rows that already exist."""
    existing = set(session.scalars(select(models.Unit.unit_code)))
    added = 0

    for unit in DEFAULT_UNITS:
        if unit.code in existing:
            continue
        session.add(
            models.Unit(
                unit_code=unit.code,
                unit_kind=unit.kind.value,
                base_unit=unit.base_unit,
                to_base_factor=unit.to_base_factor,
            )
        )
        added += 1

    session.commit()
    logger.info(f"Stored {added} units ({len(existing)} already present)")
    return added


def seed_catalog(session: Session) -> dict[str, str]:
    """Create catalog ingredients and system recipes. Returns ingredient ids by name."""
    ids = {row.name: row.ingredient_id for row in session.scalars(select(models.Ingredient))}

    for name, (base_unit, allowed, days, conversions) in INGREDIENTS.items():
        if name in ids:
            continue
        row = models.Ingredient(name=name, base_unit=base_unit, default_days_until_expiry=days)
        row.allowed_units.extend(models.IngredientAllowedUnit(unit_code=u) for u in allowed)
        row.conversions.extend(
            models.IngredientUnitConversion(from_unit=unit, to_unit=base_unit, factor=factor)
            for unit, factor in conversions.items()
        )
        session.add(row)
        session.flush()
        ids[name] = row.ingredient_id

    existing_recipes = set(
        session.scalars(
            select(models.Recipe.recipe_name).where(models.Recipe.owner_user_id == SYSTEM_USER_ID)
        )
    )
    for recipe_name, requirements in RECIPES.items():
        if recipe_name in existing_recipes:
            continue
        recipe = models.Recipe(recipe_name=recipe_name, owner_user_id=SYSTEM_USER_ID)
        recipe.ingredients.extend(
            models.RecipeIngredient(
                ingredient_id=ids[ingredient], required_quantity=quantity, required_unit=unit
            )
            for ingredient, quantity, unit in requirements
        )
        session.add(recipe)

    session.commit()
    logger.info(f"Catalog has {len(ids)} ingredients and {len(RECIPES)} system recipes")
    return ids


def seed_demo_inventory(session: Session, user_id: str, ids: dict[str, str]) -> int:
    """Give a user some inventory unless they already have any."""
    count = session.scalar(
        select(func.count()).select_from(models.InventoryItem).where(
            models.InventoryItem.user_id == user_id
        )
    )
    if count:
        logger.info(f"User {user_id} already has {count} inventory rows, skipping")
        return 0

    source = SqlInventorySource(session)
    today = date.today()
    for name, quantity, unit, days in DEMO_INVENTORY:
        expiry = today + timedelta(days=days) if days is not None else None
        source.add_item(user_id, ids[name], quantity, unit, expiry_date=expiry, today=today)

    return len(DEMO_INVENTORY)


def main():
    """Entry point for the seed script."""
    parser = argparse.ArgumentParser(description="Seed the nextmeal database")
    parser.add_argument("--database-url", type=str, help="Override DATABASE_URL")
    parser.add_argument("--demo-user", type=str, help="Give this user demo inventory")
    args = parser.parse_args()

    try:
        engine = create_db_engine(args.database_url)
        init_database(engine)

        with Session(engine) as session:
            seed_units(session)
            ids = seed_catalog(session)
            if args.demo_user:
                added = seed_demo_inventory(session, args.demo_user, ids)
                logger.info(f"Added {added} inventory rows for {args.demo_user}")

        logger.info("Seeding completed")
        sys.exit(0)

    except KeyboardInterrupt:
        logger.info("Seeding interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception(f"Seeding failed with error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
