"""Pytest configuration and shared fixtures."""

from datetime import date, datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from nextmeal import models
from nextmeal.database import Base
from nextmeal.normalize.ingredients import Ingredient, QuantityConverter
from nextmeal.normalize.units import UnitCatalog
from nextmeal.recommend.engine import InMemoryCatalog
from nextmeal.recommend.inventory import InventoryAggregator

# =============================================================================
# Catalog Fixtures
# =============================================================================

TODAY = date(2026, 3, 10)


@pytest.fixture
def today():
    """Fixed reference date for expiry calculations."""
    return TODAY


@pytest.fixture
def unit_catalog():
    """Default unit catalog."""
    return UnitCatalog()


@pytest.fixture
def flour():
    return Ingredient(id="ing-flour", name="flour", base_unit="g", allowed_units=frozenset({"kg"}))


@pytest.fixture
def egg():
    return Ingredient(
        id="ing-egg",
        name="egg",
        base_unit="pcs",
        default_days_until_expiry=21,
    )


@pytest.fixture
def milk():
    return Ingredient(
        id="ing-milk",
        name="milk",
        base_unit="ml",
        allowed_units=frozenset({"l", "cup"}),
        default_days_until_expiry=5,
    )


@pytest.fixture
def butter():
    """Butter counted in grams, with a per-ingredient tablespoon weight."""
    return Ingredient(
        id="ing-butter",
        name="butter",
        base_unit="g",
        allowed_units=frozenset({"tbsp"}),
        conversions={"tbsp": 14.2},
    )


@pytest.fixture
def sample_ingredients(flour, egg, milk, butter):
    return [flour, egg, milk, butter]


@pytest.fixture
def catalog(sample_ingredients):
    """In-memory catalog with the sample ingredients and default units."""
    return InMemoryCatalog(ingredients=sample_ingredients)


@pytest.fixture
def converter(catalog):
    return QuantityConverter(unit_lookup=catalog.unit)


@pytest.fixture
def aggregator(converter, catalog):
    return InventoryAggregator(converter, catalog.ingredient)


# =============================================================================
# Test Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def test_db_engine():
    """Create an in-memory SQLite engine with all tables."""
    engine = create_engine("sqlite://", echo=False)
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_session(test_db_engine):
    """Create a test database session."""
    with Session(test_db_engine) as session:
        yield session


@pytest.fixture
def seeded_session(test_session):
    """Session with a small catalog, two recipes and one user's inventory."""
    test_session.add_all(
        [
            models.Unit(unit_code="g", unit_kind="mass", base_unit="g", to_base_factor=1.0),
            models.Unit(unit_code="kg", unit_kind="mass", base_unit="g", to_base_factor=1000.0),
            models.Unit(unit_code="pcs", unit_kind="count", base_unit="pcs", to_base_factor=1.0),
            models.Unit(unit_code="ml", unit_kind="volume", base_unit="ml", to_base_factor=1.0),
            models.Unit(unit_code="l", unit_kind="volume", base_unit="ml", to_base_factor=1000.0),
        ]
    )

    flour = models.Ingredient(ingredient_id="ing-flour", name="flour", base_unit="g")
    flour.allowed_units.append(models.IngredientAllowedUnit(unit_code="kg"))
    egg = models.Ingredient(
        ingredient_id="ing-egg", name="egg", base_unit="pcs", default_days_until_expiry=21
    )
    egg.conversions.append(
        models.IngredientUnitConversion(from_unit="pcs", to_unit="g", factor=50.0)
    )
    milk = models.Ingredient(ingredient_id="ing-milk", name="milk", base_unit="ml")
    milk.allowed_units.append(models.IngredientAllowedUnit(unit_code="l"))
    test_session.add_all([flour, egg, milk])

    pancakes = models.Recipe(
        recipe_id="rec-pancakes",
        recipe_name="Pancakes",
        owner_user_id="00000000-0000-0000-0000-000000000000",
        created_at=datetime(2026, 1, 1, 12, 0),
    )
    pancakes.ingredients.extend(
        [
            models.RecipeIngredient(
                ingredient_id="ing-flour", required_quantity=200, required_unit="g"
            ),
            models.RecipeIngredient(
                ingredient_id="ing-egg", required_quantity=2, required_unit="pcs"
            ),
            models.RecipeIngredient(
                ingredient_id="ing-milk", required_quantity=0.3, required_unit="l"
            ),
        ]
    )
    omelette = models.Recipe(
        recipe_id="rec-omelette",
        recipe_name="Omelette",
        owner_user_id="user-1",
        created_at=datetime(2026, 2, 1, 12, 0),
    )
    omelette.ingredients.append(
        models.RecipeIngredient(
            ingredient_id="ing-egg", required_quantity=3, required_unit="pieces"
        )
    )
    private = models.Recipe(
        recipe_id="rec-private",
        recipe_name="Someone else's bread",
        owner_user_id="user-2",
        created_at=datetime(2026, 2, 2, 12, 0),
    )
    private.ingredients.append(
        models.RecipeIngredient(
            ingredient_id="ing-flour", required_quantity=1, required_unit="kg"
        )
    )
    test_session.add_all([pancakes, omelette, private])

    test_session.add_all(
        [
            models.InventoryItem(
                inventory_id="inv-1",
                user_id="user-1",
                ingredient_id="ing-flour",
                input_quantity=0.5,
                input_unit="kg",
                expiration_date=None,
            ),
            models.InventoryItem(
                inventory_id="inv-2",
                user_id="user-1",
                ingredient_id="ing-egg",
                input_quantity=2,
                input_unit="pcs",
                expiration_date=date(2026, 3, 11),
            ),
            models.InventoryItem(
                inventory_id="inv-3",
                user_id="user-1",
                ingredient_id="ing-egg",
                input_quantity=4,
                input_unit="pcs",
                expiration_date=date(2026, 3, 20),
            ),
        ]
    )
    test_session.commit()
    return test_session
