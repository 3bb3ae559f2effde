"""Expiry date helpers and expiration notices."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Literal

from nextmeal.config import DEFAULT_DAYS_UNTIL_EXPIRY
from nextmeal.normalize.ingredients import Ingredient
from nextmeal.recommend.inventory import InventoryEntry


def as_date(value: date | datetime) -> date:
    """Truncate a datetime to its calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_until(expiry: date | datetime, today: date) -> int:
    """Whole calendar days from today until expiry, negative once expired."""
    return (as_date(expiry) - as_date(today)).days


def resolve_expiry_date(
    provided: date | None,
    ingredient: Ingredient,
    today: date,
    fallback_days: int = DEFAULT_DAYS_UNTIL_EXPIRY,
) -> date:
    """
    Pick the expiry date to store for a new inventory row.

    A user-provided date always wins. Otherwise the ingredient's default shelf
    life is used, then the global fallback.
    """
    if provided is not None:
        return as_date(provided)

    days = ingredient.default_days_until_expiry
    if days is None or days < 0:
        days = fallback_days
    return as_date(today) + timedelta(days=days)


@dataclass(frozen=True)
class ExpirationNotice:
    """A user-facing notice for an inventory row that expires soon."""

    ingredient_id: str
    entry_id: str | None
    days_until_expiry: int
    severity: Literal["safety", "normal"]
    message: str


def expiration_message(ingredient_name: str, days: int) -> str:
    """Build the notice text for an ingredient expiring in `days` days."""
    suffix = "" if days == 1 else "s"
    return f"There is {days} day{suffix} to expire of {ingredient_name} ingredient."


def expiration_notice(
    entry: InventoryEntry,
    ingredient_name: str,
    today: date,
    window_days: int,
) -> ExpirationNotice | None:
    """
    Build a notice for an entry expiring within the window.

    Entries without an expiry date, already expired, or expiring after the
    window get no notice. Expiring today is a safety notice.
    """
    if entry.expiry is None:
        return None

    days = days_until(entry.expiry, today)
    if days < 0 or days > window_days:
        return None

    return ExpirationNotice(
        ingredient_id=entry.ingredient_id,
        entry_id=entry.entry_id,
        days_until_expiry=days,
        severity="safety" if days == 0 else "normal",
        message=expiration_message(ingredient_name, days),
    )
