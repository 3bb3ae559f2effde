"""Database configuration and session management."""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from nextmeal.config import get_settings

_settings = get_settings()


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


def create_db_engine(database_url: str | None = None, echo: bool | None = None) -> Engine:
    """Create a synchronous engine, defaulting to the configured database."""
    if echo is None:
        echo = _settings.is_development and _settings.log_level.upper() == "DEBUG"
    return create_engine(database_url or _settings.database_url, echo=echo)


engine = create_db_engine()
SessionLocal = sessionmaker(engine, expire_on_commit=False)
