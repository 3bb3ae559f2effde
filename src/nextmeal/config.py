"""Application configuration using pydantic-settings."""

from dataclasses import dataclass
from datetime import date
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_EXPIRATION_REFERENCE_DAYS = 3
DEFAULT_DAYS_UNTIL_EXPIRY = 7


@dataclass(frozen=True)
class RecommendationConfig:
    """Per-call configuration for the recommendation engine.

    Attributes:
        expiration_reference_days: Reference window (h) in days. Ingredients expiring
            within this window get a non-zero urgency score.
        today: Reference date for days-until-expiry. None means the current local date.
    """

    expiration_reference_days: int = DEFAULT_EXPIRATION_REFERENCE_DAYS
    today: date | None = None

    def __post_init__(self) -> None:
        if self.expiration_reference_days < 0:
            raise ValueError(
                f"expiration_reference_days must be >= 0, got {self.expiration_reference_days}"
            )

    def reference_date(self) -> date:
        """Get the date expiry distances are measured from."""
        return self.today or date.today()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite:///./nextmeal.db"

    # Recommendation engine
    recommendation_expiration_reference_days: int = DEFAULT_EXPIRATION_REFERENCE_DAYS

    # Inventory write path
    default_days_until_expiry: int = DEFAULT_DAYS_UNTIL_EXPIRY

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    def recommendation_config(self, today: date | None = None) -> RecommendationConfig:
        """Build the engine configuration from the loaded settings."""
        return RecommendationConfig(
            expiration_reference_days=self.recommendation_expiration_reference_days,
            today=today,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
