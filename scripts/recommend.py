#!/usr/bin/env python
"""
Print recipe recommendations for a user as JSON.

Run with: python scripts/recommend.py USER_ID [--days N] [--today YYYY-MM-DD]
"""

import argparse
import os
import sys
from datetime import date

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from nextmeal.config import RecommendationConfig, get_settings
from nextmeal.database import SessionLocal
from nextmeal.logging_config import configure_logging, get_logger
from nextmeal.recommend import RecommendationEngine
from nextmeal.repository import SqlCatalogSource, SqlInventorySource, SqlRecipeSource

settings = get_settings()
configure_logging(log_level=settings.log_level)
logger = get_logger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Recommend recipes from a user's inventory")
    parser.add_argument("user_id", type=str, help="User to recommend for")
    parser.add_argument(
        "--days",
        "-d",
        type=int,
        default=settings.recommendation_expiration_reference_days,
        help="Expiration reference window in days",
    )
    parser.add_argument("--today", type=date.fromisoformat, help="Reference date (YYYY-MM-DD)")
    args = parser.parse_args()

    try:
        config = RecommendationConfig(expiration_reference_days=args.days, today=args.today)
    except ValueError as e:
        parser.error(str(e))

    with SessionLocal() as session:
        catalog = SqlCatalogSource(session)
        engine = RecommendationEngine(
            catalog,
            SqlInventorySource(session, catalog),
            SqlRecipeSource(session),
        )
        response = engine.recommend(args.user_id, config)

    print(response.model_dump_json(by_alias=True, indent=2))


if __name__ == "__main__":
    main()
