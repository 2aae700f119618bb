"""
Seed Categories Script
Copies the category catalog from config into the categories table so that
posts.category_id foreign keys resolve. Safe to re-run; stale rows are reported,
not deleted, because posts may still reference them.
"""

import sys

from app.config.categories_config import CATEGORIES
from app.database.supabase_client import SupabaseClient
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_categories(supabase: Client) -> int:
    """Upsert every catalog entry by id"""
    logger.info("Seeding categories...")
    created_count = 0
    updated_count = 0

    existing = supabase.table("categories").select("id").execute()
    existing_ids = {row["id"] for row in existing.data} if existing.data else set()

    for category in CATEGORIES:
        try:
            supabase.table("categories").upsert({
                "id": category["id"],
                "name": category["name"],
                "description": category["description"]
            }, on_conflict="id").execute()
            if category["id"] in existing_ids:
                updated_count += 1
                logger.debug(f"Updated category: {category['id']}")
            else:
                created_count += 1
                logger.debug(f"Created category: {category['id']}")
        except Exception as e:
            logger.error(f"Error processing category {category['id']}: {e}")

    stale = existing_ids - {c["id"] for c in CATEGORIES}
    if stale:
        logger.warning(f"Categories in the table but not in config: {sorted(stale)}")

    logger.info(f"Categories seeded: {created_count} created, {updated_count} updated")
    return created_count + updated_count


def main():
    """Main function to seed categories"""
    try:
        supabase = SupabaseClient.get_service_client()
        count = seed_categories(supabase)
        logger.info(f"Seeding completed successfully! {count} categories processed")
    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
