"""
Script to create the MongoDB indexes used by the recommendation queries.
Friend request lookups filter on (sender|recipient, status); candidate scans
filter on role and the two legacy active flags.
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING
from pymongo.errors import OperationFailure

from buddy_recommender.config.settings import Settings
from buddy_recommender.utils.logger import setup_logger

logger = setup_logger(__name__, level="INFO")


def index_plan(settings: Settings) -> dict:
    """Collection name -> list of (index name, key spec)."""
    return {
        settings.FRIEND_REQUESTS_COLLECTION: [
            ("sender_status", [("sender", ASCENDING), ("status", ASCENDING)]),
            ("recipient_status", [("recipient", ASCENDING), ("status", ASCENDING)]),
        ],
        settings.USERS_COLLECTION: [
            ("role", [("role", ASCENDING)]),
            ("active", [("active", ASCENDING)]),
            ("isActive", [("isActive", ASCENDING)]),
        ],
    }


async def create_indexes():
    logger.info("=" * 60)
    logger.info("Recommendation index creation")
    logger.info("=" * 60)

    settings = Settings()
    client = AsyncIOMotorClient(settings.MONGO_URI)
    db = client[settings.DATABASE_NAME]

    try:
        for collection_name, indexes in index_plan(settings).items():
            collection = db[collection_name]
            for name, keys in indexes:
                try:
                    created = await collection.create_index(keys, name=name)
                    logger.info(f"✓ {collection_name}.{created}")
                except OperationFailure as exc:
                    if "already exists" in str(exc).lower():
                        logger.info(f"✓ {collection_name}.{name} already exists with different options, skipping")
                    else:
                        raise
    except OperationFailure as exc:
        logger.error(f"✗ Failed to create indexes: {exc}")
        raise
    finally:
        client.close()
        logger.info("=" * 60)


async def check_indexes():
    """Log which planned indexes are present."""
    settings = Settings()
    client = AsyncIOMotorClient(settings.MONGO_URI)
    db = client[settings.DATABASE_NAME]

    try:
        for collection_name, indexes in index_plan(settings).items():
            existing = await db[collection_name].index_information()
            for name, _ in indexes:
                marker = "✓" if name in existing else "✗"
                logger.info(f"{marker} {collection_name}.{name}")
    finally:
        client.close()


def main():
    parser = argparse.ArgumentParser(
        description="Create or check the indexes used by friend recommendations"
    )
    parser.add_argument(
        "--check-only",
        action="store_true",
        help="Only report which indexes exist, don't create",
    )

    args = parser.parse_args()

    if args.check_only:
        asyncio.run(check_indexes())
    else:
        asyncio.run(create_indexes())


if __name__ == "__main__":
    main()
