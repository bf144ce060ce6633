"""
Run the friend recommendation pipeline for one user from the command line.
Useful for checking scores against real data without going through the API.
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from motor.motor_asyncio import AsyncIOMotorClient

from buddy_recommender.config.settings import Settings
from buddy_recommender.services import (
    FriendRequestRepository,
    RecommendationService,
    SignedUrlService,
    UserRepository,
)
from buddy_recommender.services.base import NotFoundError
from buddy_recommender.utils.logger import setup_logger

logger = setup_logger(__name__, level="INFO")


async def preview_recommendations(user_id: str, *, as_json: bool = False) -> int:
    settings = Settings()
    client = AsyncIOMotorClient(settings.MONGO_URI)
    db = client[settings.DATABASE_NAME]

    service = RecommendationService(
        settings,
        user_repository=UserRepository(collection=db[settings.USERS_COLLECTION]),
        friend_request_repository=FriendRequestRepository(collection=db[settings.FRIEND_REQUESTS_COLLECTION]),
        signed_url_service=SignedUrlService(settings),
    )

    try:
        outcome = await service.rank(user_id)
    except NotFoundError as exc:
        logger.error(f"✗ {exc}")
        return 1
    finally:
        client.close()

    if as_json:
        payload = [result.model_dump(by_alias=True) for result in outcome.results]
        print(json.dumps(payload, indent=2))
        return 0

    logger.info(f"{len(outcome.results)} recommendations for {user_id} ({outcome.kind})")
    for i, result in enumerate(outcome.results, 1):
        logger.info(
            f"{i:>2}. {result.name or result.id}  score={result.similarity_score}"
            f"  category={result.category}  mutual={result.mutual_friends}"
        )
    return 0


def main():
    parser = argparse.ArgumentParser(description="Preview friend recommendations for a user")
    parser.add_argument("user_id", help="User ObjectId")
    parser.add_argument("--json", action="store_true", help="Print the raw JSON payload")

    args = parser.parse_args()
    sys.exit(asyncio.run(preview_recommendations(args.user_id, as_json=args.json)))


if __name__ == "__main__":
    main()
