"""Friend recommendation endpoint."""

from fastapi import APIRouter, Depends, Header, HTTPException

from buddy_recommender.config.settings import Settings
from buddy_recommender.db.client import get_friend_requests_collection, get_users_collection
from buddy_recommender.models.recommendation_models import RecommendationData, RecommendationEnvelope
from buddy_recommender.services import (
    FriendRequestRepository,
    RecommendationService,
    SignedUrlService,
    UserRepository,
)
from buddy_recommender.services.base import NotFoundError
from buddy_recommender.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/friends", tags=["friends"])


async def get_recommendation_service() -> RecommendationService:
    """Provide a fully wired RecommendationService instance per request."""
    settings = Settings()

    return RecommendationService(
        settings,
        user_repository=UserRepository(collection=get_users_collection(settings)),
        friend_request_repository=FriendRequestRepository(collection=get_friend_requests_collection(settings)),
        signed_url_service=SignedUrlService(settings),
    )


@router.get("/recommendations", response_model=RecommendationEnvelope)
async def get_recommended_friends(
    user_id: str = Header(..., alias="X-User-Id", description="Authenticated user identifier"),
    service: RecommendationService = Depends(get_recommendation_service),
):
    """
    Suggest people for the authenticated user to befriend.

    Results are ranked by shared interests, goal categories, location and
    mutual friends. When ranking fails the list still comes back, filled with
    generic suggestions, and ``degraded`` is set.

    Raises:
        HTTPException: 404 if the user is not found, 500 for other errors
    """
    logger.info(f"Recommendation request: user_id={user_id}")

    try:
        outcome = await service.rank(user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:
        logger.error(f"Recommendation error for user {user_id}: {exc}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from exc

    logger.info(f"Recommendation completed: {len(outcome.results)} results (kind={outcome.kind})")
    return RecommendationEnvelope(
        data=RecommendationData(recommended_friends=outcome.results, degraded=outcome.degraded),
    )
