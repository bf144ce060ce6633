"""
Friend recommendation service.
Ranks other users by weighted similarity to the requester, backfills sparse
results and degrades to generic suggestions when the pipeline fails.
"""
from typing import List, Optional, Set

from bson import ObjectId
from bson.errors import InvalidId

from buddy_recommender.config.settings import Settings
from buddy_recommender.models.base import to_object_id
from buddy_recommender.models.friend_request_models import BLOCKING_STATUSES
from buddy_recommender.models.recommendation_models import RecommendationOutcome, RecommendationResult
from buddy_recommender.models.user_models import UserProfile
from buddy_recommender.services.base import NotFoundError, StorageServiceError
from buddy_recommender.services.friend_request_repository import FriendRequestRepository
from buddy_recommender.services.scoring import (
    DEFAULT_CATEGORY,
    categorize,
    mutual_friends_count,
    similarity_score,
)
from buddy_recommender.services.storage_service import SignedUrlService, is_absolute_url
from buddy_recommender.services.user_repository import UserRepository
from buddy_recommender.utils.logger import get_logger

logger = get_logger(__name__)

# Score given to suggestions that were not ranked.
UNRANKED_SCORE = 1.0


def greeting_bio(user: UserProfile) -> str:
    return f"Hello! I'm {user.username or 'a new user'} looking to connect with others."


class RecommendationService:
    """Builds the "people you may know" list for a user."""

    def __init__(
        self,
        settings: Settings,
        *,
        user_repository: UserRepository,
        friend_request_repository: FriendRequestRepository,
        signed_url_service: SignedUrlService,
    ) -> None:
        self._settings = settings
        self._users = user_repository
        self._friend_requests = friend_request_repository
        self._signed_urls = signed_url_service
        logger.info("RecommendationService initialized")

    async def get_recommendations(self, user_id: str) -> List[RecommendationResult]:
        """
        Recommend users for ``user_id`` to befriend.

        Args:
            user_id: Requesting user identifier

        Returns:
            Recommendations ordered by descending similarity score

        Raises:
            NotFoundError: If the user doesn't exist or the ID is invalid
        """
        outcome = await self.rank(user_id)
        return outcome.results

    async def rank(self, user_id: str) -> RecommendationOutcome:
        """
        Same as ``get_recommendations`` but reports whether the fallback path was taken.

        Raises:
            NotFoundError: If the user doesn't exist or the ID is invalid
        """
        object_id = self._parse_user_id(user_id)

        # Grows as the pipeline learns more, so the fallback can reuse whatever was collected.
        excluded_ids: Set[str] = {str(object_id)}

        try:
            current_user = await self._users.find_user_by_id(object_id)
        except Exception as exc:
            logger.error(f"Failed to load user {user_id} for recommendations: {exc}", exc_info=True)
            return await self._fallback(user_id, excluded_ids)

        if current_user is None:
            logger.warning(f"User not found: {user_id}")
            raise NotFoundError(f"User with id {user_id} not found")

        try:
            results = await self._rank_candidates(object_id, current_user, excluded_ids)
        except Exception as exc:
            logger.error(f"Error ranking recommendations for user {user_id}: {exc}", exc_info=True)
            return await self._fallback(user_id, excluded_ids)

        await self._resolve_profile_images(results)
        return RecommendationOutcome(kind="ranked", results=results)

    def _parse_user_id(self, user_id: str) -> ObjectId:
        try:
            return to_object_id(user_id)
        except InvalidId as exc:
            logger.warning(f"Invalid user ID format: {user_id}")
            raise NotFoundError(f"User with id {user_id} not found") from exc

    async def _rank_candidates(
        self, object_id: ObjectId, current_user: UserProfile, excluded_ids: Set[str]
    ) -> List[RecommendationResult]:
        excluded_ids.update(current_user.friend_ids)

        requests = await self._friend_requests.find_requests_involving(object_id, BLOCKING_STATUSES)
        for request in requests:
            excluded_ids.update(request.party_ids())
        logger.debug(f"Excluding {len(excluded_ids)} users for {object_id}")

        candidates = await self._users.find_users_excluding(
            excluded_ids,
            active_only=True,
            exclude_admins=True,
            limit=self._settings.CANDIDATE_POOL_LIMIT,
        )

        scored = [
            (similarity_score(current_user, candidate), candidate)
            for candidate in candidates
            if self._is_eligible(candidate, excluded_ids)
        ]
        scored.sort(key=lambda item: item[0], reverse=True)

        results = [
            self._to_ranked_result(current_user, candidate, score)
            for score, candidate in scored[: self._settings.MAX_RECOMMENDATIONS]
        ]
        logger.info(f"Ranked {len(results)} friend recommendations for user {object_id}")

        if len(results) < self._settings.MIN_RECOMMENDATIONS:
            results.extend(await self._backfill(results, excluded_ids))

        return results

    async def _backfill(
        self, ranked: List[RecommendationResult], excluded_ids: Set[str]
    ) -> List[RecommendationResult]:
        missing = self._settings.MIN_RECOMMENDATIONS - len(ranked)
        logger.info(f"Adding up to {missing} unranked users to reach minimum recommendations. Current: {len(ranked)}")

        already_selected = excluded_ids | {result.id for result in ranked}
        extra_users = await self._users.find_users_excluding(
            already_selected,
            active_only=True,
            exclude_admins=True,
            limit=missing,
        )
        return [
            self._to_unranked_result(user)
            for user in extra_users
            if self._is_eligible(user, already_selected)
        ][:missing]

    async def _fallback(self, user_id: str, excluded_ids: Set[str]) -> RecommendationOutcome:
        logger.info(f"Falling back to basic recommendations for user {user_id}")
        try:
            users = await self._users.find_users_excluding(
                excluded_ids,
                active_only=True,
                exclude_admins=True,
                limit=self._settings.FALLBACK_RECOMMENDATIONS,
            )
        except Exception as exc:
            logger.error(f"Error in fallback recommendations for user {user_id}: {exc}", exc_info=True)
            return RecommendationOutcome(kind="fallback", results=[])

        results = [
            self._to_unranked_result(user)
            for user in users
            if self._is_eligible(user, excluded_ids)
        ][: self._settings.FALLBACK_RECOMMENDATIONS]
        await self._resolve_profile_images(results)
        return RecommendationOutcome(kind="fallback", results=results)

    @staticmethod
    def _is_eligible(user: UserProfile, excluded_ids: Set[str]) -> bool:
        # Mirrors the query filters
        return user.id not in excluded_ids and user.is_active and not user.is_admin

    @staticmethod
    def _to_ranked_result(current_user: UserProfile, candidate: UserProfile, score: float) -> RecommendationResult:
        return RecommendationResult(
            id=candidate.id,
            name=candidate.display_name,
            email=candidate.email,
            username=candidate.username,
            profile_image=candidate.profile_image,
            interests=candidate.interest_list,
            mutual_friends=mutual_friends_count(current_user, candidate),
            similarity_score=score,
            bio=candidate.bio or "",
            category=categorize(candidate.interests),
            active_status=candidate.active_status,
        )

    @staticmethod
    def _to_unranked_result(user: UserProfile) -> RecommendationResult:
        return RecommendationResult(
            id=user.id,
            name=user.display_name,
            email=user.email,
            username=user.username,
            profile_image=user.profile_image,
            interests=user.interest_list,
            mutual_friends=0,
            similarity_score=UNRANKED_SCORE,
            bio=user.bio or greeting_bio(user),
            category=DEFAULT_CATEGORY,
            active_status=user.active_status,
        )

    async def _resolve_profile_images(self, results: List[RecommendationResult]) -> None:
        for result in results:
            result.profile_image = await self._resolve_image(result.profile_image)

    async def _resolve_image(self, image: Optional[str]) -> Optional[str]:
        if not image or is_absolute_url(image):
            return image
        try:
            return await self._signed_urls.resolve(image)
        except StorageServiceError as exc:
            logger.warning(f"Failed to generate signed URL for profile image {image}: {exc}")
        except Exception as exc:
            logger.warning(f"Unexpected error signing profile image {image}: {exc}", exc_info=True)
        return None
