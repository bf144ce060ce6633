"""
Read access to the users collection.
Normalises raw documents into UserProfile records for the ranker.
"""
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import ValidationError

from buddy_recommender.models.base import to_object_id
from buddy_recommender.models.user_models import USER_PROJECTION, UserProfile
from buddy_recommender.utils.logger import get_logger

logger = get_logger(__name__)

# A user is active unless either legacy flag is explicitly false.
ACTIVE_FILTER = {"isActive": {"$ne": False}, "active": {"$ne": False}}
NON_ADMIN_FILTER = {"role": {"$ne": "admin"}}


class UserRepository:
    """Queries over user documents."""

    def __init__(self, *, collection):
        self._collection = collection

    async def find_user_by_id(self, user_id: ObjectId) -> Optional[UserProfile]:
        """
        Look up a single user.

        Args:
            user_id: User ObjectId

        Returns:
            The normalised profile, or None when no document matches
        """
        doc = await self._collection.find_one({"_id": user_id}, USER_PROJECTION)
        if not doc:
            return None
        return UserProfile.from_document(doc)

    async def find_users_excluding(
        self,
        excluded_ids: Iterable[Any],
        *,
        active_only: bool = True,
        exclude_admins: bool = True,
        limit: int = 0,
    ) -> List[UserProfile]:
        """
        Fetch users whose ids are not in ``excluded_ids``.

        Args:
            excluded_ids: Ids (ObjectId or hex string) to leave out
            active_only: Drop users flagged inactive under either legacy field
            exclude_admins: Drop users whose role is "admin"
            limit: Maximum number of users to return, 0 for no limit

        Returns:
            List of normalised profiles
        """
        query = self._build_exclusion_query(excluded_ids, active_only=active_only, exclude_admins=exclude_admins)

        cursor = self._collection.find(query, USER_PROJECTION)
        if limit > 0:
            cursor = cursor.limit(limit)
        docs = await cursor.to_list(length=limit if limit > 0 else None)

        logger.debug(f"Fetched {len(docs)} users (limit={limit or 'none'})")
        return self._to_profiles(docs)

    @staticmethod
    def _to_profiles(docs: List[Dict[str, Any]]) -> List[UserProfile]:
        profiles = []
        for doc in docs:
            try:
                profiles.append(UserProfile.from_document(doc))
            except (ValidationError, TypeError) as exc:
                logger.warning(f"Skipping malformed user document {doc.get('_id')}: {exc}")
        return profiles

    @staticmethod
    def _build_exclusion_query(
        excluded_ids: Iterable[Any], *, active_only: bool, exclude_admins: bool
    ) -> Dict[str, Any]:
        object_ids = []
        for raw_id in excluded_ids:
            try:
                object_ids.append(to_object_id(raw_id))
            except InvalidId:
                # Malformed ids cannot match any document
                logger.warning(f"Skipping malformed user id in exclusion set: {raw_id!r}")

        query: Dict[str, Any] = {"_id": {"$nin": object_ids}}
        if active_only:
            query.update(ACTIVE_FILTER)
        if exclude_admins:
            query.update(NON_ADMIN_FILTER)
        return query
