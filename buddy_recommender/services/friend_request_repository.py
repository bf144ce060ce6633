"""Read access to the friend request collection."""
from typing import Iterable, List

from bson import ObjectId

from buddy_recommender.models.friend_request_models import FriendRequest, FriendRequestStatus
from buddy_recommender.utils.logger import get_logger

logger = get_logger(__name__)


class FriendRequestRepository:
    def __init__(self, *, collection):
        self._collection = collection

    async def find_requests_involving(
        self, user_id: ObjectId, statuses: Iterable[FriendRequestStatus]
    ) -> List[FriendRequest]:
        """Return requests sent or received by ``user_id`` in any of ``statuses``."""
        query = {
            "$or": [{"sender": user_id}, {"recipient": user_id}],
            "status": {"$in": sorted(FriendRequestStatus(status).value for status in statuses)},
        }
        docs = await self._collection.find(query, {"sender": 1, "recipient": 1, "status": 1}).to_list(length=None)
        logger.debug(f"Found {len(docs)} friend requests involving user {user_id}")
        return [FriendRequest.model_validate(doc) for doc in docs]
