from enum import Enum

from pydantic import BaseModel

from buddy_recommender.models.base import MODEL_CONFIG, PyObjectId


class FriendRequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


# Requests in these states keep both parties out of each other's recommendations.
BLOCKING_STATUSES = frozenset({FriendRequestStatus.PENDING, FriendRequestStatus.ACCEPTED})


class FriendRequest(BaseModel):
    model_config = MODEL_CONFIG

    sender: PyObjectId
    recipient: PyObjectId
    status: FriendRequestStatus = FriendRequestStatus.PENDING

    def party_ids(self) -> tuple[str, str]:
        return str(self.sender), str(self.recipient)
