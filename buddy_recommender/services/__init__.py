"""Service layer exports for the recommendation pipeline and its collaborators."""

from .friend_request_repository import FriendRequestRepository
from .recommendation_service import RecommendationService
from .storage_service import SignedUrlService
from .user_repository import UserRepository
