"""Normalised user records read from the users collection."""

from typing import Any, Dict, FrozenSet, Optional

from pydantic import BaseModel, Field

from buddy_recommender.models.base import MODEL_CONFIG

# Fields the ranker needs; keeps candidate scans light.
USER_PROJECTION = {
    "username": 1,
    "email": 1,
    "interests": 1,
    "goals": 1,
    "location": 1,
    "friends": 1,
    "bio": 1,
    "active": 1,
    "isActive": 1,
    "role": 1,
    "profileImage": 1,
    "profilePicture": 1,
    "activeStatus": 1,
}


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


class UserProfile(BaseModel):
    """A user as seen by the recommendation pipeline.

    Raw documents carry two legacy active flags (``active`` and ``isActive``)
    and two image fields (``profileImage`` and ``profilePicture``); both pairs
    collapse into a single canonical field here.
    """

    model_config = MODEL_CONFIG

    id: str
    username: Optional[str] = None
    email: Optional[str] = None
    interests: FrozenSet[str] = Field(default_factory=frozenset)
    interest_list: list[str] = Field(default_factory=list)
    goal_categories: FrozenSet[str] = Field(default_factory=frozenset)
    city: Optional[str] = None
    country: Optional[str] = None
    friend_ids: FrozenSet[str] = Field(default_factory=frozenset)
    bio: Optional[str] = None
    is_active: bool = True
    role: str = "user"
    profile_image: Optional[str] = None
    active_status: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "UserProfile":
        interests = [item for item in (doc.get("interests") or []) if isinstance(item, str)]

        # Goals may be embedded documents or bare references; only embedded ones carry a category.
        categories = set()
        for goal in doc.get("goals") or []:
            if isinstance(goal, dict):
                category = _clean(goal.get("category"))
                if category:
                    categories.add(category)

        location = doc.get("location") or {}
        if not isinstance(location, dict):
            location = {}

        return cls(
            id=str(doc["_id"]),
            username=_clean(doc.get("username")),
            email=_clean(doc.get("email")),
            interests=frozenset(interests),
            interest_list=interests,
            goal_categories=frozenset(categories),
            city=_clean(location.get("city")),
            country=_clean(location.get("country")),
            friend_ids=frozenset(str(friend) for friend in (doc.get("friends") or [])),
            bio=_text(doc.get("bio")) or None,
            is_active=doc.get("isActive") is not False and doc.get("active") is not False,
            role=_text(doc.get("role")) or "user",
            profile_image=_clean(doc.get("profileImage")) or _clean(doc.get("profilePicture")),
            active_status=_text(doc.get("activeStatus")),
        )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def display_name(self) -> Optional[str]:
        return self.username or self.email
