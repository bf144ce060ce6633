"""
Weighted similarity scoring between two users.

Every function here is pure: it takes normalised ``UserProfile`` records and
returns numbers or labels, so ranking can be tested without a database.
"""
from typing import AbstractSet, Iterable, Tuple

from buddy_recommender.models.user_models import UserProfile

INTEREST_WEIGHT = 40
GOAL_CATEGORY_WEIGHT = 30
LOCATION_WEIGHT = 20
MUTUAL_FRIENDS_WEIGHT = 10

# Mutual friends beyond this count do not raise the score further.
MUTUAL_FRIENDS_CAP = 10

SAME_CITY = 1.0
SAME_COUNTRY = 0.5

# Checked in order; the first category whose keywords intersect the interests wins.
CATEGORY_KEYWORDS: Tuple[Tuple[str, frozenset], ...] = (
    ("fitness", frozenset({"Fitness", "Running", "Yoga", "Swimming", "Cycling"})),
    ("study", frozenset({"Programming", "Study", "Learning", "Reading", "Education"})),
    ("career", frozenset({"Business", "Career", "Leadership", "Networking"})),
)
DEFAULT_CATEGORY = "general"


def jaccard(left: AbstractSet[str], right: AbstractSet[str]) -> float:
    """Intersection over union, 0 when either side is empty."""
    if not left or not right:
        return 0.0
    return len(left & right) / max(len(left | right), 1)


def interest_similarity(current: UserProfile, candidate: UserProfile) -> float:
    return jaccard(current.interests, candidate.interests)


def goal_category_similarity(current: UserProfile, candidate: UserProfile) -> float:
    return jaccard(current.goal_categories, candidate.goal_categories)


def location_proximity(current: UserProfile, candidate: UserProfile) -> float:
    if current.city and candidate.city and current.city == candidate.city:
        return SAME_CITY
    if current.country and candidate.country and current.country == candidate.country:
        return SAME_COUNTRY
    return 0.0


def mutual_friends_count(current: UserProfile, candidate: UserProfile) -> int:
    return len(current.friend_ids & candidate.friend_ids)


def mutual_friends_boost(mutual_count: int) -> float:
    return min(mutual_count, MUTUAL_FRIENDS_CAP) / MUTUAL_FRIENDS_CAP


def similarity_score(current: UserProfile, candidate: UserProfile) -> float:
    """
    Score a candidate against the current user on a 0-100 scale.

    Args:
        current: The user asking for recommendations
        candidate: The user being evaluated

    Returns:
        Weighted score rounded to one decimal place
    """
    total = (
        interest_similarity(current, candidate) * INTEREST_WEIGHT
        + goal_category_similarity(current, candidate) * GOAL_CATEGORY_WEIGHT
        + location_proximity(current, candidate) * LOCATION_WEIGHT
        + mutual_friends_boost(mutual_friends_count(current, candidate)) * MUTUAL_FRIENDS_WEIGHT
    )
    return round(min(max(total, 0.0), 100.0), 1)


def categorize(interests: Iterable[str]) -> str:
    interest_set = set(interests)
    for category, keywords in CATEGORY_KEYWORDS:
        if interest_set & keywords:
            return category
    return DEFAULT_CATEGORY
