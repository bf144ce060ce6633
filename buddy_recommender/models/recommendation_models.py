"""Pydantic DTOs for friend recommendations and their response envelope."""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

MODEL_CONFIG = ConfigDict(populate_by_name=True)


class RecommendationResult(BaseModel):
    """A single suggested friend, serialised with the camelCase keys the web client reads."""

    model_config = MODEL_CONFIG

    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None
    profile_image: Optional[str] = Field(None, alias="profileImage")
    interests: List[str] = Field(default_factory=list)
    mutual_friends: int = Field(0, alias="mutualFriends")
    similarity_score: float = Field(0.0, ge=0.0, le=100.0, alias="similarityScore")
    bio: str = ""
    category: str = "general"
    active_status: Optional[str] = Field(None, alias="activeStatus")

    @computed_field(alias="_id")
    @property
    def legacy_id(self) -> str:
        # Older clients key cards on "_id"
        return self.id


class RecommendationOutcome(BaseModel):
    """Tagged result of a ranking call.

    ``ranked`` is the normal path (possibly backfilled); ``fallback`` means the
    pipeline failed and the list holds generic suggestions.
    """

    kind: Literal["ranked", "fallback"]
    results: List[RecommendationResult] = Field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return self.kind == "fallback"


class RecommendationData(BaseModel):
    model_config = MODEL_CONFIG

    recommended_friends: List[RecommendationResult] = Field(default_factory=list, alias="recommendedFriends")
    degraded: bool = False


class RecommendationEnvelope(BaseModel):
    model_config = MODEL_CONFIG

    success: bool = True
    message: str = "Recommendations"
    data: RecommendationData
