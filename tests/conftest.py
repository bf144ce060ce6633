import copy

import pytest
from bson import ObjectId

from buddy_recommender.config.settings import Settings
from buddy_recommender.services import (
    FriendRequestRepository,
    RecommendationService,
    UserRepository,
)
from buddy_recommender.services.base import StorageServiceError

_MISSING = object()


def _matches(doc: dict, query: dict) -> bool:
    for key, condition in query.items():
        if key == "$or":
            if not any(_matches(doc, sub) for sub in condition):
                return False
            continue

        value = doc.get(key, _MISSING)
        if isinstance(condition, dict) and condition and all(op.startswith("$") for op in condition):
            for op, arg in condition.items():
                if op == "$ne" and value == arg:
                    return False
                if op == "$in" and value not in arg:
                    return False
                if op == "$nin" and value in arg:
                    return False
                if op not in {"$ne", "$in", "$nin"}:
                    raise NotImplementedError(op)
        elif value != condition:
            return False
    return True


class FakeCursor:
    def __init__(self, docs: list[dict]):
        self._docs = docs
        self._limit = 0

    def limit(self, count: int) -> "FakeCursor":
        self._limit = count
        return self

    async def to_list(self, length: int | None = None) -> list[dict]:
        docs = self._docs
        if self._limit:
            docs = docs[: self._limit]
        if length:
            docs = docs[:length]
        return [copy.deepcopy(doc) for doc in docs]


class FakeCollection:
    """Just enough of the motor collection API for the repositories."""

    def __init__(self, docs: list[dict] | None = None):
        self.docs: list[dict] = list(docs or [])
        self.queries: list[dict] = []

    def insert(self, doc: dict) -> dict:
        self.docs.append(doc)
        return doc

    def find(self, query: dict | None = None, projection: dict | None = None) -> FakeCursor:
        query = query or {}
        self.queries.append(query)
        return FakeCursor([doc for doc in self.docs if _matches(doc, query)])

    async def find_one(self, query: dict, projection: dict | None = None) -> dict | None:
        self.queries.append(query)
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None


class FakeSignedUrls:
    """Signs keys as fake S3 URLs; keys starting with "broken" fail."""

    def __init__(self):
        self.calls: list[str] = []

    async def resolve(self, storage_key: str) -> str:
        self.calls.append(storage_key)
        if storage_key.startswith("broken"):
            raise StorageServiceError(f"cannot sign {storage_key}")
        return f"https://bucket.s3.amazonaws.com/{storage_key}?X-Amz-Signature=test"


def make_user(**fields) -> dict:
    doc = {
        "_id": ObjectId(),
        "username": None,
        "email": None,
        "interests": [],
        "goals": [],
        "friends": [],
        "bio": "",
        "role": "user",
        "active": True,
    }
    doc.update(fields)
    return doc


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("MONGO_URI", "mongodb://localhost:27017")
    monkeypatch.setenv("DATABASE_NAME", "accountability_buddy_test")
    for name in (
        "USERS_COLLECTION",
        "FRIEND_REQUESTS_COLLECTION",
        "S3_BUCKET",
        "MAX_RECOMMENDATIONS",
        "MIN_RECOMMENDATIONS",
        "FALLBACK_RECOMMENDATIONS",
        "CANDIDATE_POOL_LIMIT",
        "SIGNED_URL_EXPIRES_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def settings(env):
    return Settings()


@pytest.fixture
def users():
    return FakeCollection()


@pytest.fixture
def friend_requests():
    return FakeCollection()


@pytest.fixture
def signed_urls():
    return FakeSignedUrls()


@pytest.fixture
def build_service(settings, users, friend_requests, signed_urls):
    def _build(active_settings=None):
        return RecommendationService(
            active_settings or settings,
            user_repository=UserRepository(collection=users),
            friend_request_repository=FriendRequestRepository(collection=friend_requests),
            signed_url_service=signed_urls,
        )

    return _build
