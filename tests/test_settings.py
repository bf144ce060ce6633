import pytest

from buddy_recommender.config.settings import Settings


def test_defaults(settings):
    assert settings.USERS_COLLECTION == "users"
    assert settings.FRIEND_REQUESTS_COLLECTION == "friendrequests"
    assert settings.MAX_RECOMMENDATIONS == 20
    assert settings.MIN_RECOMMENDATIONS == 5
    assert settings.FALLBACK_RECOMMENDATIONS == 6
    assert settings.CANDIDATE_POOL_LIMIT == 0
    assert settings.SIGNED_URL_EXPIRES_SECONDS == 3600


def test_mongo_uri_is_required(env):
    env.delenv("MONGO_URI")

    with pytest.raises(ValueError, match="MONGO_URI"):
        Settings()


@pytest.mark.parametrize(
    "name, value",
    [
        ("MAX_RECOMMENDATIONS", "0"),
        ("CANDIDATE_POOL_LIMIT", "-1"),
        ("SIGNED_URL_EXPIRES_SECONDS", "soon"),
        ("MIN_RECOMMENDATIONS", "50"),
    ],
)
def test_invalid_numbers_are_rejected(env, name, value):
    env.setenv(name, value)

    with pytest.raises(ValueError):
        Settings()
