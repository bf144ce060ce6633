from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from buddy_recommender.config.settings import Settings
from buddy_recommender.services import SignedUrlService, storage_service
from buddy_recommender.services.base import StorageServiceError


@pytest.fixture
def s3_settings(env):
    env.setenv("S3_BUCKET", "buddy-profile-images")
    env.setenv("SIGNED_URL_EXPIRES_SECONDS", "900")
    return Settings()


@pytest.mark.asyncio
async def test_resolve_presigns_storage_keys(s3_settings):
    client = MagicMock()
    client.generate_presigned_url.return_value = "https://signed.example.com/avatars/a.png"
    service = SignedUrlService(s3_settings, client=client)

    url = await service.resolve("avatars/a.png")

    assert url == "https://signed.example.com/avatars/a.png"
    client.generate_presigned_url.assert_called_once_with(
        "get_object",
        Params={"Bucket": "buddy-profile-images", "Key": "avatars/a.png"},
        ExpiresIn=900,
    )


@pytest.mark.asyncio
async def test_resolve_returns_absolute_urls_untouched(s3_settings):
    client = MagicMock()
    service = SignedUrlService(s3_settings, client=client)

    assert await service.resolve("http://cdn.example.com/a.png") == "http://cdn.example.com/a.png"
    client.generate_presigned_url.assert_not_called()


@pytest.mark.asyncio
async def test_resolve_requires_bucket(settings):
    service = SignedUrlService(settings, client=MagicMock())

    with pytest.raises(StorageServiceError):
        await service.resolve("avatars/a.png")


@pytest.mark.asyncio
async def test_resolve_wraps_client_errors(s3_settings):
    client = MagicMock()
    client.generate_presigned_url.side_effect = ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "GetObject"
    )
    service = SignedUrlService(s3_settings, client=client)

    with pytest.raises(StorageServiceError):
        await service.resolve("avatars/a.png")


@pytest.mark.asyncio
async def test_resolve_rejects_empty_key(s3_settings):
    with pytest.raises(StorageServiceError):
        await SignedUrlService(s3_settings, client=MagicMock()).resolve("")


@pytest.mark.parametrize(
    "url",
    ["HTTPS://cdn.example.com/a.png", "Http://cdn.example.com/a.png", "//cdn.example.com/a.png"],
)
@pytest.mark.asyncio
async def test_resolve_treats_any_case_and_protocol_relative_urls_as_absolute(s3_settings, url):
    client = MagicMock()

    assert await SignedUrlService(s3_settings, client=client).resolve(url) == url
    client.generate_presigned_url.assert_not_called()


def test_storage_keys_are_not_absolute_urls():
    assert storage_service.is_absolute_url("avatars/a.png") is False
    assert storage_service.is_absolute_url("users/1/http-avatar.png") is False


def test_shared_s3_client_is_created_once_across_threads(s3_settings, monkeypatch):
    monkeypatch.setattr(storage_service, "_s3_client", None)
    with patch.object(storage_service.boto3, "client", return_value=MagicMock()) as factory:
        with ThreadPoolExecutor(max_workers=8) as pool:
            clients = list(pool.map(lambda _: storage_service._get_s3_client(s3_settings), range(16)))

    factory.assert_called_once_with("s3", region_name=s3_settings.AWS_REGION)
    assert all(client is clients[0] for client in clients)
