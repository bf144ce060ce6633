from __future__ import annotations

import asyncio
import threading
from typing import Optional
from urllib.parse import urlsplit

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from buddy_recommender.config.settings import Settings
from buddy_recommender.services.base import StorageServiceError


def is_absolute_url(value: str) -> bool:
    """True for URLs with a scheme or a host, including protocol-relative ones."""
    parts = urlsplit(value.strip())
    return bool(parts.scheme and parts.netloc) or value.strip().startswith("//")


class SignedUrlService:
    """Turns S3 object keys into time-limited browsable URLs."""

    def __init__(self, settings: Settings, *, client=None) -> None:
        self.settings = settings
        self._client = client

    async def resolve(self, storage_key: str) -> str:
        if not storage_key:
            raise StorageServiceError("Storage key is required to generate a signed URL.")
        if is_absolute_url(storage_key):
            return storage_key
        return await asyncio.to_thread(self._sync_presign, storage_key)

    def _sync_presign(self, storage_key: str) -> str:
        if not self.settings.S3_BUCKET:
            raise StorageServiceError("S3_BUCKET environment variable is not set.")
        client = self._client or _get_s3_client(self.settings)
        try:
            return client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.settings.S3_BUCKET, "Key": storage_key},
                ExpiresIn=self.settings.SIGNED_URL_EXPIRES_SECONDS,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageServiceError(f"Could not sign storage key {storage_key}") from exc


_s3_client: Optional[object] = None
_s3_client_lock = threading.Lock()


def _get_s3_client(settings: Settings):
    global _s3_client
    # Reached from to_thread workers concurrently.
    with _s3_client_lock:
        if _s3_client is None:
            _s3_client = boto3.client("s3", region_name=settings.AWS_REGION)
    return _s3_client
