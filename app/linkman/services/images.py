from __future__ import annotations

import asyncio
from importlib import import_module
import logging
from typing import Iterable, Protocol
from urllib.parse import urlparse

from app.linkman.core.config import settings

logger = logging.getLogger(__name__)


class UrlSigner(Protocol):
    def sign(self, key: str | None) -> str | None: ...


class NullUrlSigner:
    """Used when no object storage is configured: every image resolves to no URL."""

    def sign(self, key: str | None) -> str | None:
        return None


def storage_configured() -> bool:
    return bool(settings.LINKMAN_S3_ACCESS_KEY and settings.LINKMAN_S3_SECRET_KEY and settings.LINKMAN_S3_BUCKET)


def _normalized_endpoint_url() -> str | None:
    endpoint = (settings.LINKMAN_S3_ENDPOINT or "").strip()
    if not endpoint:
        return None

    parsed = urlparse(endpoint)
    if parsed.scheme:
        return f"{parsed.scheme}://{parsed.netloc}{parsed.path}".rstrip("/")
    return f"https://{endpoint.lstrip('/')}".rstrip("/")


def build_s3_client():
    boto3 = import_module("boto3")
    botocore_client = import_module("botocore.client")
    return boto3.client(
        "s3",
        region_name=settings.LINKMAN_S3_REGION or None,
        endpoint_url=_normalized_endpoint_url(),
        aws_access_key_id=settings.LINKMAN_S3_ACCESS_KEY,
        aws_secret_access_key=settings.LINKMAN_S3_SECRET_KEY,
        config=botocore_client.Config(signature_version="s3v4"),
    )


class S3UrlSigner:
    def __init__(self, client, bucket: str, ttl_seconds: int) -> None:
        self._client = client
        self._bucket = bucket
        self._ttl_seconds = ttl_seconds

    def sign(self, key: str | None) -> str | None:
        if not key:
            return None
        return self._client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self._bucket, "Key": key},
            ExpiresIn=self._ttl_seconds,
        )


class ObjectStorage:
    def __init__(self, client, bucket: str) -> None:
        self._client = client
        self._bucket = bucket

    async def delete_objects(self, keys: Iterable[str | None]) -> list[str]:
        """Delete the given objects, logging failures instead of raising them.

        Returns the keys that were removed.
        """
        error_types = self._error_types()
        removed: list[str] = []
        for key in keys:
            if not key:
                continue
            try:
                await asyncio.to_thread(self._client.delete_object, Bucket=self._bucket, Key=key)
            except error_types as exc:
                logger.warning(
                    "object_delete_error",
                    extra={
                        "key": key,
                        "exception_type": type(exc).__name__,
                        "exception_message": str(exc),
                    },
                )
                continue
            removed.append(key)
            logger.info("object_deleted", extra={"key": key})
        return removed

    def _error_types(self) -> tuple[type[BaseException], ...]:
        botocore_exceptions = import_module("botocore.exceptions")
        return (botocore_exceptions.ClientError, botocore_exceptions.BotoCoreError)


class NullObjectStorage:
    async def delete_objects(self, keys: Iterable[str | None]) -> list[str]:
        return []


def build_url_signer() -> UrlSigner:
    if not storage_configured():
        return NullUrlSigner()
    return S3UrlSigner(build_s3_client(), settings.LINKMAN_S3_BUCKET, settings.PRESIGNED_URL_TTL_SECONDS)


def build_object_storage():
    if not storage_configured():
        return NullObjectStorage()
    return ObjectStorage(build_s3_client(), settings.LINKMAN_S3_BUCKET)
