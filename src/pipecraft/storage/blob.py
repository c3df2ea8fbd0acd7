"""
Storage abstraction for S3 (or any S3-compatible endpoint) and in-memory testing.

Records never hold raw bytes, only the public URL of the stored object
(the "ref"). The object key is recoverable from a ref as its last two
path segments, e.g. ``avatars/USR…-me.png``.
"""

from __future__ import annotations

import asyncio
import os
import re
from dataclasses import dataclass, field
from typing import Optional, Protocol
from urllib.parse import quote, unquote, urlparse

import boto3
from botocore.config import Config

from pipecraft.config import Settings, get_settings

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def object_key(folder: str, record_id: str, filename: str) -> str:
    """Build the key a record's file is stored under: ``folder/ID-filename``."""
    name = _UNSAFE_CHARS.sub("-", os.path.basename(filename or "")).strip("-") or "file"
    return f"{folder}/{record_id}-{name}"


def key_from_ref(ref: str) -> str:
    """Recover the object key from a stored ref (its last two path segments)."""
    path = unquote(urlparse(ref).path)
    return "/".join(path.rstrip("/").split("/")[-2:])


class BlobStore(Protocol):
    """Defines the operations the API needs from object storage."""

    async def upload(self, key: str, content: bytes, content_type: str) -> str:
        """Store content under key and return its ref."""
        ...

    async def delete(self, key: str) -> None:
        ...


@dataclass
class InMemoryBlobStore:
    """Test double for storage interactions."""

    base_url: str = "https://blobs.example.test/bucket"
    objects: dict = field(default_factory=dict)
    fail_uploads: bool = False
    fail_deletes: bool = False
    deleted: list = field(default_factory=list)

    async def upload(self, key: str, content: bytes, content_type: str) -> str:
        if self.fail_uploads:
            raise ConnectionError("upload refused")
        self.objects[key] = (content, content_type)
        return f"{self.base_url}/{quote(key)}"

    async def delete(self, key: str) -> None:
        if self.fail_deletes:
            raise ConnectionError("delete refused")
        self.objects.pop(key, None)
        self.deleted.append(key)


@dataclass
class S3BlobStore:
    """
    S3 storage client. boto3 is blocking, so every call runs in a worker
    thread and the event loop keeps serving other requests meanwhile.
    """

    bucket: str
    region: str
    endpoint_url: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None

    def __post_init__(self):
        config = Config(signature_version="s3v4", retries={"max_attempts": 3})
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint_url,
            region_name=self.region,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=config,
        )

    def public_url(self, key: str) -> str:
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{quote(key)}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{quote(key)}"

    async def upload(self, key: str, content: bytes, content_type: str) -> str:
        await asyncio.to_thread(
            self._client.put_object,
            Bucket=self.bucket,
            Key=key,
            Body=content,
            ContentType=content_type,
        )
        return self.public_url(key)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(
            self._client.delete_object, Bucket=self.bucket, Key=key
        )


_store: Optional[BlobStore] = None


def build_blob_store(settings: Settings) -> S3BlobStore:
    return S3BlobStore(
        bucket=settings.s3_bucket,
        region=settings.s3_region,
        endpoint_url=settings.s3_endpoint_url,
        access_key_id=settings.aws_access_key_id,
        secret_access_key=settings.aws_secret_access_key,
    )


def get_blob_store() -> BlobStore:
    """FastAPI dependency — one shared S3 client per process."""
    global _store
    if _store is None:
        _store = build_blob_store(get_settings())
    return _store
