"""Object storage for uploaded media.

Keys look like ``20240131/images/my-cover.jpg``. Objects are public-read and
the returned URL is the public address of the object. Uploads are attempted
once; any boto3 failure becomes a ``StorageError``.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..core.config import get_settings
from ..core.errors import StorageError
from ..utils.text import slugify

logger = logging.getLogger(__name__)

UPLOAD_FAILED = 'An unknown error occurred while uploading media. Please try again.'


def build_key(filename: str, category: str, today: date | None = None) -> str:
    today = today or date.today()
    name = slugify(filename, keep='.') or 'upload'
    return f"{today.strftime('%Y%m%d')}/{category}/{name}"


class BlobStore(Protocol):
    def put(self, path: str, key: str, content_type: Optional[str] = None) -> str: ...

    def delete(self, key: str) -> None: ...


class S3BlobStore:
    """S3-compatible store (Wasabi in production)."""

    def __init__(self, bucket: str, endpoint_url: str | None = None, region: str | None = None,
                 access_key: str | None = None, secret_key: str | None = None):
        self.bucket = bucket
        self.endpoint_url = (endpoint_url or '').rstrip('/')
        client_kwargs = {
            'region_name': region,
            'config': Config(signature_version='s3v4'),
        }
        if self.endpoint_url:
            client_kwargs['endpoint_url'] = self.endpoint_url
        if access_key and secret_key:
            client_kwargs['aws_access_key_id'] = access_key
            client_kwargs['aws_secret_access_key'] = secret_key
        self.client = boto3.client('s3', **client_kwargs)

    def public_url(self, key: str) -> str:
        if self.endpoint_url:
            return f'{self.endpoint_url}/{self.bucket}/{key}'
        return f'https://{self.bucket}.s3.amazonaws.com/{key}'

    def put(self, path: str, key: str, content_type: Optional[str] = None) -> str:
        extra = {'ACL': 'public-read'}
        if content_type:
            extra['ContentType'] = content_type
        try:
            self.client.upload_file(path, self.bucket, key, ExtraArgs=extra)
        except (ClientError, BotoCoreError, OSError) as exc:
            raise StorageError(UPLOAD_FAILED, exc) from exc
        logger.info("uploaded s3://%s/%s", self.bucket, key)
        return self.public_url(key)

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise StorageError('An unknown error occurred while deleting media.', exc) from exc


class MemoryBlobStore:
    """Keeps objects in a dict; for development and tests."""

    def __init__(self, base_url: str = 'memory://uploads'):
        self.base_url = base_url
        self.objects: dict[str, bytes] = {}

    def put(self, path: str, key: str, content_type: Optional[str] = None) -> str:
        try:
            with open(path, 'rb') as fh:
                self.objects[key] = fh.read()
        except OSError as exc:
            raise StorageError(UPLOAD_FAILED, exc) from exc
        return f'{self.base_url}/{key}'

    def delete(self, key: str) -> None:
        self.objects.pop(key, None)


_store = None


def get_blob_store():
    global _store
    if _store is None:
        settings = get_settings()
        if settings.storage_backend == 'memory':
            _store = MemoryBlobStore()
        else:
            _store = S3BlobStore(
                bucket=settings.wasabi_bucket,
                endpoint_url=settings.wasabi_endpoint,
                region=settings.wasabi_region,
                access_key=settings.wasabi_key,
                secret_key=settings.wasabi_key_secret,
            )
    return _store


def upload_staged(store, staged, today: date | None = None) -> str:
    """Upload a staged file under its normalised key and drop the temp file."""
    key = build_key(staged.filename, staged.category, today)
    url = store.put(staged.path, key, staged.content_type)
    staged.remove()
    return url


def reset_blob_store() -> None:
    global _store
    _store = None
