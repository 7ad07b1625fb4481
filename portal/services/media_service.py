"""
Chapter media and thumbnails in blob storage.

Content URLs come in two shapes. URLs under PROXY_PREFIX name a blob in the
local store that the backend streams itself (GET /files/{key}); any other
URL is a key in object storage that clients fetch directly.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, Optional
from uuid import uuid4

from infra.storage.local_store import LocalBlobStore
from infra.storage.store import BlobStore
from portal.config import settings
from portal.errors import StoreFailure
from portal.schemas.course_schemas import ContentType

PROXY_PREFIX = "/files/"

PPTX_MIME = "application/vnd.openxmlformats-officedocument.presentationml.presentation"


@dataclass
class Upload:
    filename: str
    content_type: str
    data: bytes


def content_type_for(mimetype: Optional[str]) -> ContentType:
    mimetype = (mimetype or "").lower()
    if mimetype == "application/pdf":
        return ContentType.PDF
    if mimetype.startswith("video/"):
        return ContentType.VIDEO
    if mimetype == PPTX_MIME or mimetype.startswith("image/"):
        return ContentType.PRESENTATION
    return ContentType.PDF


def new_key(filename: str) -> str:
    _, ext = os.path.splitext(filename or "")
    return f"{uuid4().hex}{ext.lower()}"


class MediaStorage:
    def __init__(self, proxy_store: BlobStore, object_store: Optional[BlobStore] = None):
        self.proxy_store = proxy_store
        self.object_store = object_store

    def store(self, upload: Upload) -> str:
        """Persist an upload and return the URL to keep on the course/chapter."""
        key = new_key(upload.filename)
        if self.object_store is not None:
            return self.object_store.put(key, upload.data, upload.content_type)
        self.proxy_store.put(key, upload.data, upload.content_type)
        return f"{PROXY_PREFIX}{key}"

    def delete(self, url: str) -> None:
        if url.startswith(PROXY_PREFIX):
            self.proxy_store.delete(url[len(PROXY_PREFIX):])
        elif self.object_store is not None:
            self.object_store.delete(url)
        else:
            raise StoreFailure(f"No object store configured for {url!r}")

    def open(self, key: str) -> tuple[Iterator[bytes], Optional[str]]:
        """Stream a proxied blob and its content type."""
        return self.proxy_store.get(key), self.proxy_store.content_type(key)


@lru_cache(maxsize=1)
def get_media_storage() -> MediaStorage:
    proxy = LocalBlobStore(root=settings.blob_dir)
    if settings.blob_backend == "s3":
        from infra.storage.s3_store import S3BlobStore

        objects = S3BlobStore(
            bucket=settings.s3_bucket,
            endpoint_url=settings.s3_endpoint_url,
            access_key=settings.s3_access_key,
            secret_key=settings.s3_secret_key,
            region=settings.s3_region,
        )
        return MediaStorage(proxy, objects)
    return MediaStorage(proxy)
