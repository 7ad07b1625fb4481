from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional

from infra.storage.store import BlobNotFound, BlobStore

CHUNK_SIZE = 64 * 1024


@dataclass
class S3BlobStore(BlobStore):
    """
    S3-compatible BlobStore (AWS S3, MinIO).

    - `endpoint_url` points at MinIO (e.g. http://minio:9000); None means AWS.
    - The bucket is created on first use if it does not exist.
    """

    bucket: str = "capacitaciones"
    endpoint_url: Optional[str] = None
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: str = "us-east-1"

    _client: Any = None
    _bucket_ready: bool = False

    def _get_client(self):
        if self._client is not None:
            return self._client

        try:
            import boto3  # type: ignore
        except ModuleNotFoundError as e:
            raise ModuleNotFoundError(
                "boto3 is required to use S3BlobStore. Install it with `pip install boto3` "
                "or set BLOB_BACKEND=local."
            ) from e

        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint_url,
            aws_access_key_id=self.access_key,
            aws_secret_access_key=self.secret_key,
            region_name=self.region,
        )
        return self._client

    def _ensure_bucket(self):
        client = self._get_client()
        if self._bucket_ready:
            return client

        from botocore.exceptions import ClientError  # type: ignore

        try:
            client.head_bucket(Bucket=self.bucket)
        except ClientError:
            client.create_bucket(Bucket=self.bucket)
        self._bucket_ready = True
        return client

    def put(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        client = self._ensure_bucket()
        extra = {"ContentType": content_type} if content_type else {}
        client.put_object(Bucket=self.bucket, Key=key, Body=data, **extra)
        return key

    def get(self, key: str) -> Iterator[bytes]:
        from botocore.exceptions import ClientError  # type: ignore

        client = self._ensure_bucket()
        try:
            obj = client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                raise BlobNotFound(key) from e
            raise
        return obj["Body"].iter_chunks(chunk_size=CHUNK_SIZE)

    def delete(self, key: str) -> None:
        client = self._ensure_bucket()
        client.delete_object(Bucket=self.bucket, Key=key)

    def content_type(self, key: str) -> Optional[str]:
        from botocore.exceptions import ClientError  # type: ignore

        client = self._ensure_bucket()
        try:
            return client.head_object(Bucket=self.bucket, Key=key).get("ContentType")
        except ClientError:
            return None
