"""
Blob store implementations live here (infra adapters).

NOTE: S3BlobStore needs boto3. Import it directly from its module
(`infra.storage.s3_store import S3BlobStore`) so the local backend works
without importing the AWS SDK at package import time.
"""

from infra.storage.local_store import LocalBlobStore
from infra.storage.store import BlobNotFound, BlobStore

__all__ = ["BlobNotFound", "BlobStore", "LocalBlobStore"]
