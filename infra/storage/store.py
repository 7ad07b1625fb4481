from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, Optional


class BlobNotFound(KeyError):
    """No blob is stored under the requested key."""


class BlobStore(ABC):
    """
    Binary content addressed by an opaque key.

    Implementations must not derive meaning from key structure; callers choose
    keys and get them back unchanged from `put`.
    """

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Store `data` under `key` and return the key."""

        raise NotImplementedError

    @abstractmethod
    def get(self, key: str) -> Iterator[bytes]:
        """
        Stream the blob in chunks. Raises BlobNotFound if the key is unknown.
        """

        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete the blob. Deleting an unknown key is not an error."""

        raise NotImplementedError

    def content_type(self, key: str) -> Optional[str]:
        return None
