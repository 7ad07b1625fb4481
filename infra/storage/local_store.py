from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from infra.storage.store import BlobNotFound, BlobStore

CHUNK_SIZE = 64 * 1024


@dataclass
class LocalBlobStore(BlobStore):
    """
    Filesystem-backed BlobStore.

    - Each blob is a file under `root`; its content type is kept in a sidecar
      `<key>.meta.json` so the file proxy can answer with the right header.
    - Keys must be flat names (no path separators).
    """

    root: str = "uploads"

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key in (".", ".."):
            raise ValueError(f"invalid blob key: {key!r}")
        return Path(self.root) / key

    def _meta_path(self, key: str) -> Path:
        return self._path(key).with_name(f"{key}.meta.json")

    def put(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        self._meta_path(key).write_text(json.dumps({"content_type": content_type}), encoding="utf-8")
        return key

    def get(self, key: str) -> Iterator[bytes]:
        path = self._path(key)
        if not path.is_file():
            raise BlobNotFound(key)

        def _chunks() -> Iterator[bytes]:
            with path.open("rb") as fh:
                while chunk := fh.read(CHUNK_SIZE):
                    yield chunk

        return _chunks()

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
        self._meta_path(key).unlink(missing_ok=True)

    def content_type(self, key: str) -> Optional[str]:
        meta = self._meta_path(key)
        if not meta.is_file():
            return None
        return json.loads(meta.read_text(encoding="utf-8")).get("content_type")
