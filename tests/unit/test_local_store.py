"""Unit tests for the filesystem blob store."""
import pytest

from infra.storage.local_store import LocalBlobStore
from infra.storage.store import BlobNotFound


@pytest.fixture
def store(tmp_path):
    return LocalBlobStore(root=str(tmp_path / "blobs"))


@pytest.mark.unit
class TestLocalBlobStore:
    def test_put_get(self, store):
        assert store.put("a.pdf", b"content", "application/pdf") == "a.pdf"
        assert b"".join(store.get("a.pdf")) == b"content"
        assert store.content_type("a.pdf") == "application/pdf"

    def test_get_missing(self, store):
        with pytest.raises(BlobNotFound):
            store.get("missing.pdf")

    def test_delete_is_idempotent(self, store):
        store.put("a.pdf", b"x")
        store.delete("a.pdf")
        store.delete("a.pdf")
        with pytest.raises(BlobNotFound):
            store.get("a.pdf")
        assert store.content_type("a.pdf") is None

    @pytest.mark.parametrize("key", ["", "..", "../etc/passwd", "dir/file"])
    def test_rejects_path_keys(self, store, key):
        with pytest.raises(ValueError):
            store.put(key, b"x")

    def test_large_blob_streams_in_chunks(self, store):
        data = b"x" * (200 * 1024)
        store.put("big.bin", data)
        chunks = list(store.get("big.bin"))
        assert len(chunks) > 1
        assert b"".join(chunks) == data
