"""Unit tests for MediaStorage URL routing and content type mapping."""
import pytest

from portal.errors import StoreFailure
from portal.schemas.course_schemas import ContentType
from portal.services.media_service import (
    PPTX_MIME,
    PROXY_PREFIX,
    MediaStorage,
    Upload,
    content_type_for,
    new_key,
)


@pytest.mark.unit
class TestContentTypeFor:
    @pytest.mark.parametrize(
        "mimetype,expected",
        [
            ("application/pdf", ContentType.PDF),
            ("video/mp4", ContentType.VIDEO),
            (PPTX_MIME, ContentType.PRESENTATION),
            ("image/png", ContentType.PRESENTATION),
            ("application/zip", ContentType.PDF),
            (None, ContentType.PDF),
        ],
    )
    def test_mapping(self, mimetype, expected):
        assert content_type_for(mimetype) == expected


@pytest.mark.unit
class TestNewKey:
    def test_keeps_extension(self):
        assert new_key("Slides.PPTX").endswith(".pptx")

    def test_unique(self):
        assert new_key("a.pdf") != new_key("a.pdf")


@pytest.mark.unit
class TestMediaStorage:
    def test_store_without_object_store_is_proxied(self, make_store):
        proxy = make_store()
        media = MediaStorage(proxy)
        url = media.store(Upload("doc.pdf", "application/pdf", b"%PDF"))

        assert url.startswith(PROXY_PREFIX)
        key = url[len(PROXY_PREFIX):]
        assert proxy.blobs[key] == b"%PDF"

    def test_store_with_object_store_returns_key(self, make_store):
        proxy, objects = make_store(), make_store()
        media = MediaStorage(proxy, objects)
        url = media.store(Upload("clip.mp4", "video/mp4", b"data"))

        assert not url.startswith(PROXY_PREFIX)
        assert url in objects.blobs
        assert proxy.blobs == {}

    def test_delete_routes_by_prefix(self, make_store):
        proxy, objects = make_store(), make_store()
        media = MediaStorage(proxy, objects)
        media.delete(f"{PROXY_PREFIX}abc.pdf")
        media.delete("xyz.mp4")
        assert proxy.deleted == ["abc.pdf"]
        assert objects.deleted == ["xyz.mp4"]

    def test_delete_object_key_without_object_store(self, make_store):
        with pytest.raises(StoreFailure):
            MediaStorage(make_store()).delete("xyz.mp4")

    def test_open_returns_chunks_and_type(self, make_store):
        proxy = make_store()
        proxy.put("k.pdf", b"hello", "application/pdf")
        chunks, content_type = MediaStorage(proxy).open("k.pdf")
        assert b"".join(chunks) == b"hello"
        assert content_type == "application/pdf"
