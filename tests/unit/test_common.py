"""Unit tests for common utils (pure functions only)."""
from datetime import datetime
from types import SimpleNamespace

import pytest

from portal.utils.common import display_name, find_chapter, iso_format, iso_or_none, slugify, utcnow


@pytest.mark.unit
class TestIsoFormat:
    def test_appends_z(self):
        dt = datetime(2025, 1, 15, 12, 30, 0)
        result = iso_format(dt)
        assert result == "2025-01-15T12:30:00Z"

    def test_none(self):
        assert iso_or_none(None) is None


@pytest.mark.unit
class TestUtcnow:
    def test_naive(self):
        assert utcnow().tzinfo is None


@pytest.mark.unit
class TestDisplayName:
    def test_name(self):
        assert display_name("Alice", "a@example.com") == "Alice"

    def test_strips(self):
        assert display_name("  Bob Smith ", "b@example.com") == "Bob Smith"

    def test_fallback_email_prefix(self):
        assert display_name(None, "paribesh@example.com") == "paribesh"

    def test_blank_fallback(self):
        assert display_name("   ", "test@test.com") == "test"


@pytest.mark.unit
class TestFindChapter:
    def test_by_id_not_position(self):
        chapters = [SimpleNamespace(id="b", position=0), SimpleNamespace(id="a", position=1)]
        assert find_chapter(chapters, "a") is chapters[1]

    def test_missing(self):
        assert find_chapter([SimpleNamespace(id="a")], "z") is None


@pytest.mark.unit
class TestSlugify:
    def test_basic(self):
        assert slugify("Seguridad Industrial") == "seguridad-industrial"

    def test_collapses_separators(self):
        assert slugify("  Quality -- & Audits! ") == "quality-audits"
