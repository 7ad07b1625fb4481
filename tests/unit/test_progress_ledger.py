"""Unit tests for ProgressLedger (in-memory user, no DB)."""
import pytest

from portal.models.models import User
from portal.services.progress_ledger import ProgressLedger


@pytest.fixture
def user():
    return User(email="u@example.com", hashed_password="", name="U", role="user")


@pytest.mark.unit
class TestRecordChapterCompletion:
    def test_creates_entry_for_new_course(self, user):
        entry = ProgressLedger().record_chapter_completion(user, "course-1", "ch-1")
        assert entry.course_id == "course-1"
        assert entry.completed_chapter_ids == ["ch-1"]
        assert user.progress == [entry]

    def test_repeat_is_noop(self, user):
        ledger = ProgressLedger()
        ledger.record_chapter_completion(user, "course-1", "ch-1")
        entry = ledger.record_chapter_completion(user, "course-1", "ch-1")
        assert entry.completed_chapter_ids == ["ch-1"]
        assert len(user.progress) == 1

    def test_one_entry_per_course(self, user):
        ledger = ProgressLedger()
        ledger.record_chapter_completion(user, "course-1", "ch-1")
        ledger.record_chapter_completion(user, "course-2", "ch-9")
        ledger.record_chapter_completion(user, "course-1", "ch-2")
        assert [p.course_id for p in user.progress] == ["course-1", "course-2"]
        assert ledger.completed_chapter_ids(user, "course-1") == {"ch-1", "ch-2"}
        assert ledger.completed_chapter_ids(user, "course-2") == {"ch-9"}

    def test_unknown_course_has_no_progress(self, user):
        ledger = ProgressLedger()
        assert ledger.entry_for(user, "nope") is None
        assert ledger.completed_chapter_ids(user, "nope") == set()
