"""
Append-only completion ledger per (user, course).

History is decoupled from the live course: chapter titles are snapshotted when
recorded and entries keep no foreign key to chapters, so later edits or
deletions never rewrite what a user completed.
"""

from datetime import datetime
from typing import Optional

from portal.models.models import Course, HistoryEntry
from portal.repositories.history_repository import HistoryRepository
from portal.schemas.history_schemas import (
    CategoryStats,
    HistoryChapterResponse,
    HistoryEntryResponse,
    HistoryStats,
    HistoryUserResponse,
)
from portal.utils.common import find_chapter, iso_format, iso_or_none, utcnow

DEFAULT_CHAPTER_TITLE = "Chapter"


class HistoryRecorder:
    def __init__(self, history: HistoryRepository):
        self.history = history

    def record_history(self, user_id: int, course: Course, chapter_id: str, module_name: str) -> HistoryEntry:
        """
        Find or create the entry for (user, course) and append the chapter if it is
        not there yet. Never touches the course-level completed_at.
        """
        entry = self.history.find_or_create(
            user_id,
            course.id,
            category=module_name,
            course_title=course.title,
        )
        chapter = find_chapter(course.chapters, chapter_id)
        now = utcnow()
        appended = self.history.add_chapter_if_absent(
            entry.id,
            chapter_id,
            title=chapter.title if chapter is not None else DEFAULT_CHAPTER_TITLE,
            completed_at=now,
        )
        if appended:
            # the Core insert leaves the parent row untouched
            entry.updated_at = now
        return entry

    def mark_course_completed(self, entry: HistoryEntry, at: Optional[datetime] = None) -> None:
        if entry.completed_at is None:
            entry.completed_at = at or utcnow()

    def for_user(self, user_id: int) -> list[HistoryEntry]:
        return self.history.list_for_user(user_id)

    def for_course(self, user_id: int, course_id: str) -> Optional[HistoryEntry]:
        return self.history.get(user_id, course_id)

    def all_entries(self) -> list[HistoryEntry]:
        return self.history.list_all()


def stats(entries: list[HistoryEntry]) -> HistoryStats:
    """Totals plus per-category counts. `entries` must be ordered most recent first."""
    by_category: dict[str, list[HistoryEntry]] = {}
    for entry in entries:
        by_category.setdefault(entry.category, []).append(entry)

    return HistoryStats(
        total_courses=len(entries),
        total_chapters=sum(len(e.completed_chapters) for e in entries),
        total_time=sum(e.total_time or 0 for e in entries),
        by_category=[
            CategoryStats(
                category=category,
                count=len(items),
                last_completed=iso_or_none(items[0].completed_at),
            )
            for category, items in by_category.items()
        ],
    )


def history_response(entry: HistoryEntry, *, include_user: bool = False) -> HistoryEntryResponse:
    user = None
    if include_user and entry.user is not None:
        user = HistoryUserResponse(id=entry.user.id, name=entry.user.name, email=entry.user.email)
    return HistoryEntryResponse(
        id=entry.id,
        course_id=entry.course_id,
        course_title=entry.course_title,
        category=entry.category,
        completed_at=iso_or_none(entry.completed_at),
        total_time=entry.total_time or 0,
        completed_chapters=[
            HistoryChapterResponse(
                chapter_id=c.chapter_id,
                title=c.title,
                completed_at=iso_format(c.completed_at),
            )
            for c in entry.completed_chapters
        ],
        user=user,
    )
