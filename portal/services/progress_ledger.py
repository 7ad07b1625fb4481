"""
Per-user chapter progress (User.progress).

Mutates the loaded user in memory only; the completion service commits once
per request.
"""

from portal.models.models import ProgressChapter, ProgressEntry, User


class ProgressLedger:
    """Owns User.progress: one entry per course, each a set of completed chapter ids."""

    def entry_for(self, user: User, course_id: str) -> ProgressEntry | None:
        for entry in user.progress:
            if entry.course_id == course_id:
                return entry
        return None

    def record_chapter_completion(self, user: User, course_id: str, chapter_id: str) -> ProgressEntry:
        entry = self.entry_for(user, course_id)
        if entry is None:
            entry = ProgressEntry(course_id=course_id)
            user.progress.append(entry)

        # set-union: an already recorded chapter is a no-op
        if chapter_id not in entry.completed_chapter_ids:
            entry.chapters.append(ProgressChapter(chapter_id=chapter_id))
        return entry

    def completed_chapter_ids(self, user: User, course_id: str) -> set[str]:
        entry = self.entry_for(user, course_id)
        return set(entry.completed_chapter_ids) if entry is not None else set()
