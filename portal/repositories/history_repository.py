from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from portal.models.models import HistoryChapter, HistoryEntry
from portal.repositories.base import insert_if_absent


class HistoryRepository:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(HistoryEntry).options(
            selectinload(HistoryEntry.completed_chapters),
            selectinload(HistoryEntry.user),
        )

    def get(self, user_id: int, course_id: str) -> Optional[HistoryEntry]:
        return self._query().filter(HistoryEntry.user_id == user_id, HistoryEntry.course_id == course_id).first()

    def find_or_create(self, user_id: int, course_id: str, *, category: str, course_title: Optional[str]) -> HistoryEntry:
        """Atomic find-or-create keyed by the unique (user_id, course_id)."""
        insert_if_absent(
            self.db,
            HistoryEntry,
            user_id=user_id,
            course_id=course_id,
            category=category,
            course_title=course_title,
        )
        return self._query().filter(HistoryEntry.user_id == user_id, HistoryEntry.course_id == course_id).one()

    def add_chapter_if_absent(self, entry_id: str, chapter_id: str, *, title: str, completed_at: datetime) -> bool:
        """Atomic append keyed by (history_id, chapter_id). Returns True if appended."""
        return insert_if_absent(
            self.db,
            HistoryChapter,
            history_id=entry_id,
            chapter_id=chapter_id,
            title=title,
            completed_at=completed_at,
        )

    def list_for_user(self, user_id: int) -> list[HistoryEntry]:
        return self._order(self._query().filter(HistoryEntry.user_id == user_id)).all()

    def list_all(self) -> list[HistoryEntry]:
        return self._order(self._query()).all()

    @staticmethod
    def _order(query):
        # most recently completed first; courses still in progress last
        return query.order_by(
            HistoryEntry.completed_at.is_(None),
            HistoryEntry.completed_at.desc(),
            HistoryEntry.updated_at.desc(),
        )
