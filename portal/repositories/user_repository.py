from typing import Optional

from sqlalchemy.orm import Session, selectinload

from portal.models.models import Badge, ProgressChapter, ProgressEntry, User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_for_update(self, user_id: int) -> Optional[User]:
        """
        The user row locked for the rest of the transaction (FOR UPDATE where the
        backend supports it), with progress and completed courses refreshed from
        the database rather than taken from the identity map.
        """
        return (
            self.db.query(User)
            .options(
                selectinload(User.progress).selectinload(ProgressEntry.chapters),
                selectinload(User.completed_courses),
                selectinload(User.badges),
            )
            .filter(User.id == user_id)
            .populate_existing()
            .with_for_update()
            .first()
        )

    def completed_chapter_ids(self, user_id: int, course_id: str) -> set[str]:
        """Chapter ids stored for (user, course), including rows flushed by this session."""
        rows = (
            self.db.query(ProgressChapter.chapter_id)
            .join(ProgressEntry, ProgressChapter.entry_id == ProgressEntry.id)
            .filter(ProgressEntry.user_id == user_id, ProgressEntry.course_id == course_id)
            .all()
        )
        return {chapter_id for (chapter_id,) in rows}

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.strip().lower()).first()

    def create(self, *, email: str, hashed_password: str, name: str, role: str = "user") -> User:
        user = User(email=email.strip().lower(), hashed_password=hashed_password, name=name.strip(), role=role)
        self.db.add(user)
        return user

    def get_populated(self, user_id: int) -> Optional[User]:
        """
        Freshly reloaded user with progress, completed courses, badges (and their
        courses) and subscriptions. Expires the session first, so call it only
        after the unit of work has been committed.
        """
        self.db.expire_all()
        return (
            self.db.query(User)
            .options(
                selectinload(User.progress).selectinload(ProgressEntry.chapters),
                selectinload(User.completed_courses),
                selectinload(User.badges).selectinload(Badge.course),
                selectinload(User.subscribed_modules),
            )
            .filter(User.id == user_id)
            .first()
        )
