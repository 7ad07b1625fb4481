"""
User profile, module subscriptions and the user snapshot returned to clients.
"""

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.errors import NotFoundError, StoreFailure
from portal.models.models import User
from portal.repositories.course_repository import CourseRepository
from portal.repositories.user_repository import UserRepository
from portal.schemas.user_schemas import CourseRef, ProgressEntryResponse, Role, UserBadge, UserSnapshot
from portal.utils.logger import configure_logging

logger = configure_logging()


def user_snapshot(user: User) -> UserSnapshot:
    return UserSnapshot(
        id=user.id,
        email=user.email,
        name=user.name,
        role=Role(user.role),
        progress=[
            ProgressEntryResponse(course_id=p.course_id, completed_chapters=p.completed_chapter_ids)
            for p in user.progress
        ],
        completed_courses=[CourseRef(id=c.id, title=c.title) for c in user.completed_courses],
        badges=[
            UserBadge(
                id=b.id,
                name=b.name,
                description=b.description,
                image=b.image,
                course=CourseRef(id=b.course.id, title=b.course.title) if b.course is not None else None,
            )
            for b in user.badges
        ],
        subscribed_modules=[m.id for m in user.subscribed_modules],
    )


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)
        self.courses = CourseRepository(db)

    def snapshot(self, user_id: int) -> UserSnapshot:
        user = self.users.get_populated(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user_snapshot(user)

    def update_profile(self, user_id: int, *, name: Optional[str]) -> UserSnapshot:
        user = self._require(user_id)
        if name is not None and name.strip():
            user.name = name.strip()
        self._commit("update_profile")
        return self.snapshot(user_id)

    def subscribe(self, user_id: int, module_id: str) -> list[str]:
        user = self._require(user_id)
        module = self.courses.get_module(module_id)
        if module is None:
            raise NotFoundError("Module not found")
        if module not in user.subscribed_modules:
            user.subscribed_modules.append(module)
            self._commit("subscribe")
        return [m.id for m in user.subscribed_modules]

    def unsubscribe(self, user_id: int, module_id: str) -> list[str]:
        user = self._require(user_id)
        remaining = [m for m in user.subscribed_modules if m.id != module_id]
        if len(remaining) != len(user.subscribed_modules):
            user.subscribed_modules = remaining
            self._commit("unsubscribe")
        return [m.id for m in user.subscribed_modules]

    def _require(self, user_id: int) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def _commit(self, operation: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("store failure op=%s", operation)
            raise StoreFailure() from e
