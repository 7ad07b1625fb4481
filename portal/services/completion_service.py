"""
Chapter completion workflow.

One call records a chapter for a user and reconciles the three views that
depend on it: the user's progress (and completed courses / badges), the
history ledger, and the course badge's earners. Every step is idempotent, so
repeating a call (a client retry, a duplicate request, a retry after a failed
commit) converges to the same state:

1. load course and chapter, then the user (NotFound otherwise)
2. progress: add chapter to the user's entry for the course (set semantics)
3. history: find-or-create the (user, course) entry, append chapter if absent
4. completion: every current chapter id is among the stored chapter rows
5. on first completion: completed course, history.completed_at, badge
   find-or-create, earner add-if-absent, badge on the user
6. commit (history rows are written before the user rows), reload the user

The user row is loaded FOR UPDATE, so completions for one user run one at a
time on backends with row locks. Completion is then decided from a query over
the flushed progress rows, not from the loaded collection, so a chapter
committed by a concurrent request is counted. Badge creation and earner
insertion are conditional inserts on unique keys: concurrent completions of a
course cannot produce two badges or two earner rows. Two requests that both
complete the course unserialized collide on the completed-course key, and the
loser gets a StoreFailure that is safe to retry.
"""

from dataclasses import dataclass
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.errors import NotFoundError, PortalError, StoreFailure
from portal.repositories.badge_repository import BadgeRepository
from portal.repositories.course_repository import CourseRepository
from portal.repositories.history_repository import HistoryRepository
from portal.repositories.user_repository import UserRepository
from portal.schemas.user_schemas import UserSnapshot
from portal.services.badge_issuer import BadgeIssuer
from portal.services.history_recorder import HistoryRecorder
from portal.services.progress_ledger import ProgressLedger
from portal.services.user_service import user_snapshot
from portal.utils.common import find_chapter
from portal.utils.logger import configure_logging, log_request

logger = configure_logging()

CHAPTER_COMPLETED_MESSAGE = "Chapter completed"
COURSE_COMPLETED_MESSAGE = "Course completed! You earned a badge."


@dataclass
class CompletionResult:
    message: str
    user: UserSnapshot
    course_completed: bool
    badge_awarded: bool


def is_course_complete(completed_chapter_ids: Iterable[str], chapter_ids: Iterable[str]) -> bool:
    """
    True once every current chapter is completed. Completed ids of chapters that
    no longer exist are ignored, so deleting a chapter cannot inflate the count.
    """
    current = set(chapter_ids)
    if not current:
        return False
    return len(set(completed_chapter_ids) & current) == len(current)


class CompletionService:
    def __init__(
        self,
        db: Session,
        *,
        users: UserRepository,
        courses: CourseRepository,
        ledger: ProgressLedger,
        history: HistoryRecorder,
        badges: BadgeIssuer,
    ):
        self.db = db
        self.users = users
        self.courses = courses
        self.ledger = ledger
        self.history = history
        self.badges = badges

    @classmethod
    def for_session(cls, db: Session) -> "CompletionService":
        return cls(
            db,
            users=UserRepository(db),
            courses=CourseRepository(db),
            ledger=ProgressLedger(),
            history=HistoryRecorder(HistoryRepository(db)),
            badges=BadgeIssuer(BadgeRepository(db)),
        )

    def complete_chapter(self, user_id: int, course_id: str, chapter_id: str) -> CompletionResult:
        with log_request(logger, f"complete_chapter user={user_id} course={course_id} chapter={chapter_id}"):
            try:
                course_completed, badge_awarded = self._apply(user_id, course_id, chapter_id)
                self.db.commit()
                user = self.users.get_populated(user_id)
            except PortalError:
                self.db.rollback()
                raise
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.exception("store failure op=complete_chapter user=%s course=%s", user_id, course_id)
                raise StoreFailure() from e

            if user is None:
                raise NotFoundError("User not found")
            return CompletionResult(
                message=COURSE_COMPLETED_MESSAGE if course_completed else CHAPTER_COMPLETED_MESSAGE,
                user=user_snapshot(user),
                course_completed=course_completed,
                badge_awarded=badge_awarded,
            )

    def _apply(self, user_id: int, course_id: str, chapter_id: str) -> tuple[bool, bool]:
        course = self.courses.get(course_id)
        if course is None:
            raise NotFoundError("Course not found")
        if find_chapter(course.chapters, chapter_id) is None:
            raise NotFoundError("Chapter not found")
        user = self.users.get_for_update(user_id)
        if user is None:
            raise NotFoundError("User not found")

        self.ledger.record_chapter_completion(user, course.id, chapter_id)
        module_name = course.module.name if course.module is not None else ""
        history = self.history.record_history(user.id, course, chapter_id, module_name)

        self.db.flush()
        stored = self.users.completed_chapter_ids(user.id, course.id)
        complete = is_course_complete(stored, (c.id for c in course.chapters))
        badge_awarded = False
        if complete and course not in user.completed_courses:
            user.completed_courses.append(course)
            self.history.mark_course_completed(history)
            badge = self.badges.get_or_create_badge_for_course(course)
            badge_awarded = self.badges.award_if_absent(badge, user.id)
            # an earner row may exist without the badge on the user
            if badge not in user.badges:
                user.badges.append(badge)
            logger.info("course completed user=%s course=%s badge=%s", user.id, course.id, badge.id)
        return complete, badge_awarded
