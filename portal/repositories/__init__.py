"""
Repositories over the SQLAlchemy session. Each exposes only the reads and the
atomic writes (find-or-create, add-if-absent) the services need.
"""

from portal.repositories.badge_repository import BadgeRepository
from portal.repositories.course_repository import CourseRepository
from portal.repositories.history_repository import HistoryRepository
from portal.repositories.user_repository import UserRepository

__all__ = [
    "BadgeRepository",
    "CourseRepository",
    "HistoryRepository",
    "UserRepository",
]
