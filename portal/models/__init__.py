"""
Portal data models. Single import surface for DB entities.

DB entities (portal.models.models):
- User, ProgressEntry, ProgressChapter, Module, Course, Chapter, ChapterContent,
  Badge, BadgeAward, HistoryEntry, HistoryChapter
"""

from portal.models.models import (
    User,
    ProgressEntry,
    ProgressChapter,
    Module,
    Course,
    Chapter,
    ChapterContent,
    Badge,
    BadgeAward,
    HistoryEntry,
    HistoryChapter,
    user_modules,
    user_completed_courses,
    user_badges,
)

__all__ = [
    "User",
    "ProgressEntry",
    "ProgressChapter",
    "Module",
    "Course",
    "Chapter",
    "ChapterContent",
    "Badge",
    "BadgeAward",
    "HistoryEntry",
    "HistoryChapter",
    "user_modules",
    "user_completed_courses",
    "user_badges",
]
