"""
History ledger schemas (profile history card and admin reporting).
"""

from typing import Optional
from pydantic import BaseModel


class HistoryChapterResponse(BaseModel):
    chapter_id: str
    title: str  # snapshot at completion time
    completed_at: str


class HistoryUserResponse(BaseModel):
    id: int
    name: str
    email: str


class HistoryEntryResponse(BaseModel):
    id: str
    course_id: str
    course_title: Optional[str] = None
    category: str
    completed_at: Optional[str] = None  # ISO, only once the whole course is done
    total_time: int
    completed_chapters: list[HistoryChapterResponse]
    user: Optional[HistoryUserResponse] = None


class CategoryStats(BaseModel):
    category: str
    count: int
    last_completed: Optional[str] = None


class HistoryStats(BaseModel):
    total_courses: int
    total_chapters: int
    total_time: int
    by_category: list[CategoryStats]


class MyHistoryResponse(BaseModel):
    history: list[HistoryEntryResponse]
    stats: HistoryStats
