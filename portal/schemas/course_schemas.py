"""
Course, chapter and module schemas.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel

from portal.schemas.user_schemas import UserSnapshot


class ContentType(str, Enum):
    VIDEO = "video"
    PDF = "pdf"
    PRESENTATION = "presentation"


class ContentItem(BaseModel):
    type: ContentType
    url: str


class ChapterResponse(BaseModel):
    id: str
    title: str
    description: str
    content: list[ContentItem]


class ModuleResponse(BaseModel):
    id: str
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None


class CourseBadgeResponse(BaseModel):
    id: str
    name: str
    description: str
    image: Optional[str] = None


class CreatorResponse(BaseModel):
    id: int
    name: str
    email: str


class CourseResponse(BaseModel):
    id: str
    title: str
    description: str
    thumbnail: Optional[str] = None
    module: Optional[ModuleResponse] = None
    chapters: list[ChapterResponse]
    badge: Optional[CourseBadgeResponse] = None
    created_by: Optional[CreatorResponse] = None
    created_at: str


class CompleteChapterResponse(BaseModel):
    message: str
    user: UserSnapshot


class MessageResponse(BaseModel):
    message: str
