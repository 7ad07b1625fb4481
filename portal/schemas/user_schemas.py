from enum import Enum
from typing import Optional
from pydantic import BaseModel


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"
    TEACHER = "teacher"


class Principal(BaseModel):
    """Authenticated caller resolved by the identity gate."""
    id: int
    role: Role

    @property
    def is_staff(self) -> bool:
        return self.role in (Role.ADMIN, Role.TEACHER)


class ProgressEntryResponse(BaseModel):
    course_id: str
    completed_chapters: list[str]


class CourseRef(BaseModel):
    id: str
    title: str


class UserBadge(BaseModel):
    id: str
    name: str
    description: str
    image: Optional[str] = None
    course: Optional[CourseRef] = None


class UserSnapshot(BaseModel):
    """Authoritative user state returned after mutations and by the profile endpoint."""
    id: int
    email: str
    name: str
    role: Role
    progress: list[ProgressEntryResponse]
    completed_courses: list[CourseRef]
    badges: list[UserBadge]
    subscribed_modules: list[str]


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = None


class SubscribeRequest(BaseModel):
    module: str


class SubscriptionResponse(BaseModel):
    message: str
    subscribed_modules: list[str]
