from typing import Optional
from pydantic import BaseModel

from portal.schemas.user_schemas import CourseRef


class BadgeEarner(BaseModel):
    user: int
    earned_at: str


class BadgeResponse(BaseModel):
    id: str
    name: str
    description: str
    image: Optional[str] = None
    course: Optional[CourseRef] = None
    earned_by: list[BadgeEarner]
