"""
Course badges: one per course, created lazily the first time anyone completes it.
"""

from portal.models.models import Badge, Course
from portal.repositories.badge_repository import BadgeRepository
from portal.schemas.badge_schemas import BadgeEarner, BadgeResponse
from portal.schemas.user_schemas import CourseRef
from portal.utils.common import iso_format
from portal.utils.logger import configure_logging

logger = configure_logging()


def badge_name(course_title: str) -> str:
    return f"{course_title} - Completed"


def badge_description(course_title: str) -> str:
    return f"Badge awarded for completing the course {course_title}"


class BadgeIssuer:
    """Owns Badge.earned_by. Both writes are single conditional inserts, never read-then-write."""

    def __init__(self, badges: BadgeRepository):
        self.badges = badges

    def get_or_create_badge_for_course(self, course: Course) -> Badge:
        return self.badges.find_or_create_for_course(
            course.id,
            name=badge_name(course.title),
            description=badge_description(course.title),
        )

    def award_if_absent(self, badge: Badge, user_id: int) -> bool:
        awarded = self.badges.add_earner_if_absent(badge.id, user_id)
        if awarded:
            logger.info("badge awarded badge=%s course=%s user=%s", badge.id, badge.course_id, user_id)
        return awarded

    def list_badges(self) -> list[BadgeResponse]:
        return [badge_response(b) for b in self.badges.list_all()]


def badge_response(badge: Badge) -> BadgeResponse:
    return BadgeResponse(
        id=badge.id,
        name=badge.name,
        description=badge.description,
        image=badge.image,
        course=CourseRef(id=badge.course.id, title=badge.course.title) if badge.course is not None else None,
        earned_by=[BadgeEarner(user=a.user_id, earned_at=iso_format(a.earned_at)) for a in badge.earned_by],
    )
