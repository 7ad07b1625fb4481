from sqlalchemy.orm import Session, selectinload

from portal.models.models import Badge, BadgeAward
from portal.repositories.base import insert_if_absent
from portal.utils.common import utcnow


class BadgeRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_or_create_for_course(self, course_id: str, *, name: str, description: str) -> Badge:
        """Atomic find-or-create keyed by the unique badges.course_id."""
        insert_if_absent(self.db, Badge, course_id=course_id, name=name, description=description)
        return self.db.query(Badge).filter(Badge.course_id == course_id).one()

    def add_earner_if_absent(self, badge_id: str, user_id: int) -> bool:
        """Atomic add-to-set on (badge, user). Returns True if the user was added."""
        return insert_if_absent(self.db, BadgeAward, badge_id=badge_id, user_id=user_id, earned_at=utcnow())

    def list_all(self) -> list[Badge]:
        return (
            self.db.query(Badge)
            .options(selectinload(Badge.course), selectinload(Badge.earned_by))
            .order_by(Badge.created_at.asc())
            .all()
        )
