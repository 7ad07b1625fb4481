from typing import Optional

from sqlalchemy.orm import Session, selectinload

from portal.models.models import Chapter, Course, Module


class CourseRepository:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Course).options(
            selectinload(Course.chapters).selectinload(Chapter.content),
            selectinload(Course.module),
            selectinload(Course.badge),
            selectinload(Course.creator),
        )

    def get(self, course_id: str) -> Optional[Course]:
        return self._query().filter(Course.id == course_id).first()

    def list_all(self) -> list[Course]:
        return self._query().order_by(Course.created_at.desc()).all()

    def list_for_modules(self, module_ids: list[str]) -> list[Course]:
        if not module_ids:
            return []
        return self._query().filter(Course.module_id.in_(module_ids)).order_by(Course.created_at.desc()).all()

    def add(self, course: Course) -> Course:
        self.db.add(course)
        return course

    def delete(self, course: Course) -> None:
        self.db.delete(course)

    def get_module(self, module_id: str) -> Optional[Module]:
        return self.db.query(Module).filter(Module.id == module_id).first()

    def list_modules(self) -> list[Module]:
        return self.db.query(Module).order_by(Module.name.asc()).all()
