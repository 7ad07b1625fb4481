"""
Course and chapter management: creation with uploaded media, visibility by
module subscription, and deletion cascading to blob storage.

Deletion removes blobs first and metadata last. A failing blob delete is
logged and skipped: an orphaned blob is acceptable, a course or chapter
record pointing at deleted content is not.
"""

from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.errors import ForbiddenError, NotFoundError, StoreFailure
from portal.models.models import Chapter, ChapterContent, Course
from portal.repositories.course_repository import CourseRepository
from portal.repositories.user_repository import UserRepository
from portal.schemas.course_schemas import (
    ChapterResponse,
    ContentItem,
    CourseBadgeResponse,
    CourseResponse,
    CreatorResponse,
    ModuleResponse,
)
from portal.schemas.user_schemas import Principal
from portal.services.media_service import MediaStorage, Upload, content_type_for
from portal.utils.common import find_chapter, iso_format
from portal.utils.logger import configure_logging

logger = configure_logging()


class CourseService:
    def __init__(self, db: Session, media: MediaStorage):
        self.db = db
        self.media = media
        self.courses = CourseRepository(db)
        self.users = UserRepository(db)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_visible(self, principal: Principal) -> list[Course]:
        """Staff see every course; users only those in modules they subscribe to."""
        if principal.is_staff:
            return self.courses.list_all()
        user = self.users.get(principal.id)
        if user is None:
            return []
        return self.courses.list_for_modules([m.id for m in user.subscribed_modules])

    def get_visible(self, principal: Principal, course_id: str) -> Course:
        course = self._require(course_id)
        if principal.is_staff:
            return course
        user = self.users.get(principal.id)
        subscribed = {m.id for m in user.subscribed_modules} if user is not None else set()
        if course.module_id not in subscribed:
            raise ForbiddenError("Not subscribed to this module")
        return course

    # ------------------------------------------------------------------
    # Writes (admin / teacher)
    # ------------------------------------------------------------------

    def create_course(
        self,
        principal: Principal,
        *,
        title: str,
        description: str,
        module_id: str,
        thumbnail: Optional[Upload] = None,
    ) -> Course:
        module = self.courses.get_module(module_id)
        if module is None:
            raise NotFoundError("Module not found")

        thumbnail_url = self.media.store(thumbnail) if thumbnail is not None else None
        course = self.courses.add(
            Course(
                title=title.strip(),
                description=description,
                module_id=module.id,
                thumbnail=thumbnail_url,
                created_by=principal.id,
            )
        )
        self._commit("create_course")
        logger.info("course created course=%s module=%s by=%s", course.id, module.id, principal.id)
        return self._require(course.id)

    def add_chapter(self, course_id: str, *, title: str, description: str, uploads: Iterable[Upload]) -> Course:
        course = self._require(course_id)
        content = [
            ChapterContent(position=i, type=content_type_for(u.content_type).value, url=self.media.store(u))
            for i, u in enumerate(uploads)
        ]
        position = max((c.position for c in course.chapters), default=-1) + 1
        course.chapters.append(
            Chapter(course_id=course.id, position=position, title=title, description=description, content=content)
        )
        self._commit("add_chapter")
        return self._require(course_id)

    def delete_chapter(self, course_id: str, chapter_id: str) -> None:
        course = self._require(course_id)
        chapter = find_chapter(course.chapters, chapter_id)
        if chapter is None:
            raise NotFoundError("Chapter not found")

        self._delete_blobs(c.url for c in chapter.content)
        # remaining chapters keep their ids and positions
        course.chapters.remove(chapter)
        self._commit("delete_chapter")
        logger.info("chapter deleted course=%s chapter=%s", course_id, chapter_id)

    def delete_course(self, course_id: str) -> None:
        course = self._require(course_id)

        urls = [course.thumbnail] if course.thumbnail else []
        urls.extend(item.url for chapter in course.chapters for item in chapter.content)
        self._delete_blobs(urls)

        self.courses.delete(course)
        self._commit("delete_course")
        logger.info("course deleted course=%s", course_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require(self, course_id: str) -> Course:
        course = self.courses.get(course_id)
        if course is None:
            raise NotFoundError("Course not found")
        return course

    def _delete_blobs(self, urls: Iterable[str]) -> int:
        failed = 0
        for url in urls:
            if not url:
                continue
            try:
                self.media.delete(url)
            except Exception:
                failed += 1
                logger.warning("blob delete failed url=%s", url, exc_info=True)
        return failed

    def _commit(self, operation: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("store failure op=%s", operation)
            raise StoreFailure() from e


def course_response(course: Course) -> CourseResponse:
    module = course.module
    badge = course.badge
    creator = course.creator
    return CourseResponse(
        id=course.id,
        title=course.title,
        description=course.description,
        thumbnail=course.thumbnail,
        module=ModuleResponse(id=module.id, name=module.name, slug=module.slug, description=module.description)
        if module is not None
        else None,
        chapters=[
            ChapterResponse(
                id=ch.id,
                title=ch.title,
                description=ch.description,
                content=[ContentItem(type=c.type, url=c.url) for c in ch.content],
            )
            for ch in course.chapters
        ],
        badge=CourseBadgeResponse(id=badge.id, name=badge.name, description=badge.description, image=badge.image)
        if badge is not None
        else None,
        created_by=CreatorResponse(id=creator.id, name=creator.name, email=creator.email) if creator is not None else None,
        created_at=iso_format(course.created_at),
    )
