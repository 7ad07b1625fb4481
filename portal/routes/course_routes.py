"""
Course endpoints: listing by subscription, creation with uploads, chapter
completion, and cascading deletes.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from portal.config import get_db
from portal.schemas.course_schemas import CompleteChapterResponse, CourseResponse, MessageResponse
from portal.schemas.user_schemas import Principal
from portal.services.completion_service import CompletionService
from portal.services.course_service import CourseService, course_response
from portal.services.media_service import MediaStorage, Upload, get_media_storage
from portal.utils.auth import get_current_principal, require_staff

course_routes = APIRouter()


def get_course_service(
    db: Session = Depends(get_db),
    media: MediaStorage = Depends(get_media_storage),
) -> CourseService:
    return CourseService(db, media)


def get_completion_service(db: Session = Depends(get_db)) -> CompletionService:
    return CompletionService.for_session(db)


async def _read_upload(file: UploadFile) -> Upload:
    return Upload(
        filename=file.filename or "",
        content_type=file.content_type or "application/octet-stream",
        data=await file.read(),
    )


@course_routes.get("", response_model=list[CourseResponse])
async def list_courses(
    principal: Principal = Depends(get_current_principal),
    courses: CourseService = Depends(get_course_service),
) -> list[CourseResponse]:
    """Staff see all courses; users see courses of the modules they subscribe to."""
    return [course_response(c) for c in courses.list_visible(principal)]


@course_routes.get("/{course_id}", response_model=CourseResponse)
async def get_course(
    course_id: str,
    principal: Principal = Depends(get_current_principal),
    courses: CourseService = Depends(get_course_service),
) -> CourseResponse:
    return course_response(courses.get_visible(principal, course_id))


@course_routes.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
async def create_course(
    title: str = Form(...),
    description: str = Form(...),
    module: str = Form(...),
    thumbnail: Optional[UploadFile] = File(None),
    principal: Principal = Depends(require_staff),
    courses: CourseService = Depends(get_course_service),
) -> CourseResponse:
    """Create a course in an existing module (admin/teacher)."""
    thumb = await _read_upload(thumbnail) if thumbnail is not None else None
    course = courses.create_course(principal, title=title, description=description, module_id=module, thumbnail=thumb)
    return course_response(course)


@course_routes.post("/{course_id}/chapters", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
async def add_chapter(
    course_id: str,
    title: str = Form(...),
    description: str = Form(...),
    files: list[UploadFile] = File(default=[]),
    principal: Principal = Depends(require_staff),
    courses: CourseService = Depends(get_course_service),
) -> CourseResponse:
    """Append a chapter; each uploaded file becomes one content item (admin/teacher)."""
    uploads = [await _read_upload(f) for f in files]
    course = courses.add_chapter(course_id, title=title, description=description, uploads=uploads)
    return course_response(course)


@course_routes.post("/{course_id}/chapters/{chapter_id}/complete", response_model=CompleteChapterResponse)
async def complete_chapter(
    course_id: str,
    chapter_id: str,
    principal: Principal = Depends(get_current_principal),
    completion: CompletionService = Depends(get_completion_service),
) -> CompleteChapterResponse:
    """
    Mark a chapter complete for the caller. Safe to repeat. Returns the freshly
    reloaded user so the client never reconstructs completion state itself.
    """
    result = completion.complete_chapter(principal.id, course_id, chapter_id)
    return CompleteChapterResponse(message=result.message, user=result.user)


@course_routes.delete("/{course_id}/chapters/{chapter_id}", response_model=MessageResponse)
async def delete_chapter(
    course_id: str,
    chapter_id: str,
    principal: Principal = Depends(require_staff),
    courses: CourseService = Depends(get_course_service),
) -> MessageResponse:
    courses.delete_chapter(course_id, chapter_id)
    return MessageResponse(message="Chapter deleted")


@course_routes.delete("/{course_id}", response_model=MessageResponse)
async def delete_course(
    course_id: str,
    principal: Principal = Depends(require_staff),
    courses: CourseService = Depends(get_course_service),
) -> MessageResponse:
    courses.delete_course(course_id)
    return MessageResponse(message="Course deleted")
