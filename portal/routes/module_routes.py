from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal.config import get_db
from portal.errors import NotFoundError
from portal.repositories.course_repository import CourseRepository
from portal.schemas.course_schemas import ModuleResponse

module_routes = APIRouter()


def _module_response(m) -> ModuleResponse:
    return ModuleResponse(id=m.id, name=m.name, slug=m.slug, description=m.description)


@module_routes.get("", response_model=list[ModuleResponse])
async def list_modules(db: Session = Depends(get_db)) -> list[ModuleResponse]:
    return [_module_response(m) for m in CourseRepository(db).list_modules()]


@module_routes.get("/{module_id}", response_model=ModuleResponse)
async def get_module(module_id: str, db: Session = Depends(get_db)) -> ModuleResponse:
    module = CourseRepository(db).get_module(module_id)
    if module is None:
        raise NotFoundError("Module not found")
    return _module_response(module)
