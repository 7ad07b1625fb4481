"""
History ledger endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal.config import get_db
from portal.errors import NotFoundError
from portal.repositories.history_repository import HistoryRepository
from portal.schemas.history_schemas import HistoryEntryResponse, MyHistoryResponse
from portal.schemas.user_schemas import Principal
from portal.services.history_recorder import HistoryRecorder, history_response, stats
from portal.utils.auth import get_current_principal, require_admin

history_routes = APIRouter()


def get_history_recorder(db: Session = Depends(get_db)) -> HistoryRecorder:
    return HistoryRecorder(HistoryRepository(db))


@history_routes.get("/me", response_model=MyHistoryResponse)
@history_routes.get("/my-history", response_model=MyHistoryResponse, include_in_schema=False)
async def my_history(
    principal: Principal = Depends(get_current_principal),
    history: HistoryRecorder = Depends(get_history_recorder),
) -> MyHistoryResponse:
    """Caller's history, most recent completion first, with per-category stats."""
    entries = history.for_user(principal.id)
    return MyHistoryResponse(history=[history_response(e) for e in entries], stats=stats(entries))


@history_routes.get("/course/{course_id}", response_model=HistoryEntryResponse)
async def course_history(
    course_id: str,
    principal: Principal = Depends(get_current_principal),
    history: HistoryRecorder = Depends(get_history_recorder),
) -> HistoryEntryResponse:
    entry = history.for_course(principal.id, course_id)
    if entry is None:
        raise NotFoundError("No history found for this course")
    return history_response(entry)


@history_routes.get("/all", response_model=list[HistoryEntryResponse])
async def all_history(
    principal: Principal = Depends(require_admin),
    history: HistoryRecorder = Depends(get_history_recorder),
) -> list[HistoryEntryResponse]:
    """Every user's history (admin)."""
    return [history_response(e, include_user=True) for e in history.all_entries()]
