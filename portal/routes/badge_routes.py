from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal.config import get_db
from portal.repositories.badge_repository import BadgeRepository
from portal.schemas.badge_schemas import BadgeResponse
from portal.services.badge_issuer import BadgeIssuer

badge_routes = APIRouter()


@badge_routes.get("", response_model=list[BadgeResponse])
async def list_badges(db: Session = Depends(get_db)) -> list[BadgeResponse]:
    """All course badges with their earners (public)."""
    return BadgeIssuer(BadgeRepository(db)).list_badges()
