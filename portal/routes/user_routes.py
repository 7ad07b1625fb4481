"""
User profile and module subscription endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal.config import get_db
from portal.schemas.user_schemas import (
    Principal,
    SubscribeRequest,
    SubscriptionResponse,
    UpdateProfileRequest,
    UserSnapshot,
)
from portal.services.user_service import UserService
from portal.utils.auth import get_current_principal

user_routes = APIRouter()


@user_routes.get("/profile", response_model=UserSnapshot)
async def get_profile(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> UserSnapshot:
    """Profile with progress, completed courses, badges and subscriptions."""
    return UserService(db).snapshot(principal.id)


@user_routes.put("/profile", response_model=UserSnapshot)
async def update_profile(
    body: UpdateProfileRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> UserSnapshot:
    return UserService(db).update_profile(principal.id, name=body.name)


@user_routes.post("/subscribe", response_model=SubscriptionResponse)
async def subscribe(
    body: SubscribeRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> SubscriptionResponse:
    """Subscribe to a module to see its courses. Subscribing twice is a no-op."""
    modules = UserService(db).subscribe(principal.id, body.module)
    return SubscriptionResponse(message="Subscribed", subscribed_modules=modules)


@user_routes.post("/unsubscribe", response_model=SubscriptionResponse)
async def unsubscribe(
    body: SubscribeRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> SubscriptionResponse:
    modules = UserService(db).unsubscribe(principal.id, body.module)
    return SubscriptionResponse(message="Unsubscribed", subscribed_modules=modules)
