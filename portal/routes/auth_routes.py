"""
Registration and login. Both return a bearer token plus the public user fields.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from portal.config import get_db
from portal.errors import UnauthorizedError
from portal.models.models import User
from portal.schemas.auth_schemas import AuthResponse, AuthUser, LoginRequest, RegisterRequest
from portal.schemas.user_schemas import Principal, Role, UserSnapshot
from portal.services.user_service import UserService
from portal.utils.auth import authenticate_user, create_user, get_current_principal
from portal.utils.jwt import create_access_token

auth_routes = APIRouter()


def _auth_response(user: User) -> AuthResponse:
    role = Role(user.role)
    return AuthResponse(
        token=create_access_token(user.id, role),
        user=AuthUser(id=user.id, email=user.email, name=user.name, role=role),
    )


@auth_routes.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, db: Session = Depends(get_db)) -> AuthResponse:
    """Register a new user (role `user`)."""
    user = create_user(request.email, request.password, request.name, db)
    return _auth_response(user)


@auth_routes.post("/login", response_model=AuthResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)) -> AuthResponse:
    user = authenticate_user(request.email, request.password, db)
    if user is None:
        raise UnauthorizedError("Invalid credentials")
    return _auth_response(user)


@auth_routes.get("/me", response_model=UserSnapshot)
def me(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)) -> UserSnapshot:
    """Protected route: the caller's current snapshot."""
    return UserService(db).snapshot(principal.id)
