from typing import Optional

from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from portal.errors import ConflictError, ForbiddenError, StoreFailure, UnauthorizedError
from portal.models.models import User
from portal.repositories.user_repository import UserRepository
from portal.schemas.user_schemas import Principal, Role
from portal.utils.common import display_name
from portal.utils.jwt import get_password_hash, verify_password, verify_token
from portal.utils.logger import configure_logging, set_user_id

logger = configure_logging()

bearer = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    access_token: Optional[str] = Cookie(None),
) -> Principal:
    """
    Identity gate: resolve the bearer credential (or the access_token cookie)
    to the caller's id and role. Does not load the user.
    """
    token = credentials.credentials if credentials is not None else access_token
    if not token:
        raise UnauthorizedError("Authentication required")

    payload = verify_token(token)
    try:
        user_id = int(payload.sub)
    except ValueError as e:
        raise UnauthorizedError("Invalid token") from e
    set_user_id(user_id)
    return Principal(id=user_id, role=payload.role)


def require_roles(*roles: Role):
    """Dependency factory: the caller must hold one of `roles`."""
    allowed = set(roles)

    def _check(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in allowed:
            raise ForbiddenError("Not authorized")
        return principal

    return _check


require_staff = require_roles(Role.ADMIN, Role.TEACHER)
require_admin = require_roles(Role.ADMIN)


def create_user(email: str, password: str, name: str, db: Session, role: Role = Role.USER) -> User:
    users = UserRepository(db)
    if users.get_by_email(email) is not None:
        raise ConflictError("Email already registered")
    try:
        user = users.create(
            email=email,
            hashed_password=get_password_hash(password),
            name=display_name(name, email),
            role=role.value,
        )
        db.commit()
        db.refresh(user)
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("Email already registered") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("store failure op=create_user")
        raise StoreFailure() from e
    logger.info("user registered user=%s role=%s", user.id, user.role)
    return user


def authenticate_user(email: str, password: str, db: Session) -> User | None:
    user = UserRepository(db).get_by_email(email)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user
