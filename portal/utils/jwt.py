from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError
from jose.jwt import encode, decode

from portal.config import settings
from portal.errors import UnauthorizedError
from portal.schemas.auth_schemas import AuthTokenPayload
from portal.schemas.user_schemas import Role
from portal.utils.logger import configure_logging

ALGORITHM = "HS256"

logger = configure_logging()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        logger.warning("malformed password hash")
        return False


def get_password_hash(password: str) -> str:
    """Hash a password for storing."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def create_access_token(user_id: int, role: Role, expires_minutes: Optional[int] = None) -> str:
    """Create a JWT access token carrying the user id and role."""
    minutes = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    claims = {
        "sub": str(user_id),
        "role": Role(role).value,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
    }
    return encode(claims, settings.secret_key, algorithm=ALGORITHM)


def verify_token(token: Optional[str]) -> AuthTokenPayload:
    if not token:
        raise UnauthorizedError("Missing token")
    try:
        payload = decode(token, settings.secret_key, algorithms=[ALGORITHM])
        return AuthTokenPayload(**payload)
    except (JWTError, ValueError) as e:
        logger.warning("token rejected error=%s", type(e).__name__)
        raise UnauthorizedError("Invalid token") from e
