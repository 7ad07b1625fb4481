from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr

from portal.schemas.user_schemas import Role


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    name: str


class AuthUser(BaseModel):
    id: int
    email: str
    name: str
    role: Role


class AuthResponse(BaseModel):
    token: str
    user: AuthUser


class AuthTokenPayload(BaseModel):
    sub: str  # user id
    role: Role = Role.USER
    exp: Optional[datetime] = None
