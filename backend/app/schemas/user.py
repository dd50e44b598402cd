from typing import Optional
from app.schemas.base import CamelModel


class UserSignup(CamelModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class UserLogin(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserPublic(CamelModel):
    """Owner projection; the password hash is never part of it."""

    id: int
    username: str
    email: str


class AuthResult(CamelModel):
    message: str
    user: UserPublic
    token: str


class CurrentUser(CamelModel):
    user: UserPublic
