"""Pydantic schemas for User and Auth."""

from datetime import datetime
from typing import Optional

from app.domain.schemas.base import CamelModel


class RegisterRequest(CamelModel):
    username: str
    email: str
    password: str
    user_type: int = 2


class LoginRequest(CamelModel):
    email: str
    password: str


class UserUpdate(CamelModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    user_type: Optional[int] = None


class UserSummary(CamelModel):
    id: str
    username: str
    email: str
    user_type: int


class UserRead(UserSummary):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserProfile(UserRead):
    permissions: dict[str, bool] = {}


class TokenResponse(CamelModel):
    token: str
    user: UserRead
