"""
User Repository Interface.
Lookups by the unique keys (email, username) on top of generic CRUD.
"""

from typing import Optional

from app.domain.repositories.base import BaseRepository
from app.domain.models.user import User


class UserRepository(BaseRepository[User]):
    """Interface for User-specific operations."""

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def get_by_email_or_username(self, email: str, username: str) -> Optional[User]:
        """First user holding either the email or the username."""
        ...

    def find_conflict(self, user_id: str, email: str | None, username: str | None) -> Optional[User]:
        """Another user already holding `email` or `username`."""
        ...
