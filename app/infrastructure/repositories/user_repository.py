"""
SQLAlchemy Implementation of User Repository.
"""

from typing import Optional

from sqlalchemy import or_

from app.domain.models.user import User
from app.domain.repositories.user_repository import UserRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):
    """User repository implementation using SQLAlchemy."""

    def list(self, skip: int = 0, limit: int | None = None):
        query = self.db.query(User).order_by(User.created_at.asc()).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_by_email_or_username(self, email: str, username: str) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(or_(User.email == email, User.username == username))
            .first()
        )

    def find_conflict(self, user_id: str, email: str | None, username: str | None) -> Optional[User]:
        clauses = []
        if email is not None:
            clauses.append(User.email == email)
        if username is not None:
            clauses.append(User.username == username)
        if not clauses:
            return None
        return (
            self.db.query(User)
            .filter(User.id != user_id, or_(*clauses))
            .first()
        )
