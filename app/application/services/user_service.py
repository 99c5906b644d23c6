"""User service — listing, profile, update and removal of accounts."""

import logging
from typing import List

from app.application.services.auth_service import hash_password
from app.core.constants import ErrorMessages, Role
from app.core.exceptions import ConflictException, EntityNotFoundException, ForbiddenException
from app.domain.models.user import User
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import UserUpdate

logger = logging.getLogger(__name__)


def list_users(repo: UserRepository) -> List[User]:
    return repo.list()


def get_user(repo: UserRepository, user_id: str) -> User:
    user = repo.get_by_id(user_id)
    if not user:
        raise EntityNotFoundException(ErrorMessages.USER_NOT_FOUND)
    return user


def update_user(repo: UserRepository, caller, user_id: str, changes: UserUpdate) -> User:
    """Administrators may update anyone; other users only themselves and never their role."""
    is_admin = caller.role == Role.ADMIN
    if not is_admin and caller.id != user_id:
        raise ForbiddenException(ErrorMessages.ONLY_OWN_PROFILE)

    data = changes.model_dump(exclude_unset=True)
    if "user_type" in data and not is_admin:
        raise ForbiddenException(ErrorMessages.ONLY_ADMIN_ROLE_CHANGE)

    user = get_user(repo, user_id)

    if repo.find_conflict(user.id, data.get("email"), data.get("username")):
        raise ConflictException(ErrorMessages.USER_EXISTS)

    password = data.pop("password", None)
    if password:
        data["password_hash"] = hash_password(password)

    try:
        updated = repo.update(user, data)
    except ConflictException:
        raise ConflictException(ErrorMessages.USER_EXISTS)

    logger.info(f"User {updated.id} updated by {caller.id}")
    return updated


def delete_user(repo: UserRepository, user_id: str) -> None:
    if not repo.delete(user_id):
        raise EntityNotFoundException(ErrorMessages.USER_NOT_FOUND)
    logger.info(f"User {user_id} deleted")
