"""FastAPI dependencies — JWT authentication and permission guards.

Guards return explicit request-scoped values (CurrentUser, PetAccess) that
handlers receive as parameters.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.services.auth_service import decode_access_token
from app.application.services.pet_service import find_pet
from app.core.constants import ErrorMessages, Role
from app.core.exceptions import ForbiddenException, UnauthorizedException
from app.core.permissions import Permission, check_user_permission, is_known_role
from app.domain.models.pet import Pet
from app.domain.repositories.pet_repository import PetRepository
from app.domain.repositories.user_repository import UserRepository
from app.interfaces.deps import get_pet_repository, get_user_repository

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: str
    role: int
    name: str

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class PetAccess:
    """Caller plus the pet an ownership guard already resolved."""
    user: CurrentUser
    pet: Pet


def resolve_token(token: str, repo: UserRepository) -> CurrentUser:
    payload = decode_access_token(token)
    if payload is None or not payload.get("id"):
        raise ForbiddenException(ErrorMessages.INVALID_TOKEN)

    # Identity comes from the stored user, so role or name changes since
    # issuance apply immediately. The token's own userType is not compared.
    user = repo.get_by_id(str(payload["id"]))
    if user is None:
        raise ForbiddenException(ErrorMessages.INVALID_TOKEN)

    return CurrentUser(id=user.id, email=user.email, role=user.user_type, name=user.username)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    repo: UserRepository = Depends(get_user_repository),
) -> CurrentUser:
    """Extract and validate the current user from the bearer token."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException(ErrorMessages.TOKEN_REQUIRED)
    return resolve_token(credentials.credentials, repo)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    repo: UserRepository = Depends(get_user_repository),
) -> Optional[CurrentUser]:
    """Caller when a bearer token is sent, None otherwise. A bad token still fails."""
    if credentials is None or not credentials.credentials:
        return None
    return resolve_token(credentials.credentials, repo)


def ensure_permission(user: Optional[CurrentUser], permission: Permission) -> CurrentUser:
    if user is None:
        raise UnauthorizedException(ErrorMessages.AUTH_REQUIRED)
    if not check_user_permission(user.role, permission):
        raise ForbiddenException(ErrorMessages.INSUFFICIENT_PERMISSIONS)
    return user


def require_permission(permission: Permission):
    """Dependency factory gating a route on one capability."""

    def guard(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        return ensure_permission(user, permission)

    return guard


def can_view_own_pets(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Any known role may list pets; the handler narrows owners to their own."""
    if not is_known_role(user.role):
        raise ForbiddenException(ErrorMessages.INVALID_USER_TYPE)
    return user


def ensure_pet_access(
    user: Optional[CurrentUser],
    repo: PetRepository,
    identifier: str,
    denied_message: str,
) -> PetAccess:
    """
    Resolve the pet by storage id or short id and check ownership.
    Administrators pass regardless of the owner.
    """
    if user is None:
        raise UnauthorizedException(ErrorMessages.AUTH_REQUIRED)
    if not is_known_role(user.role):
        raise ForbiddenException(ErrorMessages.INVALID_USER_TYPE)

    pet = find_pet(repo, identifier)
    if not user.is_admin and pet.owner_id != user.id:
        raise ForbiddenException(denied_message)
    return PetAccess(user=user, pet=pet)


def can_edit_own_pet(
    id: str,
    user: CurrentUser = Depends(get_current_user),
    repo: PetRepository = Depends(get_pet_repository),
) -> PetAccess:
    return ensure_pet_access(user, repo, id, ErrorMessages.ONLY_EDIT_OWN_PETS)


def can_view_pet(
    id: str,
    user: CurrentUser = Depends(get_current_user),
    repo: PetRepository = Depends(get_pet_repository),
) -> PetAccess:
    return ensure_pet_access(user, repo, id, ErrorMessages.ONLY_VIEW_OWN_PETS)
