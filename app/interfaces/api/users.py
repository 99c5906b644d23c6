"""User API routes: listing, profile, update and deletion."""

from fastapi import APIRouter, Depends

from app.application.services import user_service
from app.application.validation import validate_user_update, validated_body
from app.core import responses
from app.core.permissions import Permission, permissions_for
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import UserProfile, UserRead, UserUpdate
from app.interfaces.api.deps import CurrentUser, get_current_user, require_permission
from app.interfaces.deps import get_user_repository

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("")
def list_users(
    repo: UserRepository = Depends(get_user_repository),
    user: CurrentUser = Depends(require_permission(Permission.MANAGE_USERS)),
):
    users = [UserRead.model_validate(u) for u in user_service.list_users(repo)]
    return responses.list_or_empty(users, "Usuarios obtenidos exitosamente", "No se encontraron usuarios")


@router.get("/profile")
def get_profile(
    repo: UserRepository = Depends(get_user_repository),
    user: CurrentUser = Depends(get_current_user),
):
    """Caller's own account with its capability map."""
    stored = user_service.get_user(repo, user.id)
    profile = UserProfile.model_validate(stored)
    profile.permissions = permissions_for(stored.user_type)
    return responses.success("Perfil obtenido exitosamente", profile)


@router.get("/{id}")
def get_user(
    id: str,
    repo: UserRepository = Depends(get_user_repository),
    user: CurrentUser = Depends(require_permission(Permission.MANAGE_USERS)),
):
    found = user_service.get_user(repo, id)
    return responses.success("Usuario obtenido exitosamente", UserRead.model_validate(found))


@router.put("/{id}")
def update_user(
    id: str,
    user: CurrentUser = Depends(get_current_user),
    body: dict = Depends(validated_body(validate_user_update)),
    repo: UserRepository = Depends(get_user_repository),
):
    changes = UserUpdate.model_validate(body)
    updated = user_service.update_user(repo, user, id, changes)
    return responses.updated("Usuario actualizado exitosamente", UserRead.model_validate(updated))


@router.delete("/{id}")
def delete_user(
    id: str,
    repo: UserRepository = Depends(get_user_repository),
    user: CurrentUser = Depends(require_permission(Permission.DELETE_ALL_USERS)),
):
    user_service.delete_user(repo, id)
    return responses.deleted("Usuario eliminado exitosamente")
