"""Pet API routes: registry CRUD, public lookup and view history."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from app.application.services import pet_service
from app.application.validation import validate_pet_data, validate_pet_update, validated_body
from app.core import responses
from app.core.permissions import Permission
from app.core.rate_limit import client_key, create_limiter
from app.domain.repositories.pet_repository import PetRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.pet import PetCreate, PetHistory, PetRead, PetUpdate
from app.infrastructure.geolocation import GeoLocationService
from app.infrastructure.qr_code import QRCodeService
from app.interfaces.api.deps import (
    CurrentUser,
    PetAccess,
    can_edit_own_pet,
    can_view_own_pets,
    can_view_pet,
    get_current_user,
    require_permission,
)
from app.interfaces.deps import (
    get_geolocation_service,
    get_pet_repository,
    get_qr_code_service,
    get_user_repository,
)

router = APIRouter(prefix="/api/pets", tags=["Pets"])

EMPTY_PETS = "No se encontraron mascotas"


def _read_all(pets) -> list:
    return [PetRead.model_validate(p) for p in pets]


@router.post("", status_code=201, dependencies=[Depends(create_limiter)])
def create_pet(
    user: CurrentUser = Depends(require_permission(Permission.MANAGE_ALL_PETS)),
    body: dict = Depends(validated_body(validate_pet_data)),
    repo: PetRepository = Depends(get_pet_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    qr_service: QRCodeService = Depends(get_qr_code_service),
):
    """Register a pet and attach the QR code pointing at its public page."""
    payload = PetCreate.model_validate(body)
    pet = pet_service.create_pet(repo, user_repo, qr_service, user, payload)
    return responses.created("Mascota creada exitosamente", PetRead.model_validate(pet))


@router.get("")
def list_pets(
    repo: PetRepository = Depends(get_pet_repository),
    user: CurrentUser = Depends(can_view_own_pets),
):
    pets = _read_all(pet_service.list_pets_for(repo, user))
    return responses.list_or_empty(pets, "Mascotas obtenidas exitosamente", EMPTY_PETS)


@router.get("/my-pets")
def my_pets(
    repo: PetRepository = Depends(get_pet_repository),
    user: CurrentUser = Depends(get_current_user),
):
    pets = _read_all(repo.list_by_owner(user.id))
    return responses.list_or_empty(pets, "Mascotas obtenidas exitosamente", EMPTY_PETS)


@router.get("/owner/{owner_id}")
def pets_by_owner(
    owner_id: str,
    repo: PetRepository = Depends(get_pet_repository),
    user: CurrentUser = Depends(get_current_user),
):
    pets = _read_all(pet_service.list_pets_by_owner(repo, user, owner_id))
    return responses.list_or_empty(pets, "Mascotas del propietario obtenidas exitosamente", EMPTY_PETS)


@router.get("/{id}/history")
def pet_history(access: PetAccess = Depends(can_view_pet)):
    pet = access.pet
    history = PetHistory.model_validate({
        "pet_id": pet.id,
        "unique_id": pet.unique_id,
        "name": pet.name,
        "view_history": pet.view_history,
    })
    return responses.success("Historial obtenido exitosamente", history)


@router.get("/{id}")
def get_pet(
    id: str,
    request: Request,
    viewed_by: Optional[str] = Query(default=None, alias="viewedBy"),
    repo: PetRepository = Depends(get_pet_repository),
    geo_service: GeoLocationService = Depends(get_geolocation_service),
):
    """Public lookup by storage id or short id. Each call records a view."""
    pet = pet_service.get_public_pet(
        repo,
        geo_service,
        id,
        headers=request.headers,
        ip_address=client_key(request),
        viewed_by=viewed_by,
    )
    return responses.success("Mascota obtenida exitosamente", PetRead.model_validate(pet))


@router.put("/{id}")
def update_pet(
    access: PetAccess = Depends(can_edit_own_pet),
    body: dict = Depends(validated_body(validate_pet_update)),
    repo: PetRepository = Depends(get_pet_repository),
    user_repo: UserRepository = Depends(get_user_repository),
):
    payload = PetUpdate.model_validate(body)
    pet = pet_service.update_pet(repo, user_repo, access.user, access.pet, payload)
    return responses.updated("Mascota actualizada exitosamente", PetRead.model_validate(pet))


@router.delete("/{id}")
def delete_pet(
    id: str,
    repo: PetRepository = Depends(get_pet_repository),
    user: CurrentUser = Depends(require_permission(Permission.DELETE_ALL_PETS)),
):
    pet_service.delete_pet(repo, id)
    return responses.deleted("Mascota eliminada correctamente")
