"""Pet service — registry CRUD, QR attachment and view-history tracking."""

import logging
from datetime import datetime, timezone
from typing import List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from app.config import get_settings
from app.core.constants import SYSTEM_ACTOR, UNKNOWN, ErrorMessages, Role
from app.core.exceptions import (
    AppError,
    EntityNotFoundException,
    ForbiddenException,
    ValidationException,
)
from app.domain.models.pet import Pet
from app.domain.repositories.pet_repository import PetRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.pet import PetCreate, PetUpdate
from app.infrastructure.geolocation import GeoLocationService, default_ip_info
from app.infrastructure.qr_code import QRCodeService

settings = get_settings()
logger = logging.getLogger(__name__)


def actor_name(caller) -> str:
    return getattr(caller, "name", None) or SYSTEM_ACTOR


def find_pet(repo: PetRepository, identifier: str) -> Pet:
    pet = repo.find_by_any_id(identifier)
    if not pet:
        raise EntityNotFoundException(ErrorMessages.PET_NOT_FOUND)
    return pet


def create_pet(
    repo: PetRepository,
    user_repo: UserRepository,
    qr_service: QRCodeService,
    caller,
    payload: PetCreate,
    base_url: Optional[str] = None,
) -> Pet:
    """
    Two writes, not one transaction: the pet is stored first (its uniqueId is
    generated on insert), then the rendered QR is attached. A failure between
    the two leaves the pet with an empty qrCode until its next update.
    """
    owner_id = payload.owner_id or caller.id
    if owner_id != caller.id and not user_repo.get_by_id(owner_id):
        raise ValidationException(ErrorMessages.OWNER_NOT_FOUND)

    data = payload.model_dump(exclude={"owner_id"})
    data.update({
        "owner_id": owner_id,
        "created_by": actor_name(caller),
        "last_modified_by": actor_name(caller),
    })
    pet = repo.create(data)

    qr_code = qr_service.generate_qr_code(pet.unique_id, base_url or settings.BASE_URL)
    pet = repo.set_qr_code(pet, qr_code)

    logger.info(f"Pet {pet.unique_id} created for owner {owner_id} by {caller.id}")
    return pet


def list_pets_for(repo: PetRepository, caller) -> List[Pet]:
    """Administrators see every pet, owners only their own."""
    if caller.role == Role.ADMIN:
        return repo.list()
    return repo.list_by_owner(caller.id)


def list_pets_by_owner(repo: PetRepository, caller, owner_id: str) -> List[Pet]:
    if caller.role != Role.ADMIN and caller.id != owner_id:
        raise ForbiddenException(ErrorMessages.ONLY_VIEW_OWN_PETS)
    return repo.list_by_owner(owner_id)


def update_pet(
    repo: PetRepository,
    user_repo: UserRepository,
    caller,
    pet: Pet,
    payload: PetUpdate,
) -> Pet:
    data = payload.model_dump(exclude_unset=True, exclude_none=True, exclude={"phone", "owner_id"})

    if payload.owner_id and payload.owner_id != pet.owner_id:
        # Ownership transfer is an administrator action; owners' requests keep the current owner
        if caller.role == Role.ADMIN:
            if not user_repo.get_by_id(payload.owner_id):
                raise ValidationException(ErrorMessages.OWNER_NOT_FOUND)
            data["owner_id"] = payload.owner_id

    repo.replace_phones(pet, [p.model_dump() for p in payload.phone])
    data.update({
        "last_modified_by": actor_name(caller),
        "last_modified_at": datetime.now(timezone.utc),
    })
    updated = repo.update(pet, data)
    logger.info(f"Pet {updated.unique_id} updated by {caller.id}")
    return updated


def delete_pet(repo: PetRepository, identifier: str) -> None:
    pet = find_pet(repo, identifier)
    repo.delete(pet.id)
    logger.info(f"Pet {pet.unique_id} deleted")


def get_device_info(headers: Mapping[str, str]) -> dict:
    """Coarse device guess from client hints, falling back to the user agent."""
    user_agent = headers.get("user-agent", "")
    platform = (headers.get("sec-ch-ua-platform") or "").strip('"')
    mobile_hint = headers.get("sec-ch-ua-mobile")

    if "tablet" in platform.lower() or "iPad" in user_agent or "Tablet" in user_agent:
        device_type = "tablet"
    elif mobile_hint == "?1" or (mobile_hint is None and "Mobi" in user_agent):
        device_type = "mobile"
    else:
        device_type = "desktop"

    return {
        "type": device_type,
        "brand": platform or UNKNOWN,
        "model": (headers.get("sec-ch-ua-model") or "").strip('"') or UNKNOWN,
        "os": platform or UNKNOWN,
    }


def build_view_entry(
    headers: Mapping[str, str],
    ip_address: Optional[str],
    location: dict,
    viewed_by: Optional[str] = None,
) -> dict:
    user_agent = headers.get("user-agent")
    return {
        "viewed_at": datetime.now(timezone.utc),
        "viewed_by": viewed_by or user_agent or UNKNOWN,
        "ip_address": ip_address,
        "user_agent": user_agent,
        "device_used": get_device_info(headers),
        "location": location,
    }


def get_public_pet(
    repo: PetRepository,
    geo_service: GeoLocationService,
    identifier: str,
    headers: Mapping[str, str],
    ip_address: Optional[str],
    viewed_by: Optional[str] = None,
) -> Pet:
    """
    Public lookup. Every successful fetch appends one view-history entry;
    geolocation or history-write failures are logged and never fail the read.
    """
    pet = find_pet(repo, identifier)

    try:
        location = geo_service.get_ip_info(ip_address)
    except Exception:
        logger.exception(f"Geolocation failed for {ip_address}")
        location = default_ip_info()

    entry = build_view_entry(headers, ip_address, location, viewed_by)
    try:
        pet = repo.add_view(pet, entry)
    except (SQLAlchemyError, AppError):
        logger.exception(f"Could not record view of pet {pet.unique_id}")
        pet = find_pet(repo, identifier)
    return pet
