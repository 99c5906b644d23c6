"""
API Dependencies — repositories and shared services.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from app.domain.models.pet import Pet
from app.domain.models.user import User
from app.domain.repositories.pet_repository import PetRepository
from app.domain.repositories.user_repository import UserRepository
from app.infrastructure.database import get_db
from app.infrastructure.geolocation import GeoLocationService, geolocation_service
from app.infrastructure.qr_code import QRCodeService, qr_code_service
from app.infrastructure.repositories.pet_repository import SQLAlchemyPetRepository
from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get user repository instance."""
    return SQLAlchemyUserRepository(db, User)


def get_pet_repository(db: Session = Depends(get_db)) -> PetRepository:
    """Get pet repository instance."""
    return SQLAlchemyPetRepository(db, Pet)


def get_geolocation_service() -> GeoLocationService:
    return geolocation_service


def get_qr_code_service() -> QRCodeService:
    return qr_code_service
