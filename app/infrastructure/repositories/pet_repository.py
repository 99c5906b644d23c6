"""
SQLAlchemy Implementation of Pet Repository.
"""

from typing import List, Optional

from app.core.constants import OBJECT_ID_REGEX
from app.domain.models.pet import Pet, PetPhone, PetView
from app.domain.repositories.pet_repository import PetRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


def is_storage_id(identifier: str) -> bool:
    return bool(OBJECT_ID_REGEX.match(identifier or ""))


class SQLAlchemyPetRepository(SQLAlchemyRepository[Pet], PetRepository):
    """Pet repository implementation using SQLAlchemy."""

    def list(self, skip: int = 0, limit: int | None = None) -> List[Pet]:
        query = self.db.query(Pet).order_by(Pet.created_at.asc()).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def get_by_unique_id(self, unique_id: str) -> Optional[Pet]:
        return self.db.query(Pet).filter(Pet.unique_id == unique_id).first()

    def find_by_any_id(self, identifier: str) -> Optional[Pet]:
        if is_storage_id(identifier):
            return self.get_by_id(identifier.lower())
        return self.get_by_unique_id(identifier)

    def list_by_owner(self, owner_id: str) -> List[Pet]:
        return (
            self.db.query(Pet)
            .filter(Pet.owner_id == owner_id)
            .order_by(Pet.created_at.asc())
            .all()
        )

    def create(self, obj_in) -> Pet:
        data = dict(obj_in)
        phones = data.pop("phone", [])
        pet = Pet(**data)
        pet.phone = [PetPhone(position=i, **p) for i, p in enumerate(phones)]
        self.db.add(pet)
        self.commit()
        self.db.refresh(pet)
        return pet

    def replace_phones(self, pet: Pet, phones: List[dict]) -> None:
        pet.phone = [PetPhone(position=i, **p) for i, p in enumerate(phones)]

    def set_qr_code(self, pet: Pet, qr_code: str) -> Pet:
        pet.qr_code = qr_code
        self.commit()
        self.db.refresh(pet)
        return pet

    def add_view(self, pet: Pet, entry: dict) -> Pet:
        pet.view_history.append(PetView(**entry))
        self.commit()
        self.db.refresh(pet)
        return pet
