"""
Pet Repository Interface.
Pets are addressable by storage id or by their public short id.
"""

from typing import List, Optional

from app.domain.repositories.base import BaseRepository
from app.domain.models.pet import Pet


class PetRepository(BaseRepository[Pet]):
    """Interface for Pet-specific operations."""

    def get_by_unique_id(self, unique_id: str) -> Optional[Pet]:
        ...

    def find_by_any_id(self, identifier: str) -> Optional[Pet]:
        """Resolve a storage id (24 hex chars) or, failing the format check, a short id."""
        ...

    def list_by_owner(self, owner_id: str) -> List[Pet]:
        ...

    def replace_phones(self, pet: Pet, phones: List[dict]) -> None:
        """Stage a full replacement of the pet's phone contacts."""
        ...

    def set_qr_code(self, pet: Pet, qr_code: str) -> Pet:
        ...

    def add_view(self, pet: Pet, entry: dict) -> Pet:
        """Append one view-history entry."""
        ...
