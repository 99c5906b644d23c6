"""
Repository contract shared by users and pets.
Entities are keyed by a 24-hex storage id; writes commit immediately.
"""

from typing import Any, List, Mapping, Optional, Protocol, TypeVar

T = TypeVar("T")


class BaseRepository(Protocol[T]):

    def get_by_id(self, id: str) -> Optional[T]:
        ...

    def list(self, skip: int = 0, limit: int | None = None) -> List[T]:
        """All entities in creation order; no limit unless one is given."""
        ...

    def create(self, obj_in: Mapping[str, Any]) -> T:
        """Insert and return the refreshed entity. Unique violations raise ConflictException."""
        ...

    def update(self, db_obj: T, obj_in: Mapping[str, Any]) -> T:
        """Apply the given attributes only; unknown keys are ignored."""
        ...

    def delete(self, id: str) -> Optional[T]:
        """Remove and return the entity, or None when nothing had that id."""
        ...
