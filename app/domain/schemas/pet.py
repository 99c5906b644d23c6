"""Pydantic schemas for Pet domain."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.domain.schemas.base import CamelModel


class PhoneContact(CamelModel):
    number: str
    owner: str
    is_primary: bool = False


class PetBase(CamelModel):
    name: str
    owner: str
    species: str
    zone: str
    birthdate: str
    phone: list[PhoneContact] = Field(min_length=1)


class PetCreate(PetBase):
    photo: str = ""
    notes: str = ""
    is_lost: bool = False
    owner_id: Optional[str] = None


class PetUpdate(PetBase):
    photo: Optional[str] = None
    notes: Optional[str] = None
    is_lost: Optional[bool] = None
    owner_id: Optional[str] = None


class Coordinates(CamelModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class Location(CamelModel):
    country: str = "unknown"
    city: str = "unknown"
    region: str = "unknown"
    coordinates: Coordinates = Coordinates()
    timezone: str = "unknown"
    isp: str = "unknown"


class DeviceInfo(CamelModel):
    type: str = "desktop"
    brand: str = "unknown"
    model: str = "unknown"
    os: str = "unknown"


class ViewHistoryEntry(CamelModel):
    viewed_at: datetime
    viewed_by: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    device_used: Optional[DeviceInfo] = None
    location: Optional[Location] = None


class PetRead(CamelModel):
    id: str
    unique_id: str
    photo: str = ""
    name: str
    owner: str
    owner_id: str
    species: str
    zone: str
    birthdate: str
    notes: str = ""
    phone: list[PhoneContact] = []
    is_lost: bool = False
    qr_code: str = ""
    view_history: list[ViewHistoryEntry] = []
    created_by: str
    created_at: datetime
    last_modified_by: str
    last_modified_at: datetime


class PetHistory(CamelModel):
    pet_id: str
    unique_id: str
    name: str
    view_history: list[ViewHistoryEntry] = []
