"""Pet domain models — pets, their phone contacts and their view history."""

import secrets
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from app.core.constants import SYSTEM_ACTOR, UNIQUE_ID_ALPHABET, UNIQUE_ID_LENGTH
from app.infrastructure.database import Base, new_object_id


def generate_unique_id() -> str:
    """Public short identifier used in QR codes and links."""
    return "".join(secrets.choice(UNIQUE_ID_ALPHABET) for _ in range(UNIQUE_ID_LENGTH))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Pet(Base):
    __tablename__ = "pets"

    id = Column(String(24), primary_key=True, default=new_object_id)
    unique_id = Column(String(32), unique=True, nullable=False, index=True, default=generate_unique_id)
    photo = Column(Text, nullable=False, default="")
    name = Column(String(200), nullable=False)
    owner = Column(String(200), nullable=False)
    # No FK: deleting a user leaves their pets for reassignment
    owner_id = Column(String(24), nullable=False, index=True)
    species = Column(String(100), nullable=False)
    zone = Column(String(200), nullable=False)
    birthdate = Column(String(50), nullable=False)
    notes = Column(Text, nullable=False, default="")
    is_lost = Column(Boolean, nullable=False, default=False)
    qr_code = Column(Text, nullable=False, default="")

    created_by = Column(String(200), nullable=False, default=SYSTEM_ACTOR)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    last_modified_by = Column(String(200), nullable=False, default=SYSTEM_ACTOR)
    last_modified_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    phone = relationship(
        "PetPhone",
        cascade="all, delete-orphan",
        order_by="PetPhone.position",
        lazy="selectin",
    )
    view_history = relationship(
        "PetView",
        cascade="all, delete-orphan",
        order_by="PetView.id",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Pet {self.unique_id} - {self.name}>"


class PetPhone(Base):
    __tablename__ = "pet_phones"

    id = Column(Integer, primary_key=True, autoincrement=True)
    pet_id = Column(String(24), ForeignKey("pets.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    number = Column(String(50), nullable=False)
    owner = Column(String(200), nullable=False)
    is_primary = Column(Boolean, nullable=False, default=False)


class PetView(Base):
    """One public lookup of a pet. Rows are only ever inserted."""

    __tablename__ = "pet_view_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    pet_id = Column(String(24), ForeignKey("pets.id", ondelete="CASCADE"), nullable=False, index=True)
    viewed_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    viewed_by = Column(String(500), nullable=False)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(Text, nullable=True)
    device_used = Column(JSON, nullable=True)  # {type, brand, model, os}
    location = Column(JSON, nullable=True)  # {country, city, region, coordinates, timezone, isp}
